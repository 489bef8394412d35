"""
Ingredient Cache Service

Process-wide last-known cost/amount per ingredient name, used to turn
profile records back into full rows.
"""

import logging

from constants import INGREDIENT_CACHE_KEY
from .numeric import to_number

logger = logging.getLogger(__name__)


def _cache_key(name):
    return str(name).strip() if name is not None else ''


class IngredientCache:

    def __init__(self, kv):
        self.kv = kv

    def all(self):
        data = self.kv.get_json(INGREDIENT_CACHE_KEY, {})
        if not isinstance(data, dict):
            logger.warning("Ingredient cache is not a mapping; starting empty")
            return {}
        return data

    def get(self, name):
        """Return {'cost', 'amount'} for an ingredient, or None."""
        entry = self.all().get(_cache_key(name))
        if not isinstance(entry, dict):
            return None
        return {'cost': to_number(entry.get('cost')), 'amount': to_number(entry.get('amount'))}

    def merge_from_rows(self, rows):
        """
        Upsert one entry per row with a name and a positive cost or amount.

        Zeroed rows are skipped so clearing a row keeps the cached price
        for that ingredient in other recipes.
        """
        updates = {}
        for row in rows:
            name = _cache_key(row.get('name'))
            cost = to_number(row.get('cost'))
            amount = to_number(row.get('amount'))
            if not name or (cost <= 0 and amount <= 0):
                continue
            updates[name] = {'cost': cost, 'amount': amount}
        if updates:
            self._write(updates)
        return len(updates)

    def merge(self, mapping):
        """Upsert entries from an imported mapping; malformed entries are skipped."""
        if not isinstance(mapping, dict):
            return 0
        updates = {}
        for name, entry in mapping.items():
            key = _cache_key(name)
            if not key or not isinstance(entry, dict):
                continue
            updates[key] = {'cost': to_number(entry.get('cost')), 'amount': to_number(entry.get('amount'))}
        if updates:
            self._write(updates)
        return len(updates)

    def _write(self, updates):
        # copy-on-write: never mutate the mapping we just loaded in place
        data = dict(self.all())
        data.update(updates)
        self.kv.set_json(INGREDIENT_CACHE_KEY, data)
