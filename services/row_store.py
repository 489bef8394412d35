"""
Row Store Service

Full-fidelity per-recipe row persistence in the key/value store.
"""

import logging

from constants import ROW_KEY_PREFIX, LEGACY_ROWS_KEY
from .rows import parse_row, parse_rows

logger = logging.getLogger(__name__)


def row_key(recipe_name):
    return f"{ROW_KEY_PREFIX}{recipe_name}"


class RowStore:
    """Loads and saves whole row lists, one entry per recipe."""

    def __init__(self, kv):
        self.kv = kv

    def load_rows(self, recipe_name):
        """
        Return the stored rows for a recipe, or None.

        None covers a missing entry as well as any malformed value; the
        caller falls back to rebuilding from profile records.
        """
        raw = self.kv.get_json(row_key(recipe_name))
        if raw is None:
            return None
        rows = parse_rows(raw)
        if rows is None:
            logger.warning("Stored rows for recipe %r are malformed", recipe_name)
        return rows

    def save_rows(self, recipe_name, rows):
        """Overwrite the stored rows for a recipe."""
        self.kv.set_json(row_key(recipe_name), [parse_row(r) for r in rows])

    def delete_rows(self, recipe_name):
        self.kv.delete(row_key(recipe_name))

    def has_rows(self, recipe_name):
        return self.kv.get(row_key(recipe_name)) is not None

    def recipe_names(self):
        """Recipe names that have a stored row entry."""
        return [key[len(ROW_KEY_PREFIX):] for key in self.kv.keys_with_prefix(ROW_KEY_PREFIX)
                if len(key) > len(ROW_KEY_PREFIX)]

    def load_legacy_rows(self):
        """Rows from the single-list layout used before recipes existed."""
        raw = self.kv.get_json(LEGACY_ROWS_KEY)
        if raw is None:
            return None
        return parse_rows(raw)

    def clear_legacy_rows(self):
        self.kv.delete(LEGACY_ROWS_KEY)
