"""
Recipe Lifecycle Service

RecipeSession owns the current recipe, its in-memory working rows and
the pending debounced save, and coordinates the row store, profile
store and ingredient cache on create/switch/delete/save.
"""

import copy
import logging

from constants import DEFAULT_RECIPE, ROW_FIELDS, NUMERIC_ROW_FIELDS
from .directory import list_all_recipe_names
from .numeric import to_number
from .rows import blank_row, compute_row, total_cost, final_price

logger = logging.getLogger(__name__)


class InvalidRecipeName(ValueError):
    """Raised when a recipe name is empty after trimming."""
    pass


def _validate_name(name):
    name = '' if name is None else str(name).strip()
    if not name:
        raise InvalidRecipeName('Recipe name is required')
    return name


class RecipeSession:
    """
    Working state for the single user of the calculator.

    Every instance is independent, so tests can run several side by side
    over different stores.
    """

    def __init__(self, row_store, profile_store, ingredient_cache, settings, debouncer):
        self.row_store = row_store
        self.profile_store = profile_store
        self.ingredient_cache = ingredient_cache
        self.settings = settings
        self.debouncer = debouncer

        self.current_recipe_name = DEFAULT_RECIPE
        self.working_rows = [blank_row()]

    # Startup ------------------------------------------------------------

    def boot(self):
        """Migrate legacy data, then open the saved current recipe."""
        self.migrate_legacy_rows()
        name = self.settings.get_current_recipe() or DEFAULT_RECIPE
        return self.switch_recipe(name, persist_as_current=False)

    def migrate_legacy_rows(self):
        """
        Move rows saved by the pre-recipe layout under Default.

        If Default already has rows they win and the legacy entry is
        simply dropped. Returns True when rows were moved.
        """
        legacy = self.row_store.load_legacy_rows()
        if legacy is None:
            return False

        moved = False
        if not self.row_store.has_rows(DEFAULT_RECIPE):
            self.row_store.save_rows(DEFAULT_RECIPE, legacy or [blank_row()])
            moved = True
            logger.info("Migrated %d legacy rows into %r", len(legacy), DEFAULT_RECIPE)
        self.row_store.clear_legacy_rows()
        return moved

    # Resolution ---------------------------------------------------------

    def ensure_rows(self, recipe_name):
        """
        Resolve the rows of a recipe without changing any state.

        Order: stored full rows, then profile records priced from the
        ingredient cache, then a single blank row.
        """
        rows = self.row_store.load_rows(recipe_name)
        if rows is not None:
            return rows or [blank_row()]

        items = self.profile_store.get_items(recipe_name)
        if items:
            logger.info("Rebuilding %r from %d profile records", recipe_name, len(items))
            return [self._row_from_profile(item) for item in items]

        return [blank_row()]

    def _row_from_profile(self, item):
        name = item['ingredientName']
        cached = self.ingredient_cache.get(name) or {'cost': 0.0, 'amount': 0.0}
        return {
            'name': name,
            'cost': cached['cost'],
            'amount': cached['amount'],
            'recipeAmount': to_number(item['recipeAmount']),
        }

    def list_recipes(self):
        return list_all_recipe_names(self.row_store, self.profile_store)

    # Recipe lifecycle ---------------------------------------------------

    def switch_recipe(self, name, persist_as_current=True):
        """
        Make name the current recipe and return its rows.

        A pending save belongs to the previous recipe (it captured that
        name), so it is written out before the pointer moves. The
        resolved rows are written back so a profile-only recipe gets
        full rows locally.
        """
        self.debouncer.flush()

        self.current_recipe_name = name
        if persist_as_current:
            self.settings.set_current_recipe(name)

        rows = self.ensure_rows(name)

        # a later switch may have moved the pointer while rows resolved
        if self.current_recipe_name == name:
            self.working_rows = rows
            self.row_store.save_rows(self.current_recipe_name, rows)
            logger.info("Switched to recipe %r", name)
        return self.rows()

    def create_recipe(self, name):
        """
        Start a recipe with one blank row and make it current.

        Creating over an existing name discards that recipe's stored rows,
        profile records and metadata first.
        """
        name = _validate_name(name)
        self.debouncer.flush()

        self.profile_store.delete_recipe(name)
        self.row_store.delete_rows(name)
        self.settings.delete_metadata(name)

        self.current_recipe_name = name
        self.settings.set_current_recipe(name)
        self.working_rows = [blank_row()]
        self.row_store.save_rows(name, self.working_rows)
        logger.info("Created recipe %r", name)
        return self.rows()

    def delete_recipe(self, name):
        """
        Remove a recipe from both stores and drop its metadata.

        Deleting the current recipe switches to the first remaining
        recipe, or Default. Default itself is only emptied.
        """
        was_current = name == self.current_recipe_name

        # a failed profile delete leaves the recipe and its pending edits intact
        self.profile_store.delete_recipe(name)
        if was_current:
            self.debouncer.run_exclusive(self.row_store.delete_rows, name)
        else:
            self.row_store.delete_rows(name)
        self.settings.delete_metadata(name)
        logger.info("Deleted recipe %r", name)

        if was_current:
            remaining = [n for n in self.list_recipes() if n != name]
            self.switch_recipe(remaining[0] if remaining else DEFAULT_RECIPE)
        return self.current_recipe_name

    # Row editing --------------------------------------------------------

    def rows(self):
        return copy.deepcopy(self.working_rows)

    def _check_index(self, index):
        if not 0 <= index < len(self.working_rows):
            raise IndexError(f'No row {index} in recipe "{self.current_recipe_name}"')

    def record_edit(self, index, field, value):
        """
        Update one field of a working row and schedule a debounced save.

        Numeric fields are coerced; the name is kept verbatim.
        """
        if field not in ROW_FIELDS:
            raise ValueError(f'Unknown row field "{field}"')
        self._check_index(index)

        row = self.working_rows[index]
        if field in NUMERIC_ROW_FIELDS:
            row[field] = to_number(value)
        else:
            row[field] = '' if value is None else str(value)

        self._schedule_save()
        return {
            'index': index,
            'row': compute_row(row),
            'totalCost': total_cost(self.working_rows),
        }

    def add_row(self):
        self.working_rows.append(blank_row())
        self._save_now()
        return len(self.working_rows) - 1

    def delete_row(self, index):
        """Remove a row; removing the last one leaves a single blank row."""
        self._check_index(index)
        del self.working_rows[index]
        if not self.working_rows:
            self.working_rows = [blank_row()]
        self._save_now()
        return self.rows()

    def reset(self):
        """Discard the current recipe's rows, leaving one blank row."""
        self.working_rows = [blank_row()]
        self._save_now()
        return self.rows()

    def save(self):
        """
        Explicit save: rows to the row store, the reduced projection to
        the profile store, prices to the ingredient cache.
        """
        self._save_now()
        count = self.profile_store.put_items(self.current_recipe_name, self.working_rows)
        logger.info("Saved recipe %r (%d profile records)", self.current_recipe_name, count)
        return count

    def _schedule_save(self):
        self.debouncer.schedule(
            self._persist_rows, self.current_recipe_name, copy.deepcopy(self.working_rows)
        )

    def _save_now(self):
        self.debouncer.run_exclusive(
            self._persist_rows, self.current_recipe_name, copy.deepcopy(self.working_rows)
        )

    def _persist_rows(self, recipe_name, rows):
        self.row_store.save_rows(recipe_name, rows)
        self.ingredient_cache.merge_from_rows(rows)

    def flush(self):
        """Write any pending debounced save now."""
        return self.debouncer.flush()

    # Pricing ------------------------------------------------------------

    def total_cost(self, rows=None):
        return total_cost(self.working_rows if rows is None else rows)

    def final_price(self, total=None, margin_pct=None):
        if total is None:
            total = self.total_cost()
        if margin_pct is None:
            margin_pct = self.settings.get_margin_pct()
        return final_price(total, margin_pct)

    def set_margin(self, value):
        return self.settings.set_margin_pct(value)

    def summary(self):
        """Current recipe with derived values, ready for presentation."""
        margin = self.settings.get_margin_pct()
        total = self.total_cost()
        return {
            'recipe': self.current_recipe_name,
            'rows': [compute_row(row) for row in self.working_rows],
            'totalCost': total,
            'marginPct': margin,
            'finalPrice': final_price(total, margin),
            'meta': self.settings.get_metadata(self.current_recipe_name),
        }

    # Metadata -----------------------------------------------------------

    def set_favorite(self, name, favorite):
        return self.settings.update_metadata(name, favorite=favorite)

    def set_folder(self, name, folder):
        return self.settings.update_metadata(name, folder=folder or '')
