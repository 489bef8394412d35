"""
Services Package

Persistence and business logic for the recipe cost calculator.
"""

from .numeric import to_number

from .rows import (
    blank_row,
    parse_row,
    parse_rows,
    unit_cost,
    line_cost,
    compute_row,
    total_cost,
    final_price,
)

from .kvstore import KeyValueStore
from .row_store import RowStore
from .ingredient_cache import IngredientCache
from .settings import SettingsStore

from .profile_store import (
    ProfileStore,
    NullProfileStore,
    ProfileStoreError,
    open_profile_store,
)

from .directory import list_all_recipe_names
from .debounce import Debouncer
from .lifecycle import RecipeSession, InvalidRecipeName

from .backup import (
    BackupError,
    export_backup,
    import_backup,
    validate_backup,
    load_backup_file,
    write_backup_file,
)

__all__ = [
    # Numbers and rows
    'to_number',
    'blank_row',
    'parse_row',
    'parse_rows',
    'unit_cost',
    'line_cost',
    'compute_row',
    'total_cost',
    'final_price',
    # Stores
    'KeyValueStore',
    'RowStore',
    'IngredientCache',
    'SettingsStore',
    'ProfileStore',
    'NullProfileStore',
    'ProfileStoreError',
    'open_profile_store',
    'list_all_recipe_names',
    # Lifecycle
    'Debouncer',
    'RecipeSession',
    'InvalidRecipeName',
    # Backup
    'BackupError',
    'export_backup',
    'import_backup',
    'validate_backup',
    'load_backup_file',
    'write_backup_file',
]
