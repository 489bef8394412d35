"""
Constants Package

Storage keys, defaults and validation whitelists.
"""

from .storage import (
    DEFAULT_RECIPE,
    CURRENT_RECIPE_KEY,
    INGREDIENT_CACHE_KEY,
    MARGIN_PCT_KEY,
    RECIPE_META_KEY,
    FOLDERS_KEY,
    ROW_KEY_PREFIX,
    LEGACY_ROWS_KEY,
    DEFAULT_MARGIN_PCT,
)

from .validation import (
    ROW_FIELDS,
    NUMERIC_ROW_FIELDS,
    BACKUP_APP_ID,
    BACKUP_SCHEMA_VERSION,
    SUPPORTED_SCHEMA_VERSIONS,
    VALID_IMPORT_MODES,
    MAX_LENGTHS,
)
