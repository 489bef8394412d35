"""
Storage Constants

Key names and defaults for everything persisted in the key/value store.
"""

# Recipe used when no current recipe has been chosen; never forgotten
DEFAULT_RECIPE = 'Default'

# Key/value store keys
CURRENT_RECIPE_KEY = 'recipe_cost.current_recipe'
INGREDIENT_CACHE_KEY = 'recipe_cost.ingredient_cache'
MARGIN_PCT_KEY = 'recipe_cost.margin_pct'
RECIPE_META_KEY = 'recipe_cost.recipe_meta'
FOLDERS_KEY = 'recipe_cost.folders'

# Full row sets are stored one per recipe under ROW_KEY_PREFIX + recipe name
ROW_KEY_PREFIX = 'recipe_cost.rows::'

# Single row list written before recipes existed
LEGACY_ROWS_KEY = 'dessert_cost_rows_v1'

DEFAULT_MARGIN_PCT = 30.0
