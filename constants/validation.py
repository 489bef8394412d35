"""
Validation Constants

Contains whitelist values for validating user input and backup
documents before they reach the stores.
"""

# Editable row fields; every field except 'name' is numeric
ROW_FIELDS = ('name', 'cost', 'amount', 'recipeAmount')
NUMERIC_ROW_FIELDS = ('cost', 'amount', 'recipeAmount')

# Backup document identity
BACKUP_APP_ID = 'recipe-cost-calculator'
BACKUP_SCHEMA_VERSION = 1
SUPPORTED_SCHEMA_VERSIONS = {1}

# Valid backup import modes
VALID_IMPORT_MODES = {'merge', 'overwrite'}

# Maximum field lengths
MAX_LENGTHS = {
    'ingredient_name': 200,
    'recipe_name': 200,
    'folder_name': 100,
}
