# Utility modules for the recipe cost calculator
from .sanitizer import (
    sanitize_recipe_name, sanitize_folder_name, sanitize_ingredient_name
)
