"""
Recipe Directory Service

A recipe can exist only as working rows that were never saved to the
profile store, or only as profile records whose rows were dropped, so
the list of known recipes is the union of both stores.
"""

from constants import DEFAULT_RECIPE


def list_all_recipe_names(row_store, profile_store):
    """Sorted union of row store names, profile store names and Default."""
    names = set(profile_store.list_recipe_names())
    names.update(row_store.recipe_names())
    names.add(DEFAULT_RECIPE)
    return sorted(names)
