"""
Input Sanitization Module

Cleans names coming from the API before they are used as store keys.
Names are kept verbatim apart from whitespace and control characters;
they are JSON payloads, not HTML.
"""

import re

from constants import MAX_LENGTHS


def _clean_name(name, max_length):
    if name is None:
        return ''

    if not isinstance(name, str):
        name = str(name)

    # Remove control characters and null bytes
    name = re.sub(r'[\x00-\x1f\x7f-\x9f]', '', name)

    # Collapse multiple spaces
    name = re.sub(r'\s+', ' ', name).strip()

    # Truncate if too long
    if len(name) > max_length:
        name = name[:max_length].rstrip()

    return name


def sanitize_recipe_name(name, max_length=MAX_LENGTHS['recipe_name']):
    """
    Sanitize a recipe name for use as a store key.

    Args:
        name: The recipe name to sanitize
        max_length: Maximum allowed length (default 200)

    Returns:
        Cleaned recipe name, '' if nothing usable remains
    """
    return _clean_name(name, max_length)


def sanitize_folder_name(name, max_length=MAX_LENGTHS['folder_name']):
    """Sanitize a folder name (default max length 100)."""
    return _clean_name(name, max_length)


def sanitize_ingredient_name(text, max_length=MAX_LENGTHS['ingredient_name']):
    """
    Sanitize an ingredient name typed into a row.

    Unlike recipe names, surrounding whitespace is preserved while the
    user is typing; only control characters are removed and the length
    capped.
    """
    if text is None:
        return ''

    if not isinstance(text, str):
        text = str(text)

    # Remove control characters
    text = re.sub(r'[\x00-\x1f\x7f-\x9f]', '', text)

    # Truncate
    if len(text) > max_length:
        text = text[:max_length]

    return text
