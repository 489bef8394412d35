"""
Settings Service

Process-wide settings (current recipe, margin) and the optional
per-recipe metadata (favorite flag, folder) with its folder list.
"""

import logging

from constants import (
    CURRENT_RECIPE_KEY,
    MARGIN_PCT_KEY,
    RECIPE_META_KEY,
    FOLDERS_KEY,
    DEFAULT_MARGIN_PCT,
)
from .numeric import to_number

logger = logging.getLogger(__name__)


def default_metadata():
    return {'favorite': False, 'folder': ''}


def parse_metadata(raw):
    """Normalize a metadata mapping; anything malformed yields the default."""
    if not isinstance(raw, dict):
        return default_metadata()
    folder = raw.get('folder')
    return {
        'favorite': bool(raw.get('favorite', False)),
        'folder': folder.strip() if isinstance(folder, str) else '',
    }


def parse_folders(raw):
    """Distinct non-empty folder names, first occurrence wins."""
    if not isinstance(raw, list):
        return []
    folders = []
    for item in raw:
        if isinstance(item, str) and item.strip() and item.strip() not in folders:
            folders.append(item.strip())
    return folders


class SettingsStore:

    def __init__(self, kv, default_margin_pct=DEFAULT_MARGIN_PCT):
        self.kv = kv
        self.default_margin_pct = default_margin_pct

    # Current recipe -----------------------------------------------------

    def get_current_recipe(self):
        value = self.kv.get_json(CURRENT_RECIPE_KEY)
        return value if isinstance(value, str) and value else None

    def set_current_recipe(self, name):
        self.kv.set_json(CURRENT_RECIPE_KEY, name)

    # Margin -------------------------------------------------------------

    def get_margin_pct(self):
        raw = self.kv.get_json(MARGIN_PCT_KEY)
        if raw is None:
            return self.default_margin_pct
        return to_number(raw)

    def set_margin_pct(self, value):
        margin = to_number(value)
        self.kv.set_json(MARGIN_PCT_KEY, margin)
        return margin

    # Recipe metadata ----------------------------------------------------

    def all_metadata(self):
        data = self.kv.get_json(RECIPE_META_KEY, {})
        if not isinstance(data, dict):
            logger.warning("Recipe metadata is not a mapping; starting empty")
            return {}
        return {name: parse_metadata(meta) for name, meta in data.items()}

    def get_metadata(self, recipe_name):
        return self.all_metadata().get(recipe_name, default_metadata())

    def update_metadata(self, recipe_name, favorite=None, folder=None):
        """Upsert the given fields of a recipe's metadata; returns the result."""
        data = dict(self.all_metadata())
        meta = dict(data.get(recipe_name, default_metadata()))
        if favorite is not None:
            meta['favorite'] = bool(favorite)
        if folder is not None:
            meta['folder'] = folder.strip()
            if meta['folder']:
                self.add_folder(meta['folder'])
        data[recipe_name] = meta
        self.kv.set_json(RECIPE_META_KEY, data)
        return meta

    def delete_metadata(self, recipe_name):
        data = dict(self.all_metadata())
        if data.pop(recipe_name, None) is not None:
            self.kv.set_json(RECIPE_META_KEY, data)

    # Folders ------------------------------------------------------------

    def get_folders(self):
        return parse_folders(self.kv.get_json(FOLDERS_KEY, []))

    def add_folder(self, name):
        name = (name or '').strip()
        folders = self.get_folders()
        if name and name not in folders:
            folders = folders + [name]
            self.kv.set_json(FOLDERS_KEY, folders)
        return folders

    def remove_folder(self, name):
        """Drop a folder and move its recipes back to no folder."""
        folders = [f for f in self.get_folders() if f != name]
        self.kv.set_json(FOLDERS_KEY, folders)

        data = dict(self.all_metadata())
        changed = False
        for recipe_name, meta in data.items():
            if meta['folder'] == name:
                data[recipe_name] = {**meta, 'folder': ''}
                changed = True
        if changed:
            self.kv.set_json(RECIPE_META_KEY, data)
        return folders

    def merge_folders(self, incoming):
        folders = self.get_folders()
        for name in parse_folders(incoming):
            if name not in folders:
                folders.append(name)
        self.kv.set_json(FOLDERS_KEY, folders)
        return folders
