"""
Backup Service

Exports every recipe, its rows and metadata plus the global settings
to one JSON document, and restores such a document.

Import is all-or-nothing at the validation gate: a document is fully
checked before anything is written.
"""

import json
import logging
from datetime import datetime, timezone

from constants import (
    BACKUP_APP_ID,
    BACKUP_SCHEMA_VERSION,
    SUPPORTED_SCHEMA_VERSIONS,
    VALID_IMPORT_MODES,
)
from .numeric import to_number
from .rows import blank_row, parse_rows
from .settings import default_metadata, parse_metadata

logger = logging.getLogger(__name__)


class BackupError(Exception):
    """Raised when a backup cannot be read or fails validation."""
    pass


def export_backup(session):
    """Build a backup document from the session's stores."""
    # pending edits belong in the export
    session.flush()

    settings = session.settings
    metadata = settings.all_metadata()
    recipes = {}
    for name in session.list_recipes():
        recipes[name] = {
            'rows': session.ensure_rows(name),
            'meta': metadata.get(name, default_metadata()),
        }

    return {
        'app': BACKUP_APP_ID,
        'schemaVersion': BACKUP_SCHEMA_VERSION,
        'exportedAt': datetime.now(timezone.utc).isoformat(),
        'currentRecipe': session.current_recipe_name,
        'settings': {
            'marginPct': settings.get_margin_pct(),
            'ingredientCache': session.ingredient_cache.all(),
        },
        'folders': settings.get_folders(),
        'recipes': recipes,
    }


def validate_backup(document):
    """
    Check identity, version and shape of a backup document.

    Returns the parsed recipes as {name: {'rows': [...], 'meta': {...} | None}}.
    Raises BackupError without touching any store.
    """
    if not isinstance(document, dict):
        raise BackupError('Backup must be a JSON object')
    if document.get('app') != BACKUP_APP_ID:
        raise BackupError('Not a recipe cost calculator backup')

    version = document.get('schemaVersion')
    if isinstance(version, bool) or not isinstance(version, int):
        raise BackupError('Backup schema version is missing')
    if version not in SUPPORTED_SCHEMA_VERSIONS:
        raise BackupError(f'Unsupported backup schema version {version}')

    raw_recipes = document.get('recipes')
    if not isinstance(raw_recipes, dict):
        raise BackupError('Backup has no recipes mapping')

    recipes = {}
    for raw_name, entry in raw_recipes.items():
        name = str(raw_name).strip()
        if not name:
            continue
        entry = entry if isinstance(entry, dict) else {}
        raw_rows = entry.get('rows')
        rows = parse_rows(raw_rows)
        if rows is None and raw_rows is not None:
            logger.warning("Backup rows for %r are malformed; using a blank row", name)
        rows = rows or [blank_row()]
        meta = entry.get('meta')
        recipes[name] = {
            'rows': rows,
            'meta': parse_metadata(meta) if isinstance(meta, dict) else None,
        }
    return recipes


def import_backup(session, document, mode='merge'):
    """
    Restore a backup document.

    Both modes replace each incoming recipe's rows and profile records
    wholesale and leave recipes missing from the document alone.
    Metadata, folders and ingredient cache entries are upserted by key.
    Afterwards the document's current recipe is opened if it was part of
    the import, otherwise the previous one is reopened.
    """
    if mode not in VALID_IMPORT_MODES:
        raise BackupError(f'Unknown import mode "{mode}"')
    recipes = validate_backup(document)

    settings = session.settings
    previous = session.current_recipe_name
    session.flush()

    existing_meta = settings.all_metadata()
    for name, entry in recipes.items():
        session.row_store.save_rows(name, entry['rows'])
        session.profile_store.put_items(name, entry['rows'])
        meta = entry['meta']
        if meta is not None and (name in existing_meta or meta != default_metadata()):
            settings.update_metadata(name, favorite=meta['favorite'], folder=meta['folder'])

    incoming_settings = document.get('settings')
    if isinstance(incoming_settings, dict):
        if 'marginPct' in incoming_settings:
            settings.set_margin_pct(to_number(incoming_settings['marginPct']))
        session.ingredient_cache.merge(incoming_settings.get('ingredientCache'))

    if isinstance(document.get('folders'), list):
        settings.merge_folders(document['folders'])

    declared = document.get('currentRecipe')
    target = declared if isinstance(declared, str) and declared in recipes else previous
    session.switch_recipe(target, persist_as_current=True)

    logger.info("Imported %d recipes (%s mode)", len(recipes), mode)
    return {
        'mode': mode,
        'imported': sorted(recipes),
        'currentRecipe': session.current_recipe_name,
    }


def load_backup_file(path):
    """Read a backup document from disk; I/O and JSON errors raise BackupError."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise BackupError(f'Could not read backup file: {e}') from e
    except json.JSONDecodeError as e:
        raise BackupError(f'Backup file is not valid JSON: {e}') from e


def write_backup_file(path, document):
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(document, f, ensure_ascii=False, indent=2)
