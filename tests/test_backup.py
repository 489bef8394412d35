"""Backup export/import."""

import json

import pytest

from constants import BACKUP_APP_ID, DEFAULT_RECIPE
from models import db, KeyValueEntry, ProfileItem
from services import BackupError, export_backup, import_backup, load_backup_file, write_backup_file


def _snapshot():
    kv = sorted((e.key, e.value) for e in db.session.execute(db.select(KeyValueEntry)).scalars())
    profiles = sorted(
        (p.key, p.recipe_amount) for p in db.session.execute(db.select(ProfileItem)).scalars()
    )
    return kv, profiles


def _fill(session, name, row):
    session.create_recipe(name)
    for field, value in row.items():
        session.record_edit(0, field, value)
    session.save()


@pytest.fixture
def populated(session, flour):
    _fill(session, 'Cake', flour)
    _fill(session, 'Bread', {'name': 'Yeast', 'cost': 30.0, 'amount': 100.0, 'recipeAmount': 7.0})
    session.set_folder('Cake', 'Desserts')
    session.set_favorite('Bread', True)
    session.set_margin(40)
    return session


def test_export_document_shape(populated, flour):
    document = export_backup(populated)

    assert document['app'] == BACKUP_APP_ID
    assert document['schemaVersion'] == 1
    assert document['exportedAt']
    assert document['currentRecipe'] == 'Bread'
    assert document['settings']['marginPct'] == 40.0
    assert document['settings']['ingredientCache']['Flour'] == {'cost': 1290.0, 'amount': 1000.0}
    assert document['folders'] == ['Desserts']
    assert sorted(document['recipes']) == ['Bread', 'Cake', DEFAULT_RECIPE]
    assert document['recipes']['Cake'] == {
        'rows': [flour],
        'meta': {'favorite': False, 'folder': 'Desserts'},
    }
    assert document['recipes']['Bread']['meta']['favorite'] is True
    json.dumps(document)


def test_export_includes_pending_edits(session, timers):
    session.record_edit(0, 'name', 'Honey')
    document = export_backup(session)
    assert document['recipes'][DEFAULT_RECIPE]['rows'][0]['name'] == 'Honey'
    assert timers.live == []


def test_export_rebuilds_profile_only_recipes(populated, flour):
    populated.row_store.delete_rows('Cake')
    document = export_backup(populated)
    assert document['recipes']['Cake']['rows'] == [flour]


def test_round_trip_leaves_state_unchanged(populated):
    before_names = populated.list_recipes()
    before_rows = {name: populated.ensure_rows(name) for name in before_names}
    before_margin = populated.settings.get_margin_pct()
    before_cache = populated.ingredient_cache.all()
    before_meta = populated.settings.all_metadata()
    before_folders = populated.settings.get_folders()

    result = import_backup(populated, export_backup(populated), mode='merge')

    assert result['imported'] == before_names
    assert populated.list_recipes() == before_names
    assert {name: populated.ensure_rows(name) for name in before_names} == before_rows
    assert populated.settings.get_margin_pct() == before_margin
    assert populated.ingredient_cache.all() == before_cache
    assert populated.settings.all_metadata() == before_meta
    assert populated.settings.get_folders() == before_folders
    assert populated.current_recipe_name == 'Bread'


@pytest.mark.parametrize('document', [
    None,
    [],
    {'app': 'someone-else', 'schemaVersion': 1, 'recipes': {}},
    {'schemaVersion': 1, 'recipes': {}},
    {'app': BACKUP_APP_ID, 'recipes': {}},
    {'app': BACKUP_APP_ID, 'schemaVersion': '1', 'recipes': {}},
    {'app': BACKUP_APP_ID, 'schemaVersion': True, 'recipes': {}},
    {'app': BACKUP_APP_ID, 'schemaVersion': 99, 'recipes': {}},
    {'app': BACKUP_APP_ID, 'schemaVersion': 1, 'recipes': []},
    {'app': BACKUP_APP_ID, 'schemaVersion': 1},
])
def test_invalid_document_changes_nothing(populated, document):
    before = _snapshot()
    with pytest.raises(BackupError):
        import_backup(populated, document)
    assert _snapshot() == before


def test_unknown_mode_is_rejected(populated):
    before = _snapshot()
    with pytest.raises(BackupError):
        import_backup(populated, export_backup(populated), mode='replace-everything')
    assert _snapshot() == before


@pytest.mark.parametrize('mode', ['merge', 'overwrite'])
def test_import_replaces_incoming_recipes_and_keeps_others(populated, mode):
    document = {
        'app': BACKUP_APP_ID,
        'schemaVersion': 1,
        'currentRecipe': 'Cake',
        'recipes': {
            'Cake': {'rows': [{'name': 'Sugar', 'cost': 2, 'amount': 1, 'recipeAmount': 10}]},
            'Pie': {'rows': 'garbage', 'meta': {'favorite': True, 'folder': 'Pies'}},
        },
    }

    result = import_backup(populated, document, mode=mode)

    assert result == {'mode': mode, 'imported': ['Cake', 'Pie'], 'currentRecipe': 'Cake'}
    assert populated.ensure_rows('Cake') == [
        {'name': 'Sugar', 'cost': 2.0, 'amount': 1.0, 'recipeAmount': 10.0},
    ]
    assert [i['ingredientName'] for i in populated.profile_store.get_items('Cake')] == ['Sugar']
    assert populated.ensure_rows('Pie') == [
        {'name': '', 'cost': 0.0, 'amount': 0.0, 'recipeAmount': 0.0},
    ]
    assert populated.ensure_rows('Bread')[0]['name'] == 'Yeast'
    assert populated.settings.get_metadata('Pie') == {'favorite': True, 'folder': 'Pies'}
    assert populated.settings.get_metadata('Cake') == {'favorite': False, 'folder': 'Desserts'}
    assert populated.current_recipe_name == 'Cake'
    assert populated.rows()[0]['name'] == 'Sugar'


def test_import_merges_settings_folders_and_cache(populated):
    document = {
        'app': BACKUP_APP_ID,
        'schemaVersion': 1,
        'settings': {'marginPct': 25, 'ingredientCache': {'Sugar': {'cost': 2, 'amount': 1}}},
        'folders': ['Breads', 'Desserts'],
        'recipes': {},
    }

    import_backup(populated, document)

    assert populated.settings.get_margin_pct() == 25.0
    assert populated.ingredient_cache.get('Sugar') == {'cost': 2.0, 'amount': 1.0}
    assert populated.ingredient_cache.get('Flour') == {'cost': 1290.0, 'amount': 1000.0}
    assert populated.settings.get_folders() == ['Desserts', 'Breads']


def test_import_keeps_current_recipe_when_declared_one_is_missing(populated):
    document = {
        'app': BACKUP_APP_ID,
        'schemaVersion': 1,
        'currentRecipe': 'Nowhere',
        'recipes': {'Cake': {'rows': []}},
    }
    import_backup(populated, document)
    assert populated.current_recipe_name == 'Bread'
    assert populated.settings.get_current_recipe() == 'Bread'


def test_import_reloads_current_recipe_rows(populated):
    document = {
        'app': BACKUP_APP_ID,
        'schemaVersion': 1,
        'recipes': {'Bread': {'rows': [{'name': 'Rye', 'recipeAmount': 5}]}},
    }
    import_backup(populated, document)
    assert populated.rows()[0]['name'] == 'Rye'


def test_backup_file_round_trip(tmp_path, populated):
    path = tmp_path / 'backup.json'
    write_backup_file(path, export_backup(populated))
    assert load_backup_file(path)['app'] == BACKUP_APP_ID


def test_missing_backup_file(tmp_path):
    with pytest.raises(BackupError):
        load_backup_file(tmp_path / 'missing.json')


def test_unparseable_backup_file(tmp_path):
    path = tmp_path / 'broken.json'
    path.write_text('{"app": ', encoding='utf-8')
    with pytest.raises(BackupError):
        load_backup_file(path)
