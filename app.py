import logging
from contextlib import nullcontext

import click
from flask import Flask, current_app, has_app_context, jsonify, request
from flask_migrate import Migrate

from config import get_config
from models import db
from services import (
    BackupError,
    Debouncer,
    IngredientCache,
    InvalidRecipeName,
    KeyValueStore,
    ProfileStoreError,
    RecipeSession,
    RowStore,
    SettingsStore,
    compute_row,
    export_backup,
    import_backup,
    load_backup_file,
    open_profile_store,
    write_backup_file,
)
from utils.sanitizer import (
    sanitize_recipe_name, sanitize_folder_name, sanitize_ingredient_name
)

logger = logging.getLogger(__name__)

migrate = Migrate()


def create_app(config_name=None, timer_factory=None):
    """
    Build the app, its stores and the single recipe session.

    timer_factory replaces threading.Timer for the debounced save
    (tests pass a manually fired timer).
    """
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    db.init_app(app)
    migrate.init_app(app, db)

    register_routes(app)
    register_commands(app)

    with app.app_context():
        init_db(app, timer_factory=timer_factory)

    return app


def get_session():
    return current_app.extensions['recipe_session']


# ============================================
# INITIALIZE DATABASE
# ============================================

def init_db(app, timer_factory=None):
    """Create tables, open the stores and boot the recipe session."""
    # Key/value store on the default engine; it must be available
    db.create_all(bind_key=None)

    kv = KeyValueStore()
    debouncer_kwargs = {'context': lambda: _deferred_context(app)}
    if timer_factory is not None:
        debouncer_kwargs['timer_factory'] = timer_factory

    session = RecipeSession(
        row_store=RowStore(kv),
        profile_store=open_profile_store(app.config['PROFILE_STORE_ENABLED']),
        ingredient_cache=IngredientCache(kv),
        settings=SettingsStore(kv, default_margin_pct=app.config['DEFAULT_MARGIN_PCT']),
        debouncer=Debouncer(app.config['SAVE_DEBOUNCE_SECONDS'], **debouncer_kwargs),
    )
    session.boot()
    app.extensions['recipe_session'] = session
    logger.info("Recipe session ready on %r (profile store %s)",
                session.current_recipe_name,
                'available' if session.profile_store.available else 'disabled')
    return session


def _deferred_context(app):
    # timer threads need their own app context; a flush inside a request
    # reuses the one already pushed
    if has_app_context():
        return nullcontext()
    return app.app_context()


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _recipe_name_from(data):
    name = sanitize_recipe_name(data.get('name'))
    if not name:
        raise InvalidRecipeName('Recipe name is required')
    return name


def register_routes(app):

    # ============================================
    # ERRORS
    # ============================================

    @app.errorhandler(BackupError)
    def backup_error(e):
        return jsonify({'error': str(e)}), 400

    @app.errorhandler(InvalidRecipeName)
    def invalid_name(e):
        return jsonify({'error': str(e)}), 400

    @app.errorhandler(ValueError)
    def invalid_value(e):
        return jsonify({'error': str(e)}), 400

    @app.errorhandler(IndexError)
    def missing_row(e):
        return jsonify({'error': str(e)}), 404

    @app.errorhandler(ProfileStoreError)
    def profile_store_error(e):
        logger.warning("Profile store error: %s", e)
        return jsonify({'error': str(e)}), 503

    # ============================================
    # ROUTES - RECIPES
    # ============================================

    @app.route('/api/recipes')
    def recipes_list():
        session = get_session()
        return jsonify({
            'recipes': session.list_recipes(),
            'current': session.current_recipe_name,
            'meta': session.settings.all_metadata(),
        })

    @app.route('/api/recipes', methods=['POST'])
    def recipe_create():
        session = get_session()
        name = _recipe_name_from(_json_body())
        rows = session.create_recipe(name)
        return jsonify({'current': session.current_recipe_name, 'rows': rows}), 201

    @app.route('/api/recipes/switch', methods=['POST'])
    def recipe_switch():
        session = get_session()
        data = _json_body()
        name = _recipe_name_from(data)
        persist = data.get('persist', True)
        if not isinstance(persist, bool):
            raise ValueError('persist must be true or false')
        rows = session.switch_recipe(name, persist_as_current=persist)
        return jsonify({'current': session.current_recipe_name, 'rows': rows})

    @app.route('/api/recipes/<path:name>/rows')
    def recipe_rows(name):
        session = get_session()
        rows = session.ensure_rows(name)
        return jsonify({'recipe': name, 'rows': [compute_row(r) for r in rows]})

    @app.route('/api/recipes/<path:name>/meta', methods=['PATCH'])
    def recipe_meta(name):
        session = get_session()
        data = _json_body()
        meta = None
        if 'favorite' in data:
            meta = session.set_favorite(name, bool(data['favorite']))
        if 'folder' in data:
            meta = session.set_folder(name, sanitize_folder_name(data['folder']))
        if meta is None:
            meta = session.settings.get_metadata(name)
        return jsonify({'recipe': name, 'meta': meta})

    @app.route('/api/recipes/<path:name>', methods=['DELETE'])
    def recipe_delete(name):
        session = get_session()
        current = session.delete_recipe(name)
        return jsonify({'deleted': name, 'current': current, 'rows': session.rows()})

    # ============================================
    # ROUTES - WORKING ROWS
    # ============================================

    @app.route('/api/session')
    def session_view():
        return jsonify(get_session().summary())

    @app.route('/api/rows', methods=['POST'])
    def row_add():
        session = get_session()
        index = session.add_row()
        return jsonify({'index': index, 'rows': session.rows()}), 201

    @app.route('/api/rows/<int:index>', methods=['PATCH'])
    def row_edit(index):
        session = get_session()
        data = _json_body()
        field = data.get('field')
        value = data.get('value')
        if field == 'name':
            value = sanitize_ingredient_name(value)
        return jsonify(session.record_edit(index, field, value))

    @app.route('/api/rows/<int:index>', methods=['DELETE'])
    def row_delete(index):
        session = get_session()
        rows = session.delete_row(index)
        return jsonify({'rows': rows, 'totalCost': session.total_cost()})

    @app.route('/api/save', methods=['POST'])
    def recipe_save():
        session = get_session()
        count = session.save()
        return jsonify({'recipe': session.current_recipe_name, 'profileRecords': count})

    @app.route('/api/reset', methods=['POST'])
    def recipe_reset():
        return jsonify({'rows': get_session().reset()})

    # ============================================
    # ROUTES - SETTINGS & FOLDERS
    # ============================================

    @app.route('/api/settings/margin', methods=['PUT'])
    def margin_update():
        session = get_session()
        margin = session.set_margin(_json_body().get('marginPct'))
        return jsonify({'marginPct': margin, 'finalPrice': session.final_price()})

    @app.route('/api/folders')
    def folders_list():
        return jsonify({'folders': get_session().settings.get_folders()})

    @app.route('/api/folders', methods=['POST'])
    def folder_add():
        name = sanitize_folder_name(_json_body().get('name'))
        if not name:
            raise ValueError('Folder name is required')
        return jsonify({'folders': get_session().settings.add_folder(name)}), 201

    @app.route('/api/folders/<path:name>', methods=['DELETE'])
    def folder_delete(name):
        return jsonify({'folders': get_session().settings.remove_folder(name)})

    # ============================================
    # ROUTES - BACKUP
    # ============================================

    @app.route('/api/backup')
    def backup_export():
        return jsonify(export_backup(get_session()))

    @app.route('/api/backup', methods=['POST'])
    def backup_import():
        mode = request.args.get('mode', 'merge')
        document = request.get_json(silent=True)
        if document is None:
            raise BackupError('Backup must be a JSON object')
        return jsonify(import_backup(get_session(), document, mode=mode))


# ============================================
# CLI COMMANDS
# ============================================

def register_commands(app):

    @app.cli.command('export-backup')
    @click.argument('path')
    def export_backup_command(path):
        """Write every recipe and setting to a JSON backup file."""
        document = export_backup(get_session())
        write_backup_file(path, document)
        click.echo(f"Exported {len(document['recipes'])} recipes to {path}")

    @app.cli.command('import-backup')
    @click.argument('path')
    @click.option('--mode', type=click.Choice(['merge', 'overwrite']), default='merge')
    def import_backup_command(path, mode):
        """Restore recipes and settings from a JSON backup file."""
        try:
            result = import_backup(get_session(), load_backup_file(path), mode=mode)
        except BackupError as e:
            raise click.ClickException(str(e))
        click.echo(f"Imported {len(result['imported'])} recipes; current recipe is "
                   f"\"{result['currentRecipe']}\"")


if __name__ == '__main__':
    app = create_app()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(debug=True, host='0.0.0.0', port=5000, use_reloader=False)
