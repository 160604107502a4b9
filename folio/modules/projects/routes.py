"""
Projects Admin Routes
=====================

Project records are stored independently, each with its own ``position``.
Reordering happens in a per-admin order session: moves apply to the session
immediately, and an explicit save writes every position concurrently.

- `status`: ready/published/hidden (only published projects are public)
- `contents.detailImages`: ordered {id, url} list stored inside the record
"""

from flask import request, jsonify

from folio.core.config import get_config_value
from folio.core.editor import EXTERNAL, EMBEDDED, ListEditor
from folio.core.logging_service import LoggingService
from folio.core.ordering import IndexOutOfRange
from folio.core.sync import (
    PartialOrderPersistence,
    PersistenceError,
    RecordNotFound,
    RecordOrderSynchronizer,
)
from folio.modules.dashboard.utils import api_admin_required, current_admin_id, editing_sessions, move_indices
from . import projects_bp
from .database import (
    STATUSES,
    SlugConflict,
    create_slug,
    init_projects_db,
    is_valid_slug,
    next_position,
    normalize_contents,
    now_timestamp,
    project_summary,
)

ORDER_RESOURCE = 'project-order'


class ValidationError(ValueError):
    pass


# ===== Helper Functions =====

def _order_synchronizer(store):
    return RecordOrderSynchronizer(store, max_workers=get_config_value('ORDER_SYNC_MAX_WORKERS', 8))


def _order_state(editor):
    return {
        'items': [project_summary(p) for p in editor.items],
        'dirty': editor.dirty,
    }


def _order_session():
    return editing_sessions().get(current_admin_id(), ORDER_RESOURCE)


def _reload_order_session(store):
    """Replace an open order session with the stored order, if one is open."""
    editor = _order_session()
    if editor is not None:
        editor.load(store.read_all())
    return editor


def _move_indices(data):
    try:
        return move_indices(data)
    except ValueError as e:
        raise ValidationError(str(e))


def _validate_project(data, store, project_id=None):
    """Turn a JSON payload into the fields to write, or raise ValidationError."""
    title = (data.get('title') or '').strip()
    description = (data.get('description') or '').strip()
    slug = (data.get('slug') or '').strip()
    status = data.get('status') or 'ready'

    if not title:
        raise ValidationError('Title is required')
    if not description:
        raise ValidationError('Description is required')
    if status not in STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(STATUSES)}")

    if not slug:
        slug = create_slug(title, store)
        if not slug:
            raise ValidationError('Slug is required')
    elif not is_valid_slug(slug):
        raise ValidationError('Slug may only contain letters, numbers and hyphens (no spaces)')

    clash = store.get_by_field('slug', slug)
    if clash and clash['id'] != project_id:
        raise SlugConflict(f"Slug '{slug}' already exists")

    fields = {
        'title': title,
        'description': description,
        'slug': slug,
        'status': status,
    }
    # an update without contents leaves the stored contents alone
    if project_id is None or 'contents' in data:
        fields['contents'] = normalize_contents(data.get('contents'))
    return fields


def _image_editor(project):
    contents = normalize_contents(project.get('contents'))
    return contents, ListEditor(contents['detailImages'], mode=EMBEDDED, id_prefix='img')


def _save_images(store, project_id, contents, editor):
    """Single write of the project's contents after an image-list change."""
    if not editor.dirty:
        return
    contents['detailImages'] = editor.items
    _order_synchronizer(store).update_fields(
        project_id, {'contents': contents, 'updated_at': now_timestamp()}
    )
    editor.mark_synced()


# ===== Project CRUD =====

@projects_bp.route('/api/projects', methods=['GET'])
@api_admin_required
def get_projects():
    """Get all projects in display order"""
    try:
        store = init_projects_db()
        return jsonify([project_summary(p) for p in store.read_all()])
    except Exception as e:
        print(f"Error getting projects: {e}")
        return jsonify({'error': str(e)}), 500


@projects_bp.route('/api/projects/<int:project_id>', methods=['GET'])
@api_admin_required
def get_project(project_id):
    """Get single project"""
    try:
        store = init_projects_db()
        project = store.get_by_id(project_id)
        if not project:
            return jsonify({'error': 'Project not found'}), 404
        project['contents'] = normalize_contents(project.get('contents'))
        return jsonify(project)
    except Exception as e:
        print(f"Error getting project: {e}")
        return jsonify({'error': str(e)}), 500


@projects_bp.route('/api/projects', methods=['POST'])
@api_admin_required
def create_project():
    """Create new project at the end of the display order"""
    store = init_projects_db()
    try:
        fields = _validate_project(request.get_json(silent=True) or {}, store)
        fields['position'] = next_position(store)
        project_id = store.insert(fields)
    except ValidationError as e:
        return jsonify({'error': str(e)}), 400
    except SlugConflict as e:
        return jsonify({'error': str(e)}), 409
    except Exception as e:
        print(f"Error creating project: {e}")
        LoggingService.log_error_with_traceback('projects', e)
        return jsonify({'error': str(e), 'retry': True}), 500

    LoggingService.log_user_action('projects', f"created project {fields['slug']}", user_id=current_admin_id())
    _reload_order_session(store)
    return jsonify({
        'success': True,
        'id': project_id,
        'slug': fields['slug'],
        'status': fields['status'],
        'position': fields['position'],
    }), 201


@projects_bp.route('/api/projects/<int:project_id>', methods=['PUT'])
@api_admin_required
def update_project(project_id):
    """Update project fields (position is only changed through the order session)"""
    store = init_projects_db()
    try:
        if not store.get_by_id(project_id):
            return jsonify({'error': 'Project not found'}), 404
        fields = _validate_project(request.get_json(silent=True) or {}, store, project_id)
        fields['updated_at'] = now_timestamp()
        store.update_by_id(project_id, fields)
    except ValidationError as e:
        return jsonify({'error': str(e)}), 400
    except SlugConflict as e:
        return jsonify({'error': str(e)}), 409
    except Exception as e:
        print(f"Error updating project: {e}")
        LoggingService.log_error_with_traceback('projects', e, {'project_id': project_id})
        return jsonify({'error': str(e), 'retry': True}), 500

    _reload_order_session(store)
    return jsonify({'success': True, 'message': 'Project updated successfully', 'slug': fields['slug']})


@projects_bp.route('/api/projects/<int:project_id>', methods=['DELETE'])
@api_admin_required
def delete_project(project_id):
    """Delete project"""
    store = init_projects_db()
    try:
        success = store.delete_by_id(project_id)
    except Exception as e:
        print(f"Error deleting project: {e}")
        LoggingService.log_error_with_traceback('projects', e, {'project_id': project_id})
        return jsonify({'error': str(e)}), 500

    if not success:
        return jsonify({'error': 'Project not found'}), 404

    LoggingService.log_user_action('projects', f"deleted project {project_id}", user_id=current_admin_id())
    _reload_order_session(store)
    return jsonify({'success': True})


@projects_bp.route('/api/projects/<int:project_id>/status', methods=['POST'])
@api_admin_required
def change_status(project_id):
    """Change status with a single write.

    An open order session shows the new status straight away; if the write
    fails the session is reloaded from the store rather than patched back.
    """
    data = request.get_json(silent=True) or {}
    new_status = data.get('status')
    if new_status not in STATUSES:
        return jsonify({'error': f"Status must be one of: {', '.join(STATUSES)}"}), 400

    store = init_projects_db()
    editor = _order_session()
    if editor is not None:
        editor.apply_edit(project_id, {'status': new_status})

    try:
        _order_synchronizer(store).update_fields(
            project_id, {'status': new_status, 'updated_at': now_timestamp()}
        )
    except RecordNotFound:
        _reload_order_session(store)
        return jsonify({'error': 'Project not found'}), 404
    except PersistenceError as e:
        LoggingService.error('projects', 'Status change failed', {'project_id': project_id, 'error': str(e)})
        editor = _reload_order_session(store)
        body = {'error': f'Failed to change status: {e}', 'reload_required': True}
        if editor is not None:
            body['session'] = _order_state(editor)
        return jsonify(body), 500

    body = {'success': True, 'status': new_status}
    if editor is not None:
        body['session'] = _order_state(editor)
    return jsonify(body)


# ===== Order session =====

@projects_bp.route('/api/order/session', methods=['POST'])
@api_admin_required
def start_order_session():
    """Load the stored order into a fresh editing session"""
    store = init_projects_db()
    try:
        records = _order_synchronizer(store).load()
    except PersistenceError as e:
        return jsonify({'error': str(e)}), 500

    editor = ListEditor(records, mode=EXTERNAL)
    editing_sessions().start(current_admin_id(), ORDER_RESOURCE, editor)
    return jsonify(_order_state(editor))


@projects_bp.route('/api/order/session', methods=['GET'])
@api_admin_required
def get_order_session():
    editor = _order_session()
    if editor is None:
        return jsonify({'error': 'No order session open'}), 404
    return jsonify(_order_state(editor))


@projects_bp.route('/api/order/session', methods=['DELETE'])
@api_admin_required
def discard_order_session():
    discarded = editing_sessions().discard(current_admin_id(), ORDER_RESOURCE)
    return jsonify({'success': True, 'discarded': discarded})


@projects_bp.route('/api/order/session/move', methods=['POST'])
@api_admin_required
def move_project():
    """Apply one drag-and-drop move to the session (not saved yet)"""
    editor = _order_session()
    if editor is None:
        return jsonify({'error': 'No order session open'}), 404

    try:
        from_index, to_index = _move_indices(request.get_json(silent=True) or {})
        editor.apply_move(from_index, to_index)
    except ValidationError as e:
        return jsonify({'error': str(e)}), 400
    except IndexOutOfRange as e:
        return jsonify({'error': str(e)}), 400

    return jsonify(_order_state(editor))


@projects_bp.route('/api/order/session/save', methods=['POST'])
@api_admin_required
def save_order():
    """Write position = index + 1 for every project in the session order"""
    editor = _order_session()
    if editor is None:
        return jsonify({'error': 'No order session open'}), 404
    if not editor.dirty:
        return jsonify({'success': True, 'saved': False, **_order_state(editor)})

    store = init_projects_db()
    try:
        positions = _order_synchronizer(store).save_order(editor.items)
    except PartialOrderPersistence as e:
        LoggingService.error('projects', 'Project order partially saved', {
            'succeeded': e.succeeded,
            'failed': {str(k): str(v) for k, v in e.failed.items()},
        })
        editor.load(store.read_all())
        return jsonify({
            'error': str(e),
            'reload_required': True,
            **_order_state(editor),
        }), 500
    except PersistenceError as e:
        LoggingService.error('projects', 'Project order save failed', {'error': str(e)})
        return jsonify({'error': str(e), 'retry': True, **_order_state(editor)}), 500

    editor.load(store.read_all())
    LoggingService.log_user_action('projects', 'saved project order', user_id=current_admin_id(),
                                   details={'positions': positions})
    return jsonify({'success': True, 'saved': True, **_order_state(editor)})


# ===== Detail images =====

@projects_bp.route('/api/projects/<int:project_id>/images', methods=['POST'])
@api_admin_required
def add_detail_image(project_id):
    """Append an uploaded image URL to the project's detail images"""
    url = ((request.get_json(silent=True) or {}).get('url') or '').strip()
    if not url:
        return jsonify({'error': 'Image URL is required'}), 400

    store = init_projects_db()
    project = store.get_by_id(project_id)
    if not project:
        return jsonify({'error': 'Project not found'}), 404

    contents, editor = _image_editor(project)
    image_id = editor.add({'url': url})
    try:
        _save_images(store, project_id, contents, editor)
    except PersistenceError as e:
        return jsonify({'error': str(e), 'retry': True}), 500

    return jsonify({'success': True, 'id': image_id, 'images': editor.items}), 201


@projects_bp.route('/api/projects/<int:project_id>/images/<image_id>', methods=['DELETE'])
@api_admin_required
def remove_detail_image(project_id, image_id):
    """Remove one detail image (a missing id is reported, not an error)"""
    store = init_projects_db()
    project = store.get_by_id(project_id)
    if not project:
        return jsonify({'error': 'Project not found'}), 404

    contents, editor = _image_editor(project)
    found = editor.remove(image_id)
    try:
        _save_images(store, project_id, contents, editor)
    except PersistenceError as e:
        return jsonify({'error': str(e), 'retry': True}), 500

    return jsonify({'success': True, 'found': found, 'images': editor.items})


@projects_bp.route('/api/projects/<int:project_id>/images/move', methods=['POST'])
@api_admin_required
def move_detail_image(project_id):
    """Reorder detail images and save the record in one write"""
    store = init_projects_db()
    project = store.get_by_id(project_id)
    if not project:
        return jsonify({'error': 'Project not found'}), 404

    contents, editor = _image_editor(project)
    try:
        from_index, to_index = _move_indices(request.get_json(silent=True) or {})
        editor.apply_move(from_index, to_index)
        _save_images(store, project_id, contents, editor)
    except (ValidationError, IndexOutOfRange) as e:
        return jsonify({'error': str(e)}), 400
    except PersistenceError as e:
        return jsonify({'error': str(e), 'retry': True}), 500

    return jsonify({'success': True, 'images': editor.items})
