"""
About Admin Routes
==================

Session-based editing of the About document. Every change is applied to the
admin's draft straight away; nothing is written until ``/api/session/save``.
"""

from flask import request, jsonify

from folio.core.editor import DocumentDraft
from folio.core.logging_service import LoggingService
from folio.core.ordering import IndexOutOfRange
from folio.core.sync import PersistenceError
from folio.modules.dashboard.utils import api_admin_required, current_admin_id, editing_sessions, move_indices
from . import about_bp
from .database import ABOUT_DEFAULTS, ABOUT_KEY, ID_PREFIXES, LIST_FIELDS, get_about_synchronizer, load_about_document

SCALAR_FIELDS = tuple(k for k in ABOUT_DEFAULTS if k not in LIST_FIELDS)


def _draft():
    return editing_sessions().get(current_admin_id(), ABOUT_KEY)


def _state(draft):
    return {'document': draft.document, 'dirty': draft.dirty}


def _no_session():
    return jsonify({'error': 'No About editing session open'}), 404


def _item_payload(data):
    text = data.get('text')
    if not isinstance(text, str):
        return None
    return {'text': text}


# ===== Session =====

@about_bp.route('/api/content', methods=['GET'])
@api_admin_required
def get_content():
    """Stored About document (no session needed)"""
    try:
        return jsonify(load_about_document())
    except PersistenceError as e:
        print(f"Error loading About content: {e}")
        return jsonify({'error': str(e)}), 500


@about_bp.route('/api/session', methods=['POST'])
@api_admin_required
def start_session():
    """Open an editing session on the stored About document"""
    try:
        document = load_about_document()
    except PersistenceError as e:
        print(f"Error loading About content: {e}")
        return jsonify({'error': str(e)}), 500

    draft = DocumentDraft(document, LIST_FIELDS, id_prefixes=ID_PREFIXES)
    editing_sessions().start(current_admin_id(), ABOUT_KEY, draft)
    return jsonify(_state(draft))


@about_bp.route('/api/session', methods=['GET'])
@api_admin_required
def get_session():
    draft = _draft()
    if draft is None:
        return _no_session()
    return jsonify(_state(draft))


@about_bp.route('/api/session', methods=['DELETE'])
@api_admin_required
def discard_session():
    discarded = editing_sessions().discard(current_admin_id(), ABOUT_KEY)
    return jsonify({'success': True, 'discarded': discarded})


@about_bp.route('/api/session/fields', methods=['PATCH'])
@api_admin_required
def update_fields():
    """Set scalar fields (imageUrl, description, address, contact, social)"""
    draft = _draft()
    if draft is None:
        return _no_session()

    data = request.get_json(silent=True) or {}
    unknown = [k for k in data if k not in SCALAR_FIELDS]
    if unknown:
        return jsonify({'error': f"Unknown or list field(s): {', '.join(unknown)}"}), 400

    for name, value in data.items():
        draft.set_field(name, value)
    return jsonify(_state(draft))


# ===== List items =====

@about_bp.route('/api/session/lists/<name>/items', methods=['POST'])
@api_admin_required
def add_item(name):
    """Append an item to experience, services or clients"""
    draft = _draft()
    if draft is None:
        return _no_session()
    if name not in LIST_FIELDS:
        return jsonify({'error': f'Unknown list: {name}'}), 404

    payload = _item_payload(request.get_json(silent=True) or {})
    if payload is None:
        return jsonify({'error': 'text is required'}), 400

    item_id = draft.list_editor(name).add(payload)
    return jsonify({'id': item_id, **_state(draft)}), 201


@about_bp.route('/api/session/lists/<name>/items/<item_id>', methods=['PATCH'])
@api_admin_required
def edit_item(name, item_id):
    draft = _draft()
    if draft is None:
        return _no_session()
    if name not in LIST_FIELDS:
        return jsonify({'error': f'Unknown list: {name}'}), 404

    payload = _item_payload(request.get_json(silent=True) or {})
    if payload is None:
        return jsonify({'error': 'text is required'}), 400

    found = draft.list_editor(name).apply_edit(item_id, payload)
    return jsonify({'found': found, **_state(draft)})


@about_bp.route('/api/session/lists/<name>/items/<item_id>', methods=['DELETE'])
@api_admin_required
def remove_item(name, item_id):
    draft = _draft()
    if draft is None:
        return _no_session()
    if name not in LIST_FIELDS:
        return jsonify({'error': f'Unknown list: {name}'}), 404

    found = draft.list_editor(name).remove(item_id)
    return jsonify({'found': found, **_state(draft)})


@about_bp.route('/api/session/lists/<name>/move', methods=['POST'])
@api_admin_required
def move_item(name):
    """Apply one drag-and-drop move within a list"""
    draft = _draft()
    if draft is None:
        return _no_session()
    if name not in LIST_FIELDS:
        return jsonify({'error': f'Unknown list: {name}'}), 404

    data = request.get_json(silent=True) or {}
    try:
        from_index, to_index = move_indices(data)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    try:
        draft.list_editor(name).apply_move(from_index, to_index)
    except IndexOutOfRange as e:
        return jsonify({'error': str(e)}), 400
    return jsonify(_state(draft))


# ===== Save =====

@about_bp.route('/api/session/save', methods=['POST'])
@api_admin_required
def save():
    """Write the whole document in one go; on failure the draft stays dirty"""
    draft = _draft()
    if draft is None:
        return _no_session()
    if not draft.dirty:
        return jsonify({'success': True, 'saved': False, **_state(draft)})

    try:
        get_about_synchronizer().save(draft.document)
    except PersistenceError as e:
        print(f"Error saving About content: {e}")
        LoggingService.error('about', 'About save failed', {'error': str(e)}, user_id=current_admin_id())
        return jsonify({'error': str(e), 'retry': True, **_state(draft)}), 500

    draft.mark_synced()
    LoggingService.log_user_action('about', 'saved About page', user_id=current_admin_id())
    return jsonify({'success': True, 'saved': True, **_state(draft)})
