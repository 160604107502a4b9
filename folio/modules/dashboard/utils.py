from functools import wraps

from flask import current_app, jsonify, redirect, request, session, url_for


def admin_required(f):
    """Decorator to require admin login (pages)"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'admin_id' not in session:
            return redirect(url_for('admin.login', next=request.path))
        return f(*args, **kwargs)
    return decorated_function


def api_admin_required(f):
    """Decorator to require admin login (JSON endpoints)"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'admin_id' not in session:
            return jsonify({'error': 'Authentication required'}), 401
        return f(*args, **kwargs)
    return decorated_function


def current_admin_id():
    return session.get('admin_id')


def editing_sessions():
    """The app's EditingSessions registry (set up by Folio.init_app)."""
    return current_app.extensions['folio'].sessions


def move_indices(data):
    """Read ``from_index``/``to_index`` from a JSON body.

    Only real JSON integers are accepted: floats, numeric strings and
    booleans raise ValueError.
    """
    if not isinstance(data, dict):
        raise ValueError('from_index and to_index must be integers')
    indices = (data.get('from_index'), data.get('to_index'))
    for value in indices:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError('from_index and to_index must be integers')
    return indices
