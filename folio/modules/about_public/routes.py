"""
About Public Routes
===================
"""

from flask import jsonify, render_template
from flask_cors import cross_origin

from folio.core.config import Config
from folio.core.sync import PersistenceError
from folio.modules.about.database import ABOUT_DEFAULTS, load_about_document
from . import about_public_bp


@about_public_bp.route('/about')
def about_page():
    """About page; falls back to the defaults if the document cannot be read"""
    try:
        about = load_about_document()
    except PersistenceError as e:
        print(f"Error loading About content: {e}")
        about = dict(ABOUT_DEFAULTS)
    return render_template('about_public/about.html', about=about)


@about_public_bp.route('/api/about', methods=['GET', 'OPTIONS'])
@cross_origin(origins=Config.CORS_ORIGINS, supports_credentials=False)
def api_about():
    """About document API - public endpoint."""
    try:
        return jsonify(load_about_document())
    except PersistenceError as e:
        print(f"Error loading About content: {e}")
        return jsonify({'error': str(e)}), 500
