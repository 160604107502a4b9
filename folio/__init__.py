"""
folio - A Portfolio Site Framework
==================================

A Flask portfolio site with an admin area for editing the About page and
the project list:

- Admin login and the shared image upload endpoint
- About page editor (ordered experience/services/clients lists)
- Projects editor (CRUD, status, drag-and-drop order, detail images)
- Public home, About and project pages with JSON APIs
- Health endpoint and admin log feed

Usage:
    from flask import Flask
    from folio import Folio

    app = Flask(__name__)
    Folio(app)
"""

import os

from .core.config import Config
from .core.sessions import EditingSessions

__version__ = '0.1.0'

DEFAULT_FEATURES = {
    'about': True,
    'projects': True,
    'public': True,
    'ops': True,
}

DB_FILES = {
    'CONTENT_DB': 'content.db',
    'USER_DB': 'users.db',
    'LOGS_DB': 'logs.db',
}


class Folio:
    """Flask extension that configures the app and registers every module."""

    def __init__(self, app=None, config=None):
        self.config = config or {}
        self.features = dict(DEFAULT_FEATURES, **self.config.get('features', {}))
        self.sessions = EditingSessions()
        self.blueprints = []
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self._configure(app)
        app.extensions['folio'] = self

        with app.app_context():
            self._init_databases()

        self._register_blueprints(app)

        @app.context_processor
        def inject_folio():
            return {
                'brand_name': app.config.get('BRAND_NAME'),
                'folio_config': self.config,
            }

    def _configure(self, app):
        """Fill unset config from Config; DB paths default into DB_DIR."""
        for key in ('SECRET_KEY', 'BRAND_NAME', 'STORAGE_TYPE', 'UPLOAD_MAX_BYTES',
                    'ORDER_SYNC_MAX_WORKERS'):
            if app.config.get(key) is None:
                app.config[key] = getattr(Config, key)

        if self.config.get('brand_name'):
            app.config['BRAND_NAME'] = self.config['brand_name']

        db_dir = app.config.get('DB_DIR') or Config.DB_DIR
        app.config['DB_DIR'] = db_dir
        os.makedirs(db_dir, exist_ok=True)

        for key, filename in DB_FILES.items():
            if not app.config.get(key):
                app.config[key] = os.getenv(key) or os.path.join(db_dir, filename)

    def _init_databases(self):
        from .modules.dashboard.database import init_admin_table
        init_admin_table()
        if self.features['projects'] or self.features['public']:
            from .modules.projects.database import init_projects_db
            init_projects_db()
        if self.features['about'] or self.features['public']:
            from .modules.about.database import get_about_store
            get_about_store().init_schema()

    def _register_blueprints(self, app):
        from .modules.dashboard import dashboard_bp
        self._register(app, dashboard_bp)

        if self.features['about']:
            from .modules.about import about_bp
            self._register(app, about_bp)

        if self.features['projects']:
            from .modules.projects import projects_bp
            self._register(app, projects_bp)

        if self.features['public']:
            from .modules.about_public import about_public_bp
            from .modules.projects_public import projects_public_bp
            self._register(app, about_public_bp)
            self._register(app, projects_public_bp)

        if self.features['ops']:
            from .modules.ops import ops_health_bp, ops_admin_bp
            self._register(app, ops_health_bp)
            self._register(app, ops_admin_bp)

    def _register(self, app, blueprint):
        app.register_blueprint(blueprint)
        self.blueprints.append(blueprint.name)

    def get_registered_modules(self):
        """Names of the blueprints this extension registered."""
        return list(self.blueprints)


__all__ = ['Folio', 'Config']
