"""
Dashboard Module
================

Admin dashboard interface for folio.

Provides core admin functionality:
- Admin authentication (login/logout)
- First admin account creation
- Shared image upload used by the About and Projects editors

This is the foundation module that the editor modules plug into.
"""

from flask import Blueprint

# Note: Blueprint name is 'admin' so other modules can redirect to admin.login
dashboard_bp = Blueprint(
    'admin',
    __name__,
    url_prefix='/admin',
    template_folder='templates'
)

# Import routes after blueprint is created
from . import routes

__all__ = ['dashboard_bp']
