"""
Projects Admin Module
=====================

Admin API for project portfolio management.
Plugs into the admin dashboard module.

Provides:
- Project creation, editing and deletion
- ready/published/hidden status changes
- Drag-and-drop project order with an explicit save
- Ordered detail-image lists per project
"""

from flask import Blueprint

projects_bp = Blueprint(
    'projects_admin',
    __name__,
    url_prefix='/admin/projects-editor'
)

from . import routes

__all__ = ['projects_bp']
