"""
Projects Public Module
======================

Public home page, project listing and project detail pages, plus a CORS
enabled JSON API of published projects.
"""

from flask import Blueprint

projects_public_bp = Blueprint('projects', __name__, template_folder='templates')

from . import routes

__all__ = ['projects_public_bp']
