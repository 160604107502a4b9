"""
About Public Module
===================

The public About page and its JSON API.
"""

from flask import Blueprint

about_public_bp = Blueprint('about_public', __name__, template_folder='templates')

from . import routes

__all__ = ['about_public_bp']
