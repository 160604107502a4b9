"""
About Admin Module
==================

Editing API for the About page document.

The About page is one JSON document in the ``config`` table. Its
``experience``, ``services`` and ``clients`` lists are edited in a per-admin
session and saved back with a single document write.
"""

from flask import Blueprint

about_bp = Blueprint(
    'about_admin',
    __name__,
    url_prefix='/admin/about'
)

from . import routes

__all__ = ['about_bp']
