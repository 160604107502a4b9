"""
folio Modules
=============

Flask blueprint modules: admin dashboard, About and Projects editors, the
public site and ops.
"""

__all__ = ['dashboard', 'about', 'projects', 'about_public', 'projects_public', 'ops']
