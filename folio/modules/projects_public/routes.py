"""
Projects Public Routes
======================

Public-facing project portfolio pages and API.
"""

import re

from flask import abort, jsonify, render_template
from flask_cors import cross_origin

from folio.core.config import Config
from folio.modules.projects.database import init_projects_db, normalize_contents
from . import projects_public_bp


def format_content(content):
    """Format content by converting line breaks to HTML and handling basic formatting"""
    if not content:
        return ""

    content = re.sub(r'\n\s*\n', '</p><p>', content)
    content = re.sub(r'\n', '<br>', content)
    content = f'<p>{content}</p>'
    content = re.sub(r'<p>\s*</p>', '', content)
    content = re.sub(r'\*\*(.*?)\*\*', r'<strong>\1</strong>', content)
    content = re.sub(r'\*(.*?)\*', r'<em>\1</em>', content)
    content = re.sub(r'\[([^\]]+)\]\(([^\)]+)\)', r'<a href="\2" target="_blank" rel="noopener">\1</a>', content)

    return content


@projects_public_bp.app_template_filter('format_project_content')
def format_content_filter(content):
    return format_content(content)


def published_projects():
    """Published projects in display order, with contents filled in."""
    store = init_projects_db()
    projects = store.read_all({'status': 'published'})
    for project in projects:
        project['contents'] = normalize_contents(project.get('contents'))
    return projects


# ===== Routes =====

@projects_public_bp.route('/')
def home():
    """Home page - the published projects"""
    return render_template('projects_public/index.html', projects=published_projects())


@projects_public_bp.route('/projects')
def projects_list():
    """Public projects listing"""
    return render_template('projects_public/projects.html', projects=published_projects())


@projects_public_bp.route('/projects/<slug>')
def project_detail(slug):
    """Individual project page (reachable by slug whatever its status)"""
    store = init_projects_db()
    project = store.get_by_field('slug', slug)
    if not project:
        abort(404)

    project['contents'] = normalize_contents(project.get('contents'))
    return render_template('projects_public/project.html', project=project)


# ===== API Routes =====

@projects_public_bp.route('/api/projects', methods=['GET', 'OPTIONS'])
@cross_origin(origins=Config.CORS_ORIGINS, supports_credentials=False)
def api_projects():
    """Get published projects API - public endpoint."""
    try:
        return jsonify(published_projects())
    except Exception as e:
        print(f"Error getting public projects: {e}")
        return jsonify({'error': str(e)}), 500
