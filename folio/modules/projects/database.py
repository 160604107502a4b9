"""
Projects Database
=================

Project records: one row per project with an explicit ``position`` used for
the admin-controlled display order, and a JSON ``contents`` column for the
flexible detail fields.
"""

import re
import sqlite3
from datetime import datetime, timezone

from folio.core.config import get_config_value
from folio.core.content import coerce_document
from folio.core.database import Database
from folio.core.stores import RecordStore

# Workflow status: ready (draft), published (public), hidden
STATUSES = ('ready', 'published', 'hidden')

PROJECT_CONTENT_DEFAULTS = {
    'project': '',
    'year': None,
    'client': '',
    'services': '',
    'product': '',
    'keyword': [],
    'challenge': '',
    'thumbnail43': '',
    'thumbnail34': '',
    'detailImages': [],
}

# characters encodeURIComponent leaves untouched
_SLUG_RE = re.compile(r"[A-Za-z0-9\-_.!~*'()]+")


class SlugConflict(ValueError):
    """Another project already uses this slug."""


class ProjectStore(RecordStore):
    table = 'projects'
    columns = ('id', 'title', 'description', 'slug', 'status', 'position',
               'contents', 'created_at', 'updated_at')
    json_columns = ('contents',)
    default_order = 'COALESCE(position, 0) ASC, created_at DESC, id DESC'

    def init_schema(self):
        Database.ensure_dir(self.db_path)
        with Database.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS projects (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL,
                    slug TEXT NOT NULL UNIQUE,
                    status TEXT DEFAULT 'ready',
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')
            conn.commit()

            # Migration: add columns introduced after the first schema
            Database.add_missing_columns(conn, 'projects', [
                ('position', 'INTEGER DEFAULT 0'),
                ('contents', 'TEXT'),
                ('updated_at', 'TIMESTAMP'),
            ])

            cursor.execute('CREATE INDEX IF NOT EXISTS idx_projects_slug ON projects(slug)')
            cursor.execute('CREATE INDEX IF NOT EXISTS idx_projects_status ON projects(status)')
            cursor.execute('CREATE INDEX IF NOT EXISTS idx_projects_position ON projects(position)')
            conn.commit()

    def insert(self, record):
        try:
            return super().insert(record)
        except sqlite3.IntegrityError as e:
            if 'slug' in str(e):
                raise SlugConflict(f"Slug '{record.get('slug')}' already exists") from e
            raise

    def update_by_id(self, record_id, fields):
        try:
            return super().update_by_id(record_id, fields)
        except sqlite3.IntegrityError as e:
            if 'slug' in str(e):
                raise SlugConflict(f"Slug '{fields.get('slug')}' already exists") from e
            raise


# ===== Helper Functions =====

def get_db_config():
    """Get database path for project records"""
    return get_config_value('CONTENT_DB', 'content.db')


def get_project_store():
    return ProjectStore(get_db_config())


def init_projects_db():
    """Initialize projects table with migrations and return the store"""
    store = get_project_store()
    store.init_schema()
    return store


def now_timestamp():
    """UTC timestamp in sqlite's CURRENT_TIMESTAMP format."""
    return datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')


def normalize_contents(contents):
    """Fill missing content fields and migrate detailImages to {id, url} items."""
    document = coerce_document(contents, PROJECT_CONTENT_DEFAULTS, {'detailImages': 'url'})
    keyword = document.get('keyword')
    if isinstance(keyword, str):
        document['keyword'] = [k.strip() for k in keyword.split(',') if k.strip()]
    return document


def is_valid_slug(slug):
    return bool(slug) and _SLUG_RE.fullmatch(slug) is not None


def create_slug(title, store=None):
    """Create URL-friendly slug with uniqueness checking"""
    store = store or get_project_store()

    slug = re.sub(r'[^\w\s-]', '', (title or '').lower(), flags=re.ASCII)
    slug = re.sub(r'[-\s]+', '-', slug)
    slug = slug.strip('-')
    if not slug:
        return ''

    base_slug = slug
    counter = 1
    while store.get_by_field('slug', slug):
        slug = f"{base_slug}-{counter}"
        counter += 1
    return slug


def next_position(store):
    """Position for a new project: after every existing one."""
    return store.max_value('position', default=0) + 1


def project_summary(project):
    """List view of a project without the heavy contents blob"""
    return {k: v for k, v in project.items() if k != 'contents'}
