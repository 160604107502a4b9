"""
Content Stores
==============

sqlite-backed stores behind the editors:

- ``DocumentStore``: whole JSON documents addressed by key (About page).
- ``RecordStore``: independently stored rows with whitelisted columns,
  specialised per table (see ``folio.modules.projects.database``).
"""

import json

from .database import Database


class DocumentStore:
    """Key -> JSON document table (``config`` by default)."""

    def __init__(self, db_path, table='config'):
        self.db_path = db_path
        self.table = table

    def init_schema(self):
        Database.ensure_dir(self.db_path)
        with Database.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(f'''
                CREATE TABLE IF NOT EXISTS {self.table} (
                    id TEXT PRIMARY KEY,
                    content TEXT,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')
            conn.commit()

    def read_one(self, key):
        """Return the stored document, or None when *key* is not found.

        Content that is not valid JSON (hand-written legacy rows) is returned
        as the raw string.
        """
        self.init_schema()
        with Database.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(f'SELECT content FROM {self.table} WHERE id = ?', (key,))
            row = cursor.fetchone()

        if not row or row[0] is None:
            return None
        try:
            return json.loads(row[0])
        except (json.JSONDecodeError, TypeError):
            return row[0]

    def write_one(self, key, document):
        """Store *document* under *key* as a single statement."""
        self.init_schema()
        content = json.dumps(document, ensure_ascii=False)
        with Database.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(f'''
                INSERT INTO {self.table} (id, content, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(id) DO UPDATE SET
                    content = excluded.content,
                    updated_at = CURRENT_TIMESTAMP
            ''', (key, content))
            conn.commit()
        return True


class RecordStore:
    """Row-per-record table with JSON columns and a whitelist of fields.

    Subclasses set ``table``, ``columns`` (every column, ``id`` first),
    ``json_columns`` and implement :meth:`init_schema`.
    """

    table = None
    columns = ('id',)
    json_columns = ()
    default_order = 'id ASC'

    def __init__(self, db_path):
        self.db_path = db_path

    def init_schema(self):
        raise NotImplementedError

    # ===== Row helpers =====

    def _check_fields(self, fields):
        unknown = [name for name in fields if name not in self.columns]
        if unknown:
            raise ValueError(f"Unknown {self.table} field(s): {', '.join(unknown)}")

    def _encode(self, name, value):
        if name in self.json_columns and value is not None:
            return json.dumps(value, ensure_ascii=False)
        return value

    def _decode(self, name, value):
        if name in self.json_columns and isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return None
        return value

    def _row_to_dict(self, row):
        return {name: self._decode(name, value) for name, value in zip(self.columns, row)}

    # ===== Operations =====

    def read_all(self, filters=None, order_by=None):
        """Return every record matching the equality *filters*, in order."""
        filters = filters or {}
        self._check_fields(filters)

        conditions = [f'{name} = ?' for name in filters]
        params = [self._encode(name, value) for name, value in filters.items()]
        where = f' WHERE {" AND ".join(conditions)}' if conditions else ''

        with Database.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(f'''
                SELECT {", ".join(self.columns)}
                FROM {self.table}{where}
                ORDER BY {order_by or self.default_order}
            ''', params)
            return [self._row_to_dict(row) for row in cursor.fetchall()]

    def get_by_id(self, record_id):
        return self.get_by_field('id', record_id)

    def get_by_field(self, name, value):
        self._check_fields([name])
        with Database.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(
                f'SELECT {", ".join(self.columns)} FROM {self.table} WHERE {name} = ? LIMIT 1',
                (self._encode(name, value),)
            )
            row = cursor.fetchone()
            return self._row_to_dict(row) if row else None

    def insert(self, record):
        """Insert *record* and return the new primary key."""
        fields = {k: v for k, v in record.items() if k != 'id'}
        self._check_fields(fields)
        placeholders = ', '.join('?' for _ in fields)

        with Database.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(
                f'INSERT INTO {self.table} ({", ".join(fields)}) VALUES ({placeholders})',
                [self._encode(k, v) for k, v in fields.items()]
            )
            conn.commit()
            return cursor.lastrowid

    def update_by_id(self, record_id, fields):
        """Write *fields* onto one record. Returns False if it does not exist."""
        fields = {k: v for k, v in fields.items() if k != 'id'}
        if not fields:
            return self.get_by_id(record_id) is not None
        self._check_fields(fields)
        assignments = ', '.join(f'{name} = ?' for name in fields)

        with Database.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(
                f'UPDATE {self.table} SET {assignments} WHERE id = ?',
                [self._encode(k, v) for k, v in fields.items()] + [record_id]
            )
            conn.commit()
            return cursor.rowcount > 0

    def delete_by_id(self, record_id):
        with Database.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(f'DELETE FROM {self.table} WHERE id = ?', (record_id,))
            conn.commit()
            return cursor.rowcount > 0

    def max_value(self, name, default=0):
        self._check_fields([name])
        with Database.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(f'SELECT MAX({name}) FROM {self.table}')
            value = cursor.fetchone()[0]
            return value if value is not None else default
