import os
import sqlite3


class Database:

    @staticmethod
    def connect(path):
        return sqlite3.connect(path)

    @staticmethod
    def ensure_dir(path):
        """Create the parent directory of a database file if it is missing."""
        db_dir = os.path.dirname(path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    @staticmethod
    def table_columns(conn, table):
        """Return the column names of *table* (empty if it does not exist)."""
        cursor = conn.cursor()
        cursor.execute(f"PRAGMA table_info({table})")
        return [column[1] for column in cursor.fetchall()]

    @staticmethod
    def add_missing_columns(conn, table, new_columns):
        """Additive migration: add each (name, type) column not yet present."""
        columns = Database.table_columns(conn, table)
        cursor = conn.cursor()
        for col_name, col_type in new_columns:
            if col_name not in columns:
                print(f"Adding {col_name} column to {table} table...")
                cursor.execute(f'ALTER TABLE {table} ADD COLUMN {col_name} {col_type}')
        conn.commit()

    @staticmethod
    def ping(path):
        """Return True when the database at *path* answers a trivial query."""
        try:
            with Database.connect(path) as conn:
                conn.execute("SELECT 1").fetchone()
            return True
        except sqlite3.Error as e:
            print(f"Database ping failed for {path}: {e}")
            return False
