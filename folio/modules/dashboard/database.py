"""
Admin Accounts
==============

Admin table in USER_DB. Passwords are stored as werkzeug hashes.
"""

import sqlite3

from werkzeug.security import check_password_hash, generate_password_hash

from folio.core.config import get_config_value
from folio.core.database import Database


class AdminExists(ValueError):
    pass


def get_user_db():
    return get_config_value('USER_DB', 'users.db')


def init_admin_table():
    """Initialize admin table if it doesn't exist"""
    user_db = get_user_db()
    Database.ensure_dir(user_db)
    with Database.connect(user_db) as conn:
        cursor = conn.cursor()
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS admin (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                email TEXT UNIQUE NOT NULL,
                password_hash TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')
        conn.commit()


def admin_count():
    init_admin_table()
    with Database.connect(get_user_db()) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT COUNT(*) FROM admin")
        return cursor.fetchone()[0]


def create_admin(email, password):
    """Create an admin and return its id."""
    init_admin_table()
    try:
        with Database.connect(get_user_db()) as conn:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO admin (email, password_hash) VALUES (?, ?)",
                (email.strip().lower(), generate_password_hash(password))
            )
            conn.commit()
            return cursor.lastrowid
    except sqlite3.IntegrityError as e:
        raise AdminExists(f"An admin with email {email} already exists") from e


def verify_admin(email, password):
    """Return (id, email) for valid credentials, else None."""
    init_admin_table()
    with Database.connect(get_user_db()) as conn:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT id, email, password_hash FROM admin WHERE email = ?",
            (email.strip().lower(),)
        )
        row = cursor.fetchone()

    if row and check_password_hash(row[2], password):
        return row[0], row[1]
    return None
