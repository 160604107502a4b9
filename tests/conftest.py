"""
Shared fixtures: a fully initialised app on a throwaway database directory.
"""

import os
import shutil
import tempfile

import pytest
from flask import Flask

from folio import Folio
from folio.modules.dashboard.database import create_admin


@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="folio-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def app(tmp_db_dir):
    """Flask app with every folio module registered."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = tmp_db_dir
    app.config["CONTENT_DB"] = os.path.join(tmp_db_dir, "content.db")
    app.config["USER_DB"] = os.path.join(tmp_db_dir, "users.db")
    app.config["LOGS_DB"] = os.path.join(tmp_db_dir, "logs.db")
    app.config["STORAGE_TYPE"] = "local"
    app.static_folder = os.path.join(tmp_db_dir, "static")
    Folio(app)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    """Test client already logged in as an admin."""
    with app.app_context():
        admin_id = create_admin("admin@example.com", "password123")

    client = app.test_client()
    with client.session_transaction() as sess:
        sess["admin_id"] = admin_id
        sess["admin_email"] = "admin@example.com"
    return client
