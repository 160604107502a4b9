"""
Critical Integration Tests for folio
====================================

Focused tests covering the integration points most likely to break.
Run with: pytest tests/test_critical.py -v

NOTE: pytest is listed under extras_require["dev"] in setup.py.
Install with: pip install -e ".[dev]"
"""

import io
import os
import shutil
import tempfile
from unittest.mock import patch

from flask import Flask
from PIL import Image

from folio import Folio
from folio.core.logging_service import LoggingService


def _png_bytes():
    buf = io.BytesIO()
    Image.new("RGB", (4, 3), color=(200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()


# ---------------------------------------------------------------------------
# 1. Framework initialisation -- Folio(app) does not raise
# ---------------------------------------------------------------------------

def test_framework_initialisation(tmp_db_dir):
    """Folio(app) boots without errors and stores itself on the app."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = tmp_db_dir

    folio = Folio(app, {'brand_name': 'Studio Test'})

    assert "folio" in app.extensions
    assert app.extensions["folio"] is folio
    assert app.config["BRAND_NAME"] == "Studio Test"


# ---------------------------------------------------------------------------
# 2. Config resolution -- unset DB paths default into DB_DIR
# ---------------------------------------------------------------------------

def test_config_db_paths(tmp_db_dir, monkeypatch):
    app = Flask(__name__)
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = tmp_db_dir
    for key in ("CONTENT_DB", "USER_DB", "LOGS_DB"):
        monkeypatch.delenv(key, raising=False)

    Folio(app)

    assert app.config["CONTENT_DB"] == os.path.join(tmp_db_dir, "content.db")
    assert app.config["USER_DB"] == os.path.join(tmp_db_dir, "users.db")
    assert app.config["LOGS_DB"] == os.path.join(tmp_db_dir, "logs.db")
    assert app.config["ORDER_SYNC_MAX_WORKERS"] > 0


# ---------------------------------------------------------------------------
# 3. Database directory creation
# ---------------------------------------------------------------------------

def test_database_dir_creation():
    """Folio creates the configured DB_DIR on disk."""
    d = tempfile.mkdtemp(prefix="folio-dbtest-")
    target = os.path.join(d, "sub", "databases")

    try:
        app = Flask(__name__)
        app.config["TESTING"] = True
        app.config["SECRET_KEY"] = "test-secret"
        app.config["DB_DIR"] = target
        app.config["CONTENT_DB"] = os.path.join(target, "content.db")
        app.config["USER_DB"] = os.path.join(target, "users.db")
        app.config["LOGS_DB"] = os.path.join(target, "logs.db")

        Folio(app)

        assert os.path.isdir(target), f"DB_DIR was not created at {target}"
        assert os.path.exists(os.path.join(target, "content.db"))
    finally:
        shutil.rmtree(d, ignore_errors=True)


# ---------------------------------------------------------------------------
# 4. All blueprints registered
# ---------------------------------------------------------------------------

EXPECTED_MODULES = [
    "admin",
    "about_admin",
    "projects_admin",
    "about_public",
    "projects",
    "ops_health",
    "ops_admin",
]


def test_all_blueprints_registered(app):
    registered = app.extensions["folio"].get_registered_modules()

    for mod in EXPECTED_MODULES:
        assert mod in registered, (
            f"Module '{mod}' was not registered. Registered: {registered}"
        )

    assert len(registered) == len(EXPECTED_MODULES)


def test_features_can_be_disabled(tmp_db_dir):
    app = Flask(__name__)
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = tmp_db_dir

    folio = Folio(app, {'features': {'ops': False, 'public': False}})

    registered = folio.get_registered_modules()
    assert "ops_health" not in registered
    assert "projects" not in registered
    assert "admin" in registered


# ---------------------------------------------------------------------------
# 5. Template context -- folio_config and brand_name are injected
# ---------------------------------------------------------------------------

def test_template_context_injection(app):
    with app.test_request_context("/"):
        ctx = {}
        for func in app.template_context_processors[None]:
            ctx.update(func())

        assert "folio_config" in ctx, "folio_config missing from template context"
        assert "brand_name" in ctx, "brand_name missing from template context"
        assert isinstance(ctx["folio_config"], dict)
        assert isinstance(ctx["brand_name"], str)
        assert len(ctx["brand_name"]) > 0


def test_template_filters_registered(app):
    """format_project_content is used by the public templates."""
    assert callable(app.jinja_env.filters.get("format_project_content"))


# ---------------------------------------------------------------------------
# 6. Admin auth
# ---------------------------------------------------------------------------

def test_admin_auth_redirect(client):
    """Unauthenticated GET to the dashboard redirects to login."""
    response = client.get("/admin/dashboard", follow_redirects=False)
    assert response.status_code == 302, (
        f"Expected 302 redirect, got {response.status_code}"
    )
    assert "/admin/login" in response.headers.get("Location", "")


def test_first_admin_and_login(client):
    response = client.post("/admin/create-admin", data={
        "email": "Owner@Example.com",
        "password": "password123",
        "confirm_password": "password123",
    })
    assert response.status_code == 302

    client.get("/admin/logout")
    # with an admin in place, create-admin is locked for anonymous users
    assert client.get("/admin/create-admin").status_code == 302

    bad = client.post("/admin/login", data={"email": "owner@example.com", "password": "nope"})
    assert bad.status_code == 401

    good = client.post("/admin/login", data={"email": "owner@example.com", "password": "password123"})
    assert good.status_code == 302
    assert client.get("/admin/status").get_json()["logged_in"] is True
    assert client.get("/admin/dashboard").status_code == 200


def test_login_only_follows_local_next(client):
    client.post("/admin/create-admin", data={
        "email": "owner@example.com",
        "password": "password123",
        "confirm_password": "password123",
    })
    client.get("/admin/logout")
    credentials = {"email": "owner@example.com", "password": "password123"}

    for target in ("//evil.example", "/\\evil.example", "https://evil.example/admin"):
        response = client.post("/admin/login", query_string={"next": target}, data=credentials)
        assert response.status_code == 302
        location = response.headers.get("Location", "")
        assert "evil.example" not in location, f"Followed off-site next={target!r} to {location}"
        assert location.endswith("/admin/dashboard")
        client.get("/admin/logout")

    response = client.post("/admin/login", query_string={"next": "/admin/status"}, data=credentials)
    assert response.headers.get("Location", "").endswith("/admin/status")


def test_logout_discards_editing_sessions(app, admin_client):
    admin_client.post("/admin/about/api/session")
    assert app.extensions["folio"].sessions.count() == 1

    admin_client.get("/admin/logout")
    assert app.extensions["folio"].sessions.count() == 0


# ---------------------------------------------------------------------------
# 7. Image upload
# ---------------------------------------------------------------------------

def test_upload_image_locally(app, admin_client):
    response = admin_client.post("/admin/upload-image", data={
        "folder": "projects/details",
        "image": (io.BytesIO(_png_bytes()), "detail.png"),
    }, content_type="multipart/form-data")

    body = response.get_json()
    assert response.status_code == 200, body
    assert body["image_url"].startswith("/static/projects/details/")
    assert os.path.exists(os.path.join(app.static_folder, "projects", "details", body["filename"]))


def test_upload_rejects_bad_files(app, admin_client):
    not_image = admin_client.post("/admin/upload-image", data={
        "folder": "uploads",
        "image": (io.BytesIO(b"not really a png"), "fake.png"),
    }, content_type="multipart/form-data")
    assert not_image.status_code == 400

    wrong_folder = admin_client.post("/admin/upload-image", data={
        "folder": "../etc",
        "image": (io.BytesIO(_png_bytes()), "a.png"),
    }, content_type="multipart/form-data")
    assert wrong_folder.status_code == 400

    app.config["UPLOAD_MAX_BYTES"] = 10
    too_big = admin_client.post("/admin/upload-image", data={
        "folder": "uploads",
        "image": (io.BytesIO(_png_bytes()), "a.png"),
    }, content_type="multipart/form-data")
    assert too_big.status_code == 400


# ---------------------------------------------------------------------------
# 8. Health and logs
# ---------------------------------------------------------------------------

def test_health_endpoint(client):
    """GET /health returns JSON with status field and checks dict.
    HTTP 200 for ok/warning, 503 for critical; both are valid."""
    response = client.get("/health")
    assert response.status_code in (200, 503), (
        f"Expected 200 or 503, got {response.status_code}"
    )
    data = response.get_json()
    assert data["status"] in ("ok", "warning", "critical")
    assert "disk" in data["checks"]
    assert data["checks"]["databases"] == {"content_db": True, "user_db": True}


def test_logs_feed(app, admin_client):
    with app.app_context():
        LoggingService.error("projects", "Project order save failed", {"error": "locked"})

    logs = admin_client.get("/admin/ops/api/logs?level=error").get_json()["logs"]
    assert logs[0]["message"] == "Project order save failed"
    assert logs[0]["level"] == "ERROR"

    assert admin_client.post("/admin/ops/api/logs/cleanup", json={"days": 0}).status_code == 400
    assert admin_client.post("/admin/ops/api/logs/cleanup", json={"days": 30}).get_json()["success"] is True


def test_ops_admin_requires_login(client):
    assert client.get("/admin/ops/api/logs").status_code == 401


def test_upload_image_to_spaces(app, admin_client):
    """Cloud storage hands back the bucket URL and never touches static/."""
    app.config.update(
        STORAGE_TYPE="cloud",
        SPACES_REGION="ams3",
        SPACES_NAME="folio-media",
        SPACES_KEY="key",
        SPACES_SECRET="secret",
        SPACES_FOLDER="site",
    )

    with patch("boto3.client") as client_factory:
        response = admin_client.post("/admin/upload-image", data={
            "folder": "about",
            "image": (io.BytesIO(_png_bytes()), "studio.png"),
        }, content_type="multipart/form-data")

    body = response.get_json()
    assert response.status_code == 200, body
    assert body["image_url"].startswith("https://folio-media.ams3.digitaloceanspaces.com/site/about/")

    put = client_factory.return_value.put_object
    put.assert_called_once()
    assert put.call_args.kwargs["ContentType"] == "image/png"
    assert not os.path.exists(os.path.join(app.static_folder, "about"))
