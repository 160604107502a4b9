import os
from dotenv import load_dotenv

load_dotenv(override=True)

class Config:
    """
    Base configuration for the folio package.
    Sites should provide database paths via environment variables.
    """
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY')

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))

    # Database paths - use environment variables or fallback to DB_DIR
    CONTENT_DB = os.getenv('CONTENT_DB', os.path.join(DB_DIR, "content.db"))
    USER_DB = os.getenv('USER_DB', os.path.join(DB_DIR, "users.db"))
    LOGS_DB = os.getenv('LOGS_DB', os.path.join(DB_DIR, "logs.db"))

    # Table holding keyed JSON documents (About page)
    CONFIG_TABLE = "config"

    # Storage settings (local static folder or an S3-compatible bucket)
    STORAGE_TYPE = os.getenv('STORAGE_TYPE', 'local')
    SPACES_REGION = os.getenv('SPACES_REGION')
    SPACES_NAME = os.getenv('SPACES_NAME')
    SPACES_KEY = os.getenv('SPACES_KEY')
    SPACES_SECRET = os.getenv('SPACES_SECRET')
    SPACES_FOLDER = os.getenv('SPACES_FOLDER', 'uploads')
    UPLOAD_MAX_BYTES = int(os.getenv('UPLOAD_MAX_BYTES', str(5 * 1024 * 1024)))

    # Number of concurrent position writes when saving a project order
    ORDER_SYNC_MAX_WORKERS = int(os.getenv('ORDER_SYNC_MAX_WORKERS', '8'))

    BRAND_NAME = os.getenv('BRAND_NAME', 'folio')

    # Origins allowed to fetch the public JSON APIs (comma separated)
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*').split(',')


def get_config_value(key, default=None):
    """Get configuration value: Flask app config first, then Config, then env var"""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val is not None:
            return val
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    if val is not None:
        return val
    return os.getenv(key, default)
