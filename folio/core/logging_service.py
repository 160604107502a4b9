"""
Centralized logging service for folio.
Provides structured logging with database storage and a console fallback.
"""

import json
from datetime import datetime, timedelta
from flask import request, has_request_context
from .database import Database
from .config import get_config_value


class LoggingService:
    """Centralized logging service for application-wide logging"""

    @staticmethod
    def _logs_db():
        return get_config_value('LOGS_DB')

    @staticmethod
    def _ensure_logs_table():
        """Ensure the app_logs table exists"""
        logs_db = LoggingService._logs_db()
        Database.ensure_dir(logs_db)
        with Database.connect(logs_db) as conn:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS app_logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    level TEXT NOT NULL,
                    source TEXT NOT NULL,
                    message TEXT NOT NULL,
                    details TEXT,
                    ip_address TEXT,
                    user_agent TEXT,
                    request_path TEXT,
                    user_id TEXT
                )
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_logs_timestamp
                ON app_logs(timestamp DESC)
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_logs_level
                ON app_logs(level)
            """)
            conn.commit()

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return None, None, None

        ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
        if ip_address and ',' in ip_address:
            ip_address = ip_address.split(',')[0].strip()

        user_agent = request.headers.get('User-Agent', '')
        return ip_address, user_agent, request.path

    @staticmethod
    def log(level, source, message, details=None, user_id=None):
        """
        Log a message to the database

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (about, projects, storage, etc.)
            message (str): Main log message
            details (str/dict): Additional details (will be JSON-encoded if dict)
            user_id (str): Optional user identifier
        """
        if isinstance(details, (dict, list)):
            details = json.dumps(details, indent=2, default=str)

        timestamp = datetime.now().isoformat()

        try:
            LoggingService._ensure_logs_table()
            ip_address, user_agent, request_path = LoggingService._get_request_context()

            with Database.connect(LoggingService._logs_db()) as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO app_logs
                    (timestamp, level, source, message, details, ip_address, user_agent, request_path, user_id)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    timestamp, level.upper(), source, message, details,
                    ip_address, user_agent, request_path,
                    str(user_id) if user_id is not None else None
                ))
                conn.commit()

        except Exception as e:
            # Fallback to console logging if database fails
            print(f"[{timestamp}] [{level.upper()}] [{source}] {message}")
            if details:
                print(f"Details: {details}")
            print(f"Logging service error: {e}")

    @staticmethod
    def debug(source, message, details=None, user_id=None):
        LoggingService.log('DEBUG', source, message, details, user_id)

    @staticmethod
    def info(source, message, details=None, user_id=None):
        LoggingService.log('INFO', source, message, details, user_id)

    @staticmethod
    def warning(source, message, details=None, user_id=None):
        LoggingService.log('WARNING', source, message, details, user_id)

    @staticmethod
    def error(source, message, details=None, user_id=None):
        LoggingService.log('ERROR', source, message, details, user_id)

    @staticmethod
    def critical(source, message, details=None, user_id=None):
        LoggingService.log('CRITICAL', source, message, details, user_id)

    @staticmethod
    def log_user_action(source, action, user_id=None, details=None):
        """Log admin actions (login, save, reorder, etc.)"""
        LoggingService.info(source, f"User action: {action}", details, user_id)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        """Log error with full traceback"""
        import traceback
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': traceback.format_exc()
        }
        if details:
            error_details['additional_details'] = details

        LoggingService.error(source, f"Exception occurred: {type(error).__name__}", error_details)

    @staticmethod
    def recent(level=None, limit=50):
        """Return the most recent log rows as dicts, newest first."""
        LoggingService._ensure_logs_table()
        query = 'SELECT timestamp, level, source, message, details FROM app_logs'
        params = []
        if level:
            query += ' WHERE level = ?'
            params.append(level.upper())
        query += ' ORDER BY id DESC LIMIT ?'
        params.append(limit)

        with Database.connect(LoggingService._logs_db()) as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return [
                {'timestamp': r[0], 'level': r[1], 'source': r[2], 'message': r[3], 'details': r[4]}
                for r in cursor.fetchall()
            ]

    @staticmethod
    def cleanup_old_logs(days_to_keep=30):
        """Clean up old log entries"""
        cutoff_iso = (datetime.now() - timedelta(days=days_to_keep)).isoformat()

        LoggingService._ensure_logs_table()
        with Database.connect(LoggingService._logs_db()) as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM app_logs WHERE timestamp < ?", (cutoff_iso,))
            deleted_count = cursor.rowcount
            conn.commit()

        LoggingService.info('system', f"Cleaned up {deleted_count} old log entries")
        return deleted_count


# Convenience instance for easy importing
logger = LoggingService()
