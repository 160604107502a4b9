"""
Ops Routes
==========

Public health endpoint and admin log feed.
"""

import shutil
from datetime import datetime

from flask import jsonify, request

from folio.core.config import get_config_value
from folio.core.database import Database
from folio.core.logging_service import LoggingService
from folio.modules.dashboard.utils import api_admin_required
from . import ops_health_bp, ops_admin_bp

# Databases every page depends on
HEALTH_DATABASES = ('CONTENT_DB', 'USER_DB')


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------

def _get_disk_usage():
    """Get disk usage for root partition."""
    try:
        usage = shutil.disk_usage('/')
        return {
            'total_gb': round(usage.total / (1024 ** 3), 1),
            'used_gb': round(usage.used / (1024 ** 3), 1),
            'free_gb': round(usage.free / (1024 ** 3), 1),
            'percent': round((usage.used / usage.total) * 100, 1),
        }
    except OSError as e:
        return {'total_gb': 0, 'used_gb': 0, 'free_gb': 0, 'percent': 0, 'error': str(e)}


def _check_databases():
    return {key.lower(): Database.ping(get_config_value(key)) for key in HEALTH_DATABASES}


def _compute_status(disk, databases):
    """Compute overall status and issues list from disk and database checks."""
    issues = []
    status = 'ok'

    for name, ok in databases.items():
        if not ok:
            issues.append({'type': 'database_down', 'message': f'Database unreachable: {name}'})
            status = 'critical'

    disk_pct = disk.get('percent', 0)
    if disk_pct >= 90:
        issues.append({'type': 'disk_critical', 'message': f'Disk usage critical: {disk_pct}%'})
        status = 'critical'
    elif disk_pct >= 80:
        issues.append({'type': 'disk_warning', 'message': f'Disk usage high: {disk_pct}%'})
        if status != 'critical':
            status = 'warning'

    return status, issues


def _build_health_response():
    disk = _get_disk_usage()
    databases = _check_databases()
    status, issues = _compute_status(disk, databases)
    return {
        'status': status,
        'timestamp': datetime.now().isoformat(),
        'checks': {
            'disk': disk,
            'databases': databases,
        },
        'issues': issues,
    }, status


# ---------------------------------------------------------------------------
# Public routes (ops_health_bp, no auth)
# ---------------------------------------------------------------------------

@ops_health_bp.route('/')
@ops_health_bp.route('')
def health_check():
    """Public health endpoint for uptime monitors."""
    data, status = _build_health_response()
    code = 503 if status == 'critical' else 200
    return jsonify(data), code


# ---------------------------------------------------------------------------
# Admin routes (ops_admin_bp, session auth)
# ---------------------------------------------------------------------------

@ops_admin_bp.route('/api/logs')
@api_admin_required
def recent_logs():
    """Most recent log rows, optionally filtered by ?level="""
    level = request.args.get('level')
    limit = min(request.args.get('limit', 50, type=int), 500)
    return jsonify({'logs': LoggingService.recent(level=level, limit=limit)})


@ops_admin_bp.route('/api/logs/cleanup', methods=['POST'])
@api_admin_required
def cleanup_logs():
    days = (request.get_json(silent=True) or {}).get('days', 30)
    if not isinstance(days, int) or days < 1:
        return jsonify({'error': 'days must be a positive integer'}), 400
    deleted = LoggingService.cleanup_old_logs(days_to_keep=days)
    return jsonify({'success': True, 'deleted': deleted})
