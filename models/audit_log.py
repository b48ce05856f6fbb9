"""
Audit Log model and data access functions.
Handles audit log creation, retrieval, filtering, and retention cleanup.
"""

import json
from datetime import timedelta

from database import get_db
from utils.datetime_helpers import get_now, to_db_datetime

AUDIT_ACTIONS = ('CREATE', 'UPDATE', 'UPDATE_STATUS', 'DELETE', 'REACTIVATE')


def _build_filters(
    performed_by_id: str = None,
    action: str = None,
    entity_type: str = None,
    entity_id: str = None,
    start_date: str = None,
    end_date: str = None
) -> tuple:
    """Build the WHERE clause shared by listing and counting."""
    clauses = ['1=1']
    params = []

    if performed_by_id is not None:
        clauses.append('performed_by_id = ?')
        params.append(performed_by_id)

    if action:
        clauses.append('action = ?')
        params.append(action)

    if entity_type:
        clauses.append('entity_type = ?')
        params.append(entity_type)

    if entity_id is not None:
        clauses.append('entity_id = ?')
        params.append(entity_id)

    if start_date:
        clauses.append('date(created_at) >= date(?)')
        params.append(start_date)

    if end_date:
        clauses.append('date(created_at) <= date(?)')
        params.append(end_date)

    return ' AND '.join(clauses), params


def _row_to_log(row) -> dict:
    log = dict(row)
    if log.get('changes'):
        log['changes'] = json.loads(log['changes'])
    return log


# =============================================================================
# READ OPERATIONS
# =============================================================================

def get_audit_logs(
    performed_by_id: str = None,
    action: str = None,
    entity_type: str = None,
    entity_id: str = None,
    start_date: str = None,
    end_date: str = None,
    limit: int = 100,
    offset: int = 0
) -> list:
    """
    Get audit logs with optional filtering.

    Args:
        performed_by_id: Filter by acting user ID
        action: Filter by action type (CREATE, UPDATE, UPDATE_STATUS, ...)
        entity_type: Filter by entity type (reservation, room, ...)
        entity_id: Filter by specific entity ID
        start_date: Filter logs from this date (ISO format YYYY-MM-DD)
        end_date: Filter logs until this date (ISO format YYYY-MM-DD)
        limit: Maximum number of records to return (default 100)
        offset: Number of records to skip for pagination

    Returns:
        List of audit log dicts, most recent first
    """
    where, params = _build_filters(performed_by_id, action, entity_type,
                                   entity_id, start_date, end_date)
    cursor = get_db().cursor()
    cursor.execute(f'''
        SELECT * FROM audit_log
        WHERE {where}
        ORDER BY created_at DESC, id DESC
        LIMIT ? OFFSET ?
    ''', params + [limit, offset])
    return [_row_to_log(row) for row in cursor.fetchall()]


def count_audit_logs(
    performed_by_id: str = None,
    action: str = None,
    entity_type: str = None,
    entity_id: str = None,
    start_date: str = None,
    end_date: str = None
) -> int:
    """
    Count audit logs with optional filtering (for pagination).

    Returns:
        Total count of matching audit logs
    """
    where, params = _build_filters(performed_by_id, action, entity_type,
                                   entity_id, start_date, end_date)
    cursor = get_db().cursor()
    cursor.execute(f'SELECT COUNT(*) as count FROM audit_log WHERE {where}', params)
    row = cursor.fetchone()
    return row['count'] if row else 0


def get_audit_logs_for_entity(entity_type: str, entity_id: str, limit: int = 50) -> list:
    """
    Get audit history for a specific entity.

    Args:
        entity_type: Entity type (reservation, room, ...)
        entity_id: Entity ID
        limit: Maximum number of records to return

    Returns:
        List of audit log dicts ordered by most recent first
    """
    return get_audit_logs(entity_type=entity_type, entity_id=entity_id, limit=limit)


# =============================================================================
# CREATE OPERATIONS
# =============================================================================

def create_audit_log(
    action: str,
    entity_type: str,
    entity_id: str = None,
    performed_by_id: str = None,
    changes: dict = None,
    cursor=None
) -> int:
    """
    Create a new audit log entry.

    When a cursor is given the entry joins the caller's transaction and is
    rolled back with it; otherwise it is written immediately.

    Args:
        action: Action type (CREATE, UPDATE, UPDATE_STATUS, DELETE, REACTIVATE)
        entity_type: Entity type (reservation, room, ...)
        entity_id: ID of the affected entity
        performed_by_id: ID of the acting user (None for system actions)
        changes: Dictionary with before/after state
        cursor: Optional cursor of an open transaction

    Returns:
        New audit log ID

    Example:
        create_audit_log(
            action='UPDATE_STATUS',
            entity_type='reservation',
            entity_id=reservation['id'],
            performed_by_id=user['id'],
            changes={'before': {'status': 'CONFIRMED'}, 'after': {'status': 'CHECKED_IN'}},
            cursor=cursor
        )
    """
    if action not in AUDIT_ACTIONS:
        raise ValueError(f'Acción de auditoría inválida: {action}')

    changes_json = None
    if changes is not None:
        changes_json = json.dumps(changes, default=str, ensure_ascii=False)

    cur = cursor or get_db().cursor()
    cur.execute('''
        INSERT INTO audit_log
        (entity_id, entity_type, action, performed_by_id, changes, created_at)
        VALUES (?, ?, ?, ?, ?, ?)
    ''', (entity_id, entity_type, action, performed_by_id, changes_json,
          to_db_datetime(get_now())))
    return cur.lastrowid


# =============================================================================
# CLEANUP OPERATIONS
# =============================================================================

def cleanup_old_logs(days: int = 90) -> int:
    """
    Delete audit logs older than specified number of days.

    Args:
        days: Number of days to retain logs (default 90)

    Returns:
        Number of deleted records
    """
    cutoff_str = to_db_datetime(get_now() - timedelta(days=days))

    cursor = get_db().cursor()
    cursor.execute('DELETE FROM audit_log WHERE created_at < ?', (cutoff_str,))
    return cursor.rowcount
