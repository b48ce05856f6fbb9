"""
Room availability checking.

Two reservations on the same room conflict when their half-open intervals
[check_in, check_out) overlap:

    existing.check_in < requested.check_out AND requested.check_in < existing.check_out

so a checkout and a check-in at the same instant do not conflict. Only active
reservations in a blocking status are considered. Every query in this module
uses exactly this comparison.
"""

from database import get_db
from models.room import get_all_rooms
from utils.datetime_helpers import to_db_datetime
from .reservation_crud import row_to_reservation

# Statuses that hold a room
BLOCKING_STATUSES = ('PENDING', 'CONFIRMED', 'CHECKED_IN')


def _overlap_clause(room_id, check_in, check_out, exclude_reservation_id) -> tuple:
    placeholders = ','.join('?' * len(BLOCKING_STATUSES))
    clause = f'''
        r.is_active = 1
        AND r.status IN ({placeholders})
        AND r.check_in_date < ?
        AND ? < r.check_out_date
    '''
    params = list(BLOCKING_STATUSES) + [to_db_datetime(check_out), to_db_datetime(check_in)]

    if room_id is not None:
        clause += ' AND r.room_id = ?'
        params.append(room_id)

    if exclude_reservation_id:
        clause += ' AND r.id != ?'
        params.append(exclude_reservation_id)

    return clause, params


# =============================================================================
# SINGLE ROOM
# =============================================================================

def is_room_available(
    room_id: str,
    check_in,
    check_out,
    exclude_reservation_id: str = None,
    cursor=None
) -> bool:
    """
    Check whether a room is free for [check_in, check_out).

    Args:
        room_id: Room ID
        check_in: Requested check-in datetime
        check_out: Requested check-out datetime
        exclude_reservation_id: Reservation ID to ignore (for updates)
        cursor: Optional cursor of an open transaction

    Returns:
        True if no blocking reservation overlaps the interval
    """
    clause, params = _overlap_clause(room_id, check_in, check_out, exclude_reservation_id)
    cur = cursor or get_db().cursor()
    cur.execute(f'SELECT 1 FROM reservations r WHERE {clause} LIMIT 1', params)
    return cur.fetchone() is None


def get_overlapping_reservations(
    room_id,
    check_in,
    check_out,
    exclude_reservation_id: str = None,
    cursor=None
) -> list:
    """
    Get blocking reservations that overlap [check_in, check_out).

    Args:
        room_id: Room ID, or None to scan every room
        check_in: Window start
        check_out: Window end
        exclude_reservation_id: Reservation ID to ignore
        cursor: Optional cursor of an open transaction

    Returns:
        List of reservation dicts (with room_number), nearest check-in first
    """
    clause, params = _overlap_clause(room_id, check_in, check_out, exclude_reservation_id)
    cur = cursor or get_db().cursor()
    cur.execute(f'''
        SELECT r.*, rm.number as room_number
        FROM reservations r
        JOIN rooms rm ON r.room_id = rm.id
        WHERE {clause}
        ORDER BY r.check_in_date ASC, r.created_at ASC
    ''', params)
    return [row_to_reservation(row) for row in cur.fetchall()]


def get_room_holding_statuses(room_id: str, exclude_reservation_id: str = None, cursor=None) -> set:
    """
    Get the blocking statuses of active reservations on a room, any dates.

    Args:
        room_id: Room ID
        exclude_reservation_id: Reservation ID to ignore
        cursor: Optional cursor of an open transaction

    Returns:
        Set of statuses (subset of BLOCKING_STATUSES)
    """
    placeholders = ','.join('?' * len(BLOCKING_STATUSES))
    query = f'''
        SELECT DISTINCT r.status FROM reservations r
        WHERE r.room_id = ? AND r.is_active = 1 AND r.status IN ({placeholders})
    '''
    params = [room_id] + list(BLOCKING_STATUSES)
    if exclude_reservation_id:
        query += ' AND r.id != ?'
        params.append(exclude_reservation_id)

    cur = cursor or get_db().cursor()
    cur.execute(query, params)
    return {row['status'] for row in cur.fetchall()}


# =============================================================================
# HOTEL-WIDE
# =============================================================================

def get_reserved_room_ids(check_in, check_out, cursor=None) -> list:
    """
    Get the IDs of rooms held by a blocking reservation in the window.

    Returns:
        List of room IDs
    """
    clause, params = _overlap_clause(None, check_in, check_out, None)
    cur = cursor or get_db().cursor()
    cur.execute(f'SELECT DISTINCT r.room_id FROM reservations r WHERE {clause}', params)
    return [row['room_id'] for row in cur.fetchall()]


def get_available_rooms(check_in, check_out) -> list:
    """
    Get active rooms with no blocking reservation in the window.

    Returns:
        List of room dicts ordered by number
    """
    reserved = set(get_reserved_room_ids(check_in, check_out))
    return [room for room in get_all_rooms() if room['id'] not in reserved]
