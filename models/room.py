"""
Room data access functions.
Rooms are the only bookable resource; their status follows the most recent
reservation transition.
"""

import uuid

from database import get_db

ROOM_STATUSES = ('AVAILABLE', 'RESERVED', 'OCCUPIED', 'CLEANING')

# Replenishment flags cleared on check-out (0 = needs restocking)
AMENITY_FIELDS = (
    'trash_bin',
    'towel',
    'toilet_paper',
    'shower_soap',
    'hand_soap',
    'lamp',
)


# =============================================================================
# READ OPERATIONS
# =============================================================================

def get_room_by_id(room_id: str, cursor=None) -> dict:
    """
    Get room by ID with its type name and nightly price.

    Args:
        room_id: Room ID
        cursor: Optional cursor of an open transaction

    Returns:
        Room dict or None if not found
    """
    cur = cursor or get_db().cursor()
    cur.execute('''
        SELECT r.*, rt.name as room_type_name, rt.price as room_price
        FROM rooms r
        LEFT JOIN room_types rt ON r.room_type_id = rt.id
        WHERE r.id = ?
    ''', (room_id,))
    row = cur.fetchone()
    return dict(row) if row else None


def get_room_by_number(number: int) -> dict:
    """Get room by its door number."""
    cur = get_db().cursor()
    cur.execute('SELECT * FROM rooms WHERE number = ?', (number,))
    row = cur.fetchone()
    return dict(row) if row else None


def get_all_rooms(active_only: bool = True) -> list:
    """
    Get all rooms ordered by number.

    Args:
        active_only: If True, only return active rooms

    Returns:
        List of room dicts
    """
    cur = get_db().cursor()
    query = '''
        SELECT r.*, rt.name as room_type_name, rt.price as room_price
        FROM rooms r
        LEFT JOIN room_types rt ON r.room_type_id = rt.id
    '''
    if active_only:
        query += ' WHERE r.is_active = 1'
    query += ' ORDER BY r.number'
    cur.execute(query)
    return [dict(row) for row in cur.fetchall()]


def get_room_type_by_name(name: str) -> dict:
    """Get room type by name."""
    cur = get_db().cursor()
    cur.execute('SELECT * FROM room_types WHERE name = ?', (name,))
    row = cur.fetchone()
    return dict(row) if row else None


# =============================================================================
# WRITE OPERATIONS
# =============================================================================

def create_room(number: int, room_type_id: str = None, status: str = 'AVAILABLE', cursor=None) -> str:
    """
    Create a new room.

    Args:
        number: Door number (unique)
        room_type_id: Room type ID
        status: Initial room status
        cursor: Optional cursor of an open transaction

    Returns:
        New room ID

    Raises:
        ValueError: If status is not a room status
    """
    if status not in ROOM_STATUSES:
        raise ValueError(f'Estado de habitación inválido: {status}')

    room_id = str(uuid.uuid4())
    cur = cursor or get_db().cursor()
    cur.execute('''
        INSERT INTO rooms (id, number, room_type_id, status)
        VALUES (?, ?, ?, ?)
    ''', (room_id, number, room_type_id, status))
    return room_id


def update_room_status(room_id: str, status: str, cursor) -> dict:
    """
    Set room status inside the caller's transaction.

    Args:
        room_id: Room ID
        status: One of ROOM_STATUSES
        cursor: Cursor of the open transaction

    Returns:
        Updated room dict

    Raises:
        ValueError: If status is not a room status or the room does not exist
    """
    if status not in ROOM_STATUSES:
        raise ValueError(f'Estado de habitación inválido: {status}')

    cursor.execute('''
        UPDATE rooms
        SET status = ?, updated_at = CURRENT_TIMESTAMP
        WHERE id = ?
    ''', (status, room_id))

    if cursor.rowcount == 0:
        raise ValueError(f'Habitación con ID {room_id} no encontrada')

    return get_room_by_id(room_id, cursor=cursor)


def reset_room_amenities(room_id: str, cursor) -> None:
    """Mark every amenity of the room as needing replenishment."""
    assignments = ', '.join(f'{field} = 0' for field in AMENITY_FIELDS)
    cursor.execute(f'''
        UPDATE rooms
        SET {assignments}, updated_at = CURRENT_TIMESTAMP
        WHERE id = ?
    ''', (room_id,))
