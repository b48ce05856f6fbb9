"""
Reservation CRUD operations.
Handles reading, inserting and updating reservation rows.

Reservation dicts carry check-in/check-out as naive hotel-local datetimes;
conversion to and from the stored text happens only here.
"""

import uuid

from database import get_db
from models.guest import serialize_guests, deserialize_guests
from utils.datetime_helpers import get_now, to_db_datetime, from_db_datetime

DATETIME_FIELDS = ('check_in_date', 'check_out_date', 'reservation_date')

UPDATABLE_FIELDS = (
    'room_id',
    'customer_id',
    'check_in_date',
    'check_out_date',
    'status',
    'guests',
    'observations',
    'origin',
    'reason',
)


# =============================================================================
# ROW CONVERSION
# =============================================================================

def row_to_reservation(row) -> dict:
    """Convert a reservations row into a reservation dict."""
    if row is None:
        return None

    reservation = dict(row)
    for field in DATETIME_FIELDS:
        if field in reservation:
            reservation[field] = from_db_datetime(reservation[field])
    reservation['is_active'] = bool(reservation.get('is_active'))
    reservation['applied_late_checkout'] = bool(reservation.get('applied_late_checkout'))
    reservation['guests'] = deserialize_guests(reservation.get('guests'))
    return reservation


def serialize_reservation(reservation: dict) -> dict:
    """Reservation dict with datetimes rendered as ISO 8601 strings."""
    if reservation is None:
        return None

    data = dict(reservation)
    for field in DATETIME_FIELDS:
        if data.get(field) is not None:
            data[field] = data[field].isoformat()
    return data


def _to_column(field: str, value):
    if field in DATETIME_FIELDS:
        return to_db_datetime(value)
    if field == 'guests':
        return serialize_guests(value)
    if isinstance(value, bool):
        return int(value)
    return value


# =============================================================================
# READ
# =============================================================================

def get_reservation_by_id(reservation_id: str, cursor=None) -> dict:
    """
    Get reservation by ID.

    Args:
        reservation_id: Reservation ID
        cursor: Optional cursor of an open transaction

    Returns:
        Reservation dict or None if not found
    """
    cur = cursor or get_db().cursor()
    cur.execute('SELECT * FROM reservations WHERE id = ?', (reservation_id,))
    return row_to_reservation(cur.fetchone())


def get_reservations_by_room(room_id: str, active_only: bool = True) -> list:
    """Get the reservations of a room ordered by check-in."""
    cur = get_db().cursor()
    query = 'SELECT * FROM reservations WHERE room_id = ?'
    if active_only:
        query += ' AND is_active = 1'
    query += ' ORDER BY check_in_date'
    cur.execute(query, (room_id,))
    return [row_to_reservation(row) for row in cur.fetchall()]


def get_all_reasons() -> list:
    """
    Get the distinct booking reasons recorded so far.

    Returns:
        Sorted list of reason strings
    """
    cur = get_db().cursor()
    cur.execute('''
        SELECT DISTINCT reason FROM reservations
        WHERE reason IS NOT NULL AND reason != ''
        ORDER BY reason
    ''')
    return [row['reason'] for row in cur.fetchall()]


# =============================================================================
# CREATE
# =============================================================================

def insert_reservation(data: dict, cursor) -> str:
    """
    Insert a reservation row inside the caller's transaction.

    Args:
        data: Reservation fields (check-in/check-out as datetimes)
        cursor: Cursor of the open transaction

    Returns:
        New reservation ID
    """
    reservation_id = data.get('id') or str(uuid.uuid4())
    now = get_now()

    cursor.execute('''
        INSERT INTO reservations (
            id, room_id, customer_id, user_id, reservation_date,
            check_in_date, check_out_date, status, is_active,
            applied_late_checkout, guests, observations, origin, reason,
            created_at, updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    ''', (
        reservation_id,
        data['room_id'],
        data['customer_id'],
        data.get('user_id'),
        to_db_datetime(data.get('reservation_date') or now),
        to_db_datetime(data['check_in_date']),
        to_db_datetime(data['check_out_date']),
        data.get('status', 'PENDING'),
        int(data.get('is_active', True)),
        int(data.get('applied_late_checkout', False)),
        serialize_guests(data.get('guests')),
        data.get('observations'),
        data.get('origin'),
        data.get('reason'),
        to_db_datetime(now),
        to_db_datetime(now),
    ))

    return reservation_id


# =============================================================================
# UPDATE
# =============================================================================

def update_reservation_fields(reservation_id: str, fields: dict, cursor) -> bool:
    """
    Update reservation columns inside the caller's transaction.

    Also accepts is_active and applied_late_checkout, which callers outside
    the core never pass. updated_at is always refreshed.

    Args:
        reservation_id: Reservation ID
        fields: Column -> value
        cursor: Cursor of the open transaction

    Returns:
        True if the row was updated
    """
    allowed = set(UPDATABLE_FIELDS) | {'is_active', 'applied_late_checkout'}
    updates = []
    values = []

    for field, value in fields.items():
        if field not in allowed:
            raise ValueError(f'Campo no actualizable: {field}')
        updates.append(f'{field} = ?')
        values.append(_to_column(field, value))

    if not updates:
        return False

    updates.append('updated_at = ?')
    values.append(to_db_datetime(get_now()))
    values.append(reservation_id)

    cursor.execute(f'''
        UPDATE reservations SET {', '.join(updates)}
        WHERE id = ?
    ''', values)
    return cursor.rowcount > 0
