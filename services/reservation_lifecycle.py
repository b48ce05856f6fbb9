"""
Reservation lifecycle use-cases: create, update and explicit status changes.

Each use-case validates its input, opens one transaction, re-reads what it
is about to change, consults the state machine and/or the availability
checker, writes the reservation, room and audit changes, and commits.
Notifications are left to the service facade, after commit.
"""

import logging

from database import IsolationLevel, transaction
from models.audit_log import create_audit_log
from models.guest import normalize_guests
from models.reservation import (
    RESERVATION_STATUSES,
    TERMINAL_STATUSES,
    INITIAL_STATUSES,
    UPDATABLE_FIELDS,
    ReservationStateFactory,
    get_reservation_by_id,
    get_overlapping_reservations,
    get_room_holding_statuses,
    insert_reservation,
    update_reservation_fields,
)
from models.room import get_room_by_id, update_room_status
from utils.audit import diff_changes, get_actor_id
from utils.datetime_helpers import format_date_es
from utils.errors import (
    NotFoundError,
    InvalidTransitionError,
    GuardFailedError,
    SchedulingConflictError,
    ValidationError,
)
from utils.messages import get_message
from utils.validators import validate_datetime_value, validate_date_range, sanitize_input

logger = logging.getLogger(__name__)

REQUIRED_CREATE_FIELDS = ('room_id', 'customer_id', 'check_in_date', 'check_out_date')
TEXT_FIELDS = ('observations', 'origin', 'reason')

# Room status held by a reservation in each live status
ROOM_STATUS_FOR = {
    'PENDING': 'RESERVED',
    'CONFIRMED': 'RESERVED',
    'CHECKED_IN': 'OCCUPIED',
}


# =============================================================================
# SHARED HELPERS
# =============================================================================

def load_reservation(reservation_id: str, cursor=None) -> dict:
    """
    Get a reservation or raise NotFoundError.

    Args:
        reservation_id: Reservation ID
        cursor: Optional cursor of an open transaction

    Returns:
        Reservation dict
    """
    reservation = get_reservation_by_id(reservation_id, cursor=cursor)
    if reservation is None:
        raise NotFoundError(get_message('reservation_not_found', id=reservation_id))
    return reservation


def parse_datetime_field(value, field: str):
    """Parse a date input or raise ValidationError."""
    is_valid, parsed, error = validate_datetime_value(value, field)
    if not is_valid:
        raise ValidationError(error)
    return parsed


def ensure_transition(handler, target_status: str, reservation: dict):
    """
    Ask the state machine about a transition and raise if it is refused.

    Returns:
        TransitionResult of the accepted transition
    """
    result = handler.can_transition_to(target_status, reservation)
    if not result.is_valid:
        if result.guard_failed:
            raise GuardFailedError(result.error_message)
        raise InvalidTransitionError(result.error_message)
    return result


def raise_if_conflicting(conflicts: list, message_key: str = 'room_conflict'):
    """Raise SchedulingConflictError naming the nearest blocking reservation."""
    if not conflicts:
        return
    blocker = conflicts[0]
    raise SchedulingConflictError(
        get_message(message_key, date=format_date_es(blocker['check_in_date'])),
        conflicting_reservation_id=blocker['id']
    )


def hold_room(room_id: str, reservation_status: str, cursor) -> None:
    """
    Mark a room as held by a live reservation.

    A checked-in guest occupies the room. A booking only turns an AVAILABLE
    room into RESERVED; an occupied or cleaning room keeps its status.
    """
    if reservation_status == 'CHECKED_IN':
        update_room_status(room_id, 'OCCUPIED', cursor)
        return

    room = get_room_by_id(room_id, cursor=cursor)
    if room is not None and room['status'] == 'AVAILABLE':
        update_room_status(room_id, ROOM_STATUS_FOR[reservation_status], cursor)


def release_room(room_id: str, reservation_id: str, cursor) -> None:
    """
    Recompute a room's status after a reservation leaves it.

    The status follows the other active reservations still holding the room:
    OCCUPIED while one is checked in, RESERVED while one is booked, else
    AVAILABLE. A room being cleaned is left alone.
    """
    room = get_room_by_id(room_id, cursor=cursor)
    if room is None or room['status'] in ('AVAILABLE', 'CLEANING'):
        return

    holding = get_room_holding_statuses(room_id, exclude_reservation_id=reservation_id, cursor=cursor)
    if 'CHECKED_IN' in holding:
        status = 'OCCUPIED'
    elif holding:
        status = 'RESERVED'
    else:
        status = 'AVAILABLE'

    if status != room['status']:
        update_room_status(room_id, status, cursor)


def append_note(observations: str, notes: str) -> str:
    """Append a note to the reservation observations."""
    notes = sanitize_input(notes)
    if not notes:
        return observations
    if observations:
        return f'{observations}\n{notes}'
    return notes


# =============================================================================
# CREATE
# =============================================================================

def create_reservation(data: dict, user) -> dict:
    """
    Create a reservation after checking the room is free.

    The overlap scan runs inside the same IMMEDIATE transaction that inserts
    the reservation, so two concurrent creations for the same interval
    cannot both succeed.

    Args:
        data: room_id, customer_id, check_in_date, check_out_date and
            optionally status, guests, observations, origin, reason
        user: Acting user

    Returns:
        Created reservation dict

    Raises:
        ValidationError: Missing or malformed fields
        NotFoundError: Unknown room
        SchedulingConflictError: Room taken for part of the interval
    """
    for field in REQUIRED_CREATE_FIELDS:
        if not data.get(field):
            raise ValidationError(get_message('field_required', field=field))

    check_in = parse_datetime_field(data['check_in_date'], 'check-in')
    check_out = parse_datetime_field(data['check_out_date'], 'check-out')
    if not validate_date_range(check_in, check_out):
        raise ValidationError(get_message('invalid_date_range'))

    status = data.get('status') or 'PENDING'
    if status not in INITIAL_STATUSES:
        raise ValidationError(get_message('invalid_initial_status', status=status))

    is_valid, guests, detail = normalize_guests(data.get('guests'))
    if not is_valid:
        raise ValidationError(get_message('invalid_guests', detail=detail))

    reservation_date = None
    if data.get('reservation_date'):
        reservation_date = parse_datetime_field(data['reservation_date'], 'reserva')

    room_id = data['room_id']
    actor_id = get_actor_id(user)

    with transaction(IsolationLevel.SERIALIZABLE) as cursor:
        room = get_room_by_id(room_id, cursor=cursor)
        if room is None:
            raise NotFoundError(get_message('room_not_found', id=room_id))

        raise_if_conflicting(get_overlapping_reservations(room_id, check_in, check_out, cursor=cursor))

        hold_room(room_id, status, cursor)

        reservation_id = insert_reservation({
            'room_id': room_id,
            'customer_id': data['customer_id'],
            'user_id': actor_id,
            'reservation_date': reservation_date,
            'check_in_date': check_in,
            'check_out_date': check_out,
            'status': status,
            'is_active': True,
            'guests': guests,
            'observations': sanitize_input(data.get('observations')) or None,
            'origin': sanitize_input(data.get('origin')) or None,
            'reason': sanitize_input(data.get('reason')) or None,
        }, cursor)

        reservation = get_reservation_by_id(reservation_id, cursor=cursor)
        create_audit_log(
            'CREATE', 'reservation', reservation_id, actor_id,
            changes=diff_changes({}, reservation, fields=('room_id', 'customer_id', 'check_in_date',
                                                          'check_out_date', 'status')),
            cursor=cursor
        )

    logger.info(f'[Reservations] Created {reservation_id} on room {room["number"]} '
                f'({check_in} - {check_out}) by {actor_id}')
    return reservation


# =============================================================================
# UPDATE
# =============================================================================

def _collect_changes(current: dict, data: dict) -> dict:
    """Supplied updatable fields whose value differs from the stored one."""
    changes = {}

    for field in UPDATABLE_FIELDS:
        if field not in data:
            continue
        value = data[field]

        if field in ('check_in_date', 'check_out_date'):
            value = parse_datetime_field(value, field.replace('_date', '').replace('_', '-'))
        elif field == 'guests':
            is_valid, value, detail = normalize_guests(value)
            if not is_valid:
                raise ValidationError(get_message('invalid_guests', detail=detail))
        elif field == 'status':
            if value not in RESERVATION_STATUSES:
                raise ValidationError(get_message('invalid_status', status=value))
        elif field in TEXT_FIELDS:
            value = sanitize_input(value) or None
        elif not value:
            raise ValidationError(get_message('field_required', field=field))

        if value != current.get(field):
            changes[field] = value

    return changes


def update_reservation(reservation_id: str, data: dict, user) -> tuple:
    """
    Update reservation fields.

    A payload identical to the stored reservation is a no-op: nothing is
    written and no audit entry is created. A status change is accepted only
    if the state machine allows it, and its room side effects are applied by
    the state handler. Date or room changes re-run the overlap scan, ignoring
    the reservation itself.

    Args:
        reservation_id: Reservation ID
        data: Fields to change (subset of UPDATABLE_FIELDS)
        user: Acting user

    Returns:
        Tuple of (reservation dict, changed: bool, TransitionResult or None)
    """
    current = load_reservation(reservation_id)
    changes = _collect_changes(current, data)

    if not changes:
        logger.debug(f'[Reservations] Update of {reservation_id} carries no changes')
        return current, False, None

    actor_id = get_actor_id(user)
    reschedule = any(field in changes for field in ('room_id', 'check_in_date', 'check_out_date'))

    with transaction(IsolationLevel.SERIALIZABLE) as cursor:
        current = load_reservation(reservation_id, cursor=cursor)
        changes = _collect_changes(current, data)
        if not changes:
            return current, False, None

        if current['status'] in TERMINAL_STATUSES:
            raise ValidationError(get_message('not_editable', id=reservation_id, status=current['status']))

        target = {**current, **changes}
        fields = dict(changes)

        transition = None
        handler = None
        if 'status' in changes:
            handler = ReservationStateFactory.get_state_handler(current['status'])
            transition = ensure_transition(handler, changes['status'], current)
            fields['is_active'] = transition.is_active

        if not validate_date_range(target['check_in_date'], target['check_out_date']):
            raise ValidationError(get_message('invalid_date_range'))

        if 'room_id' in changes and get_room_by_id(changes['room_id'], cursor=cursor) is None:
            raise NotFoundError(get_message('room_not_found', id=changes['room_id']))

        if reschedule:
            raise_if_conflicting(get_overlapping_reservations(
                target['room_id'], target['check_in_date'], target['check_out_date'],
                exclude_reservation_id=reservation_id, cursor=cursor
            ))

        update_reservation_fields(reservation_id, fields, cursor)

        if 'room_id' in changes:
            release_room(current['room_id'], reservation_id, cursor)
            if target['status'] in ROOM_STATUS_FOR:
                hold_room(target['room_id'], target['status'], cursor)

        if handler is not None:
            handler.handle_transition(target, changes['status'], cursor)

        updated = get_reservation_by_id(reservation_id, cursor=cursor)
        create_audit_log(
            'UPDATE', 'reservation', reservation_id, actor_id,
            changes=diff_changes(current, updated, fields=sorted(fields)),
            cursor=cursor
        )

    logger.info(f'[Reservations] Updated {reservation_id} ({", ".join(sorted(changes))}) by {actor_id}')
    if transition is not None and transition.pending_delete_payment:
        logger.warning(f'[Reservations] {reservation_id} canceled after check-in, payments pending removal')
    return updated, True, transition


# =============================================================================
# STATUS CHANGE
# =============================================================================

def change_reservation_status(reservation_id: str, target_status: str, user) -> tuple:
    """
    Move a reservation to another status through the state machine.

    The transition is evaluated before any transaction is opened; it is
    evaluated again inside the transaction if the status changed meanwhile.

    Args:
        reservation_id: Reservation ID
        target_status: Requested status
        user: Acting user

    Returns:
        Tuple of (updated reservation dict, TransitionResult)

    Raises:
        ValidationError: Unknown target status
        NotFoundError: Unknown reservation
        InvalidTransitionError: Transition not in the table
        GuardFailedError: Checkout with pending payments
    """
    if target_status not in RESERVATION_STATUSES:
        raise ValidationError(get_message('invalid_status', status=target_status))

    reservation = load_reservation(reservation_id)
    handler = ReservationStateFactory.get_state_handler(reservation['status'])
    result = ensure_transition(handler, target_status, reservation)

    actor_id = get_actor_id(user)

    with transaction(IsolationLevel.SERIALIZABLE) as cursor:
        fresh = load_reservation(reservation_id, cursor=cursor)
        if fresh['status'] != reservation['status']:
            handler = ReservationStateFactory.get_state_handler(fresh['status'])
            result = ensure_transition(handler, target_status, fresh)

        update_reservation_fields(reservation_id, {
            'status': target_status,
            'is_active': result.is_active,
        }, cursor)
        handler.handle_transition(fresh, target_status, cursor)

        create_audit_log(
            'UPDATE_STATUS', 'reservation', reservation_id, actor_id,
            changes={
                'before': {'status': fresh['status'], 'is_active': fresh['is_active']},
                'after': {'status': target_status, 'is_active': result.is_active},
            },
            cursor=cursor
        )
        updated = get_reservation_by_id(reservation_id, cursor=cursor)

    logger.info(f'[Reservations] {reservation_id}: {fresh["status"]} -> {target_status} by {actor_id}')
    if result.pending_delete_payment:
        logger.warning(f'[Reservations] {reservation_id} canceled after check-in, payments pending removal')
    return updated, result
