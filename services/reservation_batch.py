"""
Batch deactivation and reactivation.

All ids are processed sequentially in one IMMEDIATE transaction, each inside
its own SAVEPOINT. A failing item only rolls back its own savepoint and is
reported as {'id', 'reason'}; the other items still commit.
"""

import logging

from database import IsolationLevel, transaction, savepoint
from models.audit_log import create_audit_log
from models.reservation import (
    ReservationStateFactory,
    can_deactivate,
    get_reservation_by_id,
    is_room_available,
    update_reservation_fields,
)
from utils.audit import get_actor_id
from utils.datetime_helpers import get_today
from utils.errors import (
    ReservationError,
    InvalidTransitionError,
    SchedulingConflictError,
    ValidationError,
)
from utils.messages import get_message
from utils.validators import validate_id_list
from .reservation_lifecycle import hold_room, load_reservation

logger = logging.getLogger(__name__)


def _run_batch(ids, user, process_item, label: str) -> dict:
    """
    Apply process_item to every id and collect per-item outcomes.

    Args:
        ids: Reservation IDs
        user: Acting user
        process_item: callable(reservation_id, actor_id, cursor) -> reservation
        label: Operation name for logging

    Returns:
        dict with successful (ids), failed ({'id', 'reason'}) and
        reservations (processed reservation dicts, for notifications)
    """
    is_valid, ids, error = validate_id_list(ids)
    if not is_valid:
        raise ValidationError(error)

    actor_id = get_actor_id(user)
    successful = []
    failed = []
    reservations = []

    with transaction(IsolationLevel.SERIALIZABLE) as cursor:
        for reservation_id in ids:
            try:
                with savepoint(cursor):
                    reservations.append(process_item(reservation_id, actor_id, cursor))
                successful.append(reservation_id)
            except ReservationError as e:
                logger.warning(f'[Reservations] {label} {reservation_id} skipped: {e.message}')
                failed.append({'id': reservation_id, 'reason': e.message})
            except Exception as e:
                logger.exception(f'[Reservations] {label} {reservation_id} failed: {e}')
                failed.append({'id': reservation_id, 'reason': get_message('item_internal_error')})

    logger.info(f'[Reservations] {label}: {len(successful)} ok, {len(failed)} failed by {actor_id}')
    return {'successful': successful, 'failed': failed, 'reservations': reservations}


# =============================================================================
# DEACTIVATE
# =============================================================================

def _deactivate_one(reservation_id: str, actor_id, cursor) -> dict:
    reservation = load_reservation(reservation_id, cursor=cursor)

    if not can_deactivate(reservation['status'], reservation['is_active']):
        raise InvalidTransitionError(get_message('cannot_deactivate'))

    handler = ReservationStateFactory.get_state_handler(reservation['status'])
    result = handler.can_transition_to('CANCELED', reservation)
    if not result.is_valid:
        raise InvalidTransitionError(get_message('cannot_deactivate'))

    update_reservation_fields(reservation_id, {
        'status': 'CANCELED',
        'is_active': result.is_active,
    }, cursor)
    handler.handle_transition(reservation, 'CANCELED', cursor)

    create_audit_log(
        'DELETE', 'reservation', reservation_id, actor_id,
        changes={
            'before': {'status': reservation['status'], 'is_active': reservation['is_active']},
            'after': {'status': 'CANCELED', 'is_active': result.is_active},
        },
        cursor=cursor
    )
    return get_reservation_by_id(reservation_id, cursor=cursor)


def deactivate_reservations(ids, user) -> dict:
    """
    Cancel and deactivate reservations, best effort.

    Only reservations that may be canceled (PENDING, CONFIRMED) are
    deactivated; the rest are reported as failed.

    Args:
        ids: Reservation IDs
        user: Acting user

    Returns:
        dict with successful, failed and reservations
    """
    return _run_batch(ids, user, _deactivate_one, 'Deactivate')


# =============================================================================
# REACTIVATE
# =============================================================================

def _reactivate_one(reservation_id: str, actor_id, cursor) -> dict:
    reservation = load_reservation(reservation_id, cursor=cursor)

    if reservation['is_active']:
        raise ValidationError(get_message('already_active'))

    if reservation['status'] != 'CANCELED':
        raise InvalidTransitionError(get_message('cannot_reactivate'))

    if reservation['check_in_date'].date() < get_today():
        raise ValidationError(get_message('checkin_in_past'))

    if not is_room_available(reservation['room_id'], reservation['check_in_date'],
                             reservation['check_out_date'],
                             exclude_reservation_id=reservation_id, cursor=cursor):
        raise SchedulingConflictError(get_message('interval_taken'))

    update_reservation_fields(reservation_id, {
        'status': 'PENDING',
        'is_active': True,
    }, cursor)
    hold_room(reservation['room_id'], 'PENDING', cursor)

    create_audit_log(
        'REACTIVATE', 'reservation', reservation_id, actor_id,
        changes={
            'before': {'status': 'CANCELED', 'is_active': False},
            'after': {'status': 'PENDING', 'is_active': True},
        },
        cursor=cursor
    )
    return get_reservation_by_id(reservation_id, cursor=cursor)


def reactivate_reservations(ids, user) -> dict:
    """
    Bring canceled reservations back as PENDING, best effort.

    A reservation is reactivated only if it is inactive and CANCELED, its
    check-in day is not before today (hotel timezone), and its original
    interval is still free.

    Args:
        ids: Reservation IDs
        user: Acting user

    Returns:
        dict with successful, failed and reservations
    """
    return _run_batch(ids, user, _reactivate_one, 'Reactivate')
