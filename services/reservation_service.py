"""
Reservation Service - public entry points of the reservation core.

Handles:
- Result envelopes ({'success', 'message', 'data'})
- Error boundary (typed errors pass through, the rest become UnexpectedError)
- Post-commit notifications

Callers receive reservations with datetimes rendered as ISO 8601 strings.
"""

import logging

from models.reservation import (
    get_available_actions as derive_available_actions,
    get_all_reasons,
    get_overlapping_reservations,
    get_status_label,
    serialize_reservation,
)
from models.room import get_room_by_id
from services.notifier import get_notifier
from utils.api_response import service_result
from utils.datetime_helpers import format_date_es, format_time_es
from utils.decorators import handle_service_errors
from utils.errors import NotFoundError, ValidationError
from utils.messages import get_message
from utils.validators import validate_date_range

from . import reservation_batch, reservation_lifecycle, reservation_stay

logger = logging.getLogger(__name__)


def _notify_changed(reservation: dict):
    notifier = get_notifier()
    data = serialize_reservation(reservation)
    notifier.reservation_changed(data)
    notifier.availability_changed(data['check_in_date'], data['check_out_date'])


# =============================================================================
# CREATE / UPDATE / STATUS
# =============================================================================

@handle_service_errors('crear la reservación')
def create_reservation(data: dict, user) -> dict:
    """
    Create a reservation.

    Args:
        data: Reservation fields
        user: Acting user ({'id': ...})

    Returns:
        Result envelope with the created reservation
    """
    reservation = serialize_reservation(reservation_lifecycle.create_reservation(data, user))

    notifier = get_notifier()
    notifier.reservation_created(reservation)
    notifier.availability_changed(reservation['check_in_date'], reservation['check_out_date'])

    return service_result(get_message('reservation_created'), data=reservation)


@handle_service_errors('actualizar la reservación')
def update_reservation(reservation_id: str, data: dict, user) -> dict:
    """
    Update a reservation (no-op when nothing differs).

    Returns:
        Result envelope with the reservation; data includes
        pending_delete_payment when a checked-in stay was canceled
    """
    reservation, changed, transition = reservation_lifecycle.update_reservation(reservation_id, data, user)

    if not changed:
        return service_result(get_message('reservation_unchanged'), data=serialize_reservation(reservation))

    _notify_changed(reservation)

    payload = serialize_reservation(reservation)
    if transition is not None and transition.pending_delete_payment:
        payload['pending_delete_payment'] = True
    return service_result(get_message('reservation_updated'), data=payload)


@handle_service_errors('cambiar el estado de la reservación')
def change_status(reservation_id: str, target_status: str, user) -> dict:
    """
    Apply an explicit status transition.

    Returns:
        Result envelope with the updated reservation
    """
    reservation, result = reservation_lifecycle.change_reservation_status(reservation_id, target_status, user)

    _notify_changed(reservation)

    payload = serialize_reservation(reservation)
    if result.pending_delete_payment:
        payload['pending_delete_payment'] = True
    return service_result(
        get_message('status_changed', status=get_status_label(target_status)),
        data=payload
    )


# =============================================================================
# STAY ADJUSTMENTS
# =============================================================================

@handle_service_errors('aplicar el late checkout')
def apply_late_checkout(reservation_id: str, new_time: str, user, notes: str = None) -> dict:
    """Apply a late checkout (new time HH:mm on the checkout day)."""
    reservation = reservation_stay.apply_late_checkout(reservation_id, new_time, user, notes=notes)
    _notify_changed(reservation)
    return service_result(
        get_message('late_checkout_applied', time=format_time_es(reservation['check_out_date'])),
        data=serialize_reservation(reservation)
    )


@handle_service_errors('eliminar el late checkout')
def remove_late_checkout(reservation_id: str, user) -> dict:
    """Remove a late checkout, restoring the standard checkout time."""
    reservation = reservation_stay.remove_late_checkout(reservation_id, user)
    _notify_changed(reservation)
    return service_result(get_message('late_checkout_removed'), data=serialize_reservation(reservation))


@handle_service_errors('extender la estadía')
def extend_stay(reservation_id: str, new_checkout_date, user, notes: str = None) -> dict:
    """Extend a stay to a later checkout day."""
    reservation = reservation_stay.extend_stay(reservation_id, new_checkout_date, user, notes=notes)
    _notify_changed(reservation)
    return service_result(
        get_message('stay_extended', date=format_date_es(reservation['check_out_date'])),
        data=serialize_reservation(reservation)
    )


# =============================================================================
# BATCH
# =============================================================================

def _batch_result(outcome: dict, message_key: str, on_success) -> dict:
    for reservation in outcome['reservations']:
        on_success(reservation)

    data = {'successful': outcome['successful'], 'failed': outcome['failed']}
    message = get_message(message_key, ok=len(outcome['successful']), failed=len(outcome['failed']))
    return service_result(message, data=data, success=len(outcome['successful']) > 0)


@handle_service_errors('desactivar las reservaciones')
def deactivate_many(ids, user) -> dict:
    """
    Deactivate several reservations; per-item failures are reported, not raised.

    Returns:
        Result envelope; success is True iff at least one id was deactivated
    """
    outcome = reservation_batch.deactivate_reservations(ids, user)

    def notify(reservation):
        notifier = get_notifier()
        notifier.reservation_deleted(reservation['id'])
        data = serialize_reservation(reservation)
        notifier.availability_changed(data['check_in_date'], data['check_out_date'])

    return _batch_result(outcome, 'deactivation_summary', notify)


@handle_service_errors('reactivar las reservaciones')
def reactivate_many(ids, user) -> dict:
    """
    Reactivate several canceled reservations; per-item failures are reported.

    Returns:
        Result envelope; success is True iff at least one id was reactivated
    """
    outcome = reservation_batch.reactivate_reservations(ids, user)
    return _batch_result(outcome, 'reactivation_summary', _notify_changed)


# =============================================================================
# QUERIES
# =============================================================================

@handle_service_errors('verificar la disponibilidad')
def check_availability(room_id: str, check_in, check_out, exclude_id: str = None) -> dict:
    """
    Check whether a room is free for [check_in, check_out).

    Returns:
        Result envelope with room_id, check_in_date, check_out_date,
        is_available, conflicts and, when available, room_number and
        room_price
    """
    check_in_dt = reservation_lifecycle.parse_datetime_field(check_in, 'check-in')
    check_out_dt = reservation_lifecycle.parse_datetime_field(check_out, 'check-out')
    if not validate_date_range(check_in_dt, check_out_dt):
        raise ValidationError(get_message('invalid_date_range'))

    room = get_room_by_id(room_id)
    if room is None:
        raise NotFoundError(get_message('room_not_found', id=room_id))

    conflicts = get_overlapping_reservations(room_id, check_in_dt, check_out_dt,
                                             exclude_reservation_id=exclude_id)
    is_available = not conflicts

    data = {
        'room_id': room_id,
        'check_in_date': check_in_dt.isoformat(),
        'check_out_date': check_out_dt.isoformat(),
        'is_available': is_available,
        'conflicts': [serialize_reservation(conflict) for conflict in conflicts],
    }
    if is_available:
        data['room_number'] = room['number']
        data['room_price'] = room['room_price']

    message = get_message('room_available' if is_available else 'room_unavailable')
    return service_result(message, data=data)


@handle_service_errors('obtener las acciones disponibles')
def get_available_actions(reservation_id: str) -> dict:
    """
    What can be done next with a reservation.

    Returns:
        Result envelope with can_confirm, can_check_in, can_check_out,
        can_cancel, can_modify and can_reactivate
    """
    reservation = reservation_lifecycle.load_reservation(reservation_id)
    actions = derive_available_actions(reservation['status'], reservation['is_active'])
    return service_result('', data=actions)


@handle_service_errors('obtener la reservación')
def get_reservation(reservation_id: str) -> dict:
    """Get one reservation."""
    reservation = reservation_lifecycle.load_reservation(reservation_id)
    return service_result('', data=serialize_reservation(reservation))


@handle_service_errors('obtener los motivos de reserva')
def list_reservation_reasons() -> dict:
    """Distinct booking reasons recorded so far."""
    return service_result('', data=get_all_reasons())
