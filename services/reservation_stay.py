"""
Stay adjustments: late checkout and stay extension.

Both read sibling reservations of the same room before deciding, so they run
in an IMMEDIATE transaction: a concurrent adjustment waits for the write lock
instead of reading the same free window.
"""

import logging
from datetime import datetime

from flask import current_app

from database import IsolationLevel, transaction
from models.audit_log import create_audit_log
from models.reservation import get_reservation_by_id, get_overlapping_reservations, update_reservation_fields
from utils.audit import diff_changes, get_actor_id
from utils.datetime_helpers import format_date_es, format_time_es
from utils.errors import SchedulingConflictError, ValidationError
from utils.messages import get_message
from utils.validators import validate_time_string, validate_datetime_value, is_date_only
from .reservation_lifecycle import load_reservation, append_note

logger = logging.getLogger(__name__)

# Statuses whose checkout may be moved
ADJUSTABLE_STATUSES = ('CONFIRMED', 'CHECKED_IN')


def _audit_checkout_change(reservation: dict, updated: dict, actor_id, cursor):
    create_audit_log(
        'UPDATE', 'reservation', reservation['id'], actor_id,
        changes=diff_changes(reservation, updated,
                             fields=('check_out_date', 'applied_late_checkout', 'observations')),
        cursor=cursor
    )


# =============================================================================
# LATE CHECKOUT
# =============================================================================

def apply_late_checkout(reservation_id: str, new_time: str, user, notes: str = None) -> dict:
    """
    Move the checkout to a later time of the same day.

    Args:
        reservation_id: Reservation ID
        new_time: New checkout time, HH:mm
        user: Acting user
        notes: Optional text appended to the observations

    Returns:
        Updated reservation dict

    Raises:
        ValidationError: Bad time, wrong status, already applied, not later
        NotFoundError: Unknown reservation
        SchedulingConflictError: Another reservation starts before the new time
    """
    is_valid, hour_minute, error = validate_time_string(new_time)
    if not is_valid:
        raise ValidationError(error)
    hours, minutes = hour_minute
    actor_id = get_actor_id(user)

    with transaction(IsolationLevel.SERIALIZABLE) as cursor:
        reservation = load_reservation(reservation_id, cursor=cursor)

        if reservation['status'] not in ADJUSTABLE_STATUSES:
            raise ValidationError(get_message('late_checkout_invalid_status', status=reservation['status']))

        if reservation['applied_late_checkout']:
            raise ValidationError(get_message('late_checkout_already_applied'))

        original = reservation['check_out_date']
        new_checkout = original.replace(hour=hours, minute=minutes, second=0, microsecond=0)
        if new_checkout <= original:
            raise ValidationError(get_message('late_checkout_not_later'))

        conflicts = get_overlapping_reservations(
            reservation['room_id'], original, new_checkout,
            exclude_reservation_id=reservation_id, cursor=cursor
        )
        if conflicts:
            blocker = conflicts[0]
            raise SchedulingConflictError(
                get_message('late_checkout_conflict',
                            date=format_date_es(blocker['check_in_date']),
                            time=format_time_es(blocker['check_in_date'])),
                conflicting_reservation_id=blocker['id']
            )

        fields = {'check_out_date': new_checkout, 'applied_late_checkout': True}
        if notes:
            fields['observations'] = append_note(reservation['observations'], notes)
        update_reservation_fields(reservation_id, fields, cursor)

        updated = get_reservation_by_id(reservation_id, cursor=cursor)
        _audit_checkout_change(reservation, updated, actor_id, cursor)

    logger.info(f'[Reservations] Late checkout for {reservation_id}: {original} -> {new_checkout} by {actor_id}')
    return updated


def remove_late_checkout(reservation_id: str, user) -> dict:
    """
    Restore the standard checkout time (DEFAULT_CHECKOUT_TIME) of the
    checkout day and clear the late checkout flag.

    Raises:
        ValidationError: Wrong status, no late checkout applied
        NotFoundError: Unknown reservation
    """
    default_time = current_app.config.get('DEFAULT_CHECKOUT_TIME', '12:00')
    is_valid, hour_minute, error = validate_time_string(default_time)
    if not is_valid:
        raise ValueError(f'DEFAULT_CHECKOUT_TIME inválido: {default_time}')
    hours, minutes = hour_minute
    actor_id = get_actor_id(user)

    with transaction(IsolationLevel.SERIALIZABLE) as cursor:
        reservation = load_reservation(reservation_id, cursor=cursor)

        if reservation['status'] not in ADJUSTABLE_STATUSES:
            raise ValidationError(get_message('late_checkout_remove_invalid_status',
                                              status=reservation['status']))

        if not reservation['applied_late_checkout']:
            raise ValidationError(get_message('late_checkout_not_applied'))

        restored = reservation['check_out_date'].replace(hour=hours, minute=minutes, second=0, microsecond=0)
        if restored <= reservation['check_in_date']:
            raise ValidationError(get_message('invalid_date_range'))

        update_reservation_fields(reservation_id, {
            'check_out_date': restored,
            'applied_late_checkout': False,
        }, cursor)

        updated = get_reservation_by_id(reservation_id, cursor=cursor)
        _audit_checkout_change(reservation, updated, actor_id, cursor)

    logger.info(f'[Reservations] Late checkout removed for {reservation_id} by {actor_id}')
    return updated


# =============================================================================
# EXTEND STAY
# =============================================================================

def extend_stay(reservation_id: str, new_checkout_date, user, notes: str = None) -> dict:
    """
    Move the checkout to a later day.

    A date without a time keeps the current checkout time. The new day must
    be strictly after both the current checkout day and the check-in day.
    The nights added, [current checkout, new checkout), must not overlap any
    other active reservation of the room; the nearest blocker is reported.

    Args:
        reservation_id: Reservation ID
        new_checkout_date: New checkout (date, datetime or ISO string)
        user: Acting user
        notes: Optional text appended to the observations

    Returns:
        Updated reservation dict
    """
    is_valid, parsed, error = validate_datetime_value(new_checkout_date, 'checkout')
    if not is_valid:
        raise ValidationError(error)
    keep_time = is_date_only(new_checkout_date)
    actor_id = get_actor_id(user)

    with transaction(IsolationLevel.SERIALIZABLE) as cursor:
        reservation = load_reservation(reservation_id, cursor=cursor)

        if reservation['status'] not in ADJUSTABLE_STATUSES:
            raise ValidationError(get_message('extend_stay_invalid_status', status=reservation['status']))

        original = reservation['check_out_date']
        if keep_time:
            new_checkout = datetime.combine(parsed.date(), original.time())
        else:
            new_checkout = parsed

        if new_checkout.date() <= original.date():
            raise ValidationError(get_message('extend_stay_not_after_checkout'))
        if new_checkout.date() <= reservation['check_in_date'].date():
            raise ValidationError(get_message('extend_stay_not_after_checkin'))

        conflicts = get_overlapping_reservations(
            reservation['room_id'], original, new_checkout,
            exclude_reservation_id=reservation_id, cursor=cursor
        )
        if conflicts:
            blocker = conflicts[0]
            raise SchedulingConflictError(
                get_message('extend_stay_conflict', date=format_date_es(blocker['check_in_date'])),
                conflicting_reservation_id=blocker['id']
            )

        fields = {'check_out_date': new_checkout}
        if notes:
            fields['observations'] = append_note(reservation['observations'], notes)
        update_reservation_fields(reservation_id, fields, cursor)

        updated = get_reservation_by_id(reservation_id, cursor=cursor)
        _audit_checkout_change(reservation, updated, actor_id, cursor)

    logger.info(f'[Reservations] Stay of {reservation_id} extended: {original} -> {new_checkout} by {actor_id}')
    return updated
