"""
Reservation state machine.

One handler per current status decides whether a target status is reachable
(can_transition_to) and applies the room side effects of an accepted
transition (handle_transition). The transition table is the only place where
status rules live; every use-case that changes a status goes through it.

    From / To     PENDING  CONFIRMED  CHECKED_IN  CHECKED_OUT  CANCELED
    PENDING       noop     valid      -           -            valid
    CONFIRMED     valid    noop       valid       -            valid
    CHECKED_IN    -        -          noop        valid*       valid
    CHECKED_OUT   -        -          -           noop         -
    CANCELED      -        -          -           -            noop

    * only when the reservation has no pending payments
"""

import logging
from dataclasses import dataclass

from flask import current_app

from models.payment import has_pending_balance
from models.room import update_room_status, reset_room_amenities
from utils.messages import get_message

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

RESERVATION_STATUSES = ('PENDING', 'CONFIRMED', 'CHECKED_IN', 'CHECKED_OUT', 'CANCELED')
TERMINAL_STATUSES = ('CHECKED_OUT', 'CANCELED')
INITIAL_STATUSES = ('PENDING', 'CONFIRMED', 'CHECKED_IN')

STATUS_LABELS = {
    'PENDING': 'state_pending',
    'CONFIRMED': 'state_confirmed',
    'CHECKED_IN': 'state_checked_in',
    'CHECKED_OUT': 'state_checked_out',
    'CANCELED': 'state_canceled',
}


def get_status_label(status: str) -> str:
    """Spanish display label for a status (the raw value if unknown)."""
    key = STATUS_LABELS.get(status)
    return get_message(key) if key else status


# =============================================================================
# TRANSITION RESULT
# =============================================================================

@dataclass
class TransitionResult:
    """Outcome of asking a state handler about a target status."""

    is_valid: bool
    is_active: bool
    room_status: str = None
    reset_amenities: bool = False
    pending_delete_payment: bool = False
    guard_failed: bool = False
    error_message: str = None


# =============================================================================
# STATE HANDLERS
# =============================================================================

class ReservationStateHandler:
    """
    Base handler. Subclasses declare their status and a TRANSITIONS table
    mapping each reachable target to the attributes of the result.
    """

    status = None
    is_active = True
    TRANSITIONS = {}

    def can_transition_to(self, target_status: str, reservation: dict = None) -> TransitionResult:
        """
        Evaluate a transition from this handler's status.

        Args:
            target_status: Requested status
            reservation: Reservation dict, needed only by guarded transitions

        Returns:
            TransitionResult
        """
        if target_status not in RESERVATION_STATUSES:
            return TransitionResult(
                is_valid=False,
                is_active=self.is_active,
                error_message=get_message('invalid_status', status=target_status)
            )

        rule = self.TRANSITIONS.get(target_status)
        if rule is None:
            return TransitionResult(
                is_valid=False,
                is_active=self.is_active,
                error_message=get_message('invalid_transition',
                                          current=self.status, target=target_status)
            )

        return TransitionResult(is_valid=True, **rule)

    def handle_transition(self, reservation: dict, target_status: str, cursor) -> TransitionResult:
        """
        Apply the room side effects of an accepted transition.

        Runs inside the caller's transaction. Guards are not re-evaluated here.

        Args:
            reservation: Reservation dict (needs room_id)
            target_status: Target status already accepted by can_transition_to
            cursor: Cursor of the open transaction

        Returns:
            TransitionResult that was applied

        Raises:
            ValueError: If the transition is not in the table
        """
        rule = self.TRANSITIONS.get(target_status)
        if rule is None:
            raise ValueError(get_message('invalid_transition',
                                         current=self.status, target=target_status))

        result = TransitionResult(is_valid=True, **rule)

        if result.room_status:
            update_room_status(reservation['room_id'], result.room_status, cursor)
            logger.debug('Room %s set to %s', reservation['room_id'], result.room_status)

        if result.reset_amenities:
            reset_room_amenities(reservation['room_id'], cursor)

        return result


class PendingReservationState(ReservationStateHandler):
    status = 'PENDING'
    TRANSITIONS = {
        'PENDING': {'is_active': True},
        'CONFIRMED': {'is_active': True},
        'CANCELED': {'is_active': False},
    }


class ConfirmedReservationState(ReservationStateHandler):
    status = 'CONFIRMED'
    TRANSITIONS = {
        'PENDING': {'is_active': True},
        'CONFIRMED': {'is_active': True},
        'CHECKED_IN': {'is_active': True, 'room_status': 'OCCUPIED'},
        'CANCELED': {'is_active': False},
    }


class CheckedInReservationState(ReservationStateHandler):
    status = 'CHECKED_IN'
    TRANSITIONS = {
        'CHECKED_IN': {'is_active': True},
        'CHECKED_OUT': {'is_active': False, 'room_status': 'CLEANING', 'reset_amenities': True},
        'CANCELED': {'is_active': False, 'pending_delete_payment': True},
    }

    def can_transition_to(self, target_status: str, reservation: dict = None) -> TransitionResult:
        result = super().can_transition_to(target_status, reservation)

        # Checkout is blocked while money is owed
        if result.is_valid and target_status == 'CHECKED_OUT' and reservation is not None:
            guard = current_app.extensions.get('payments_guard', has_pending_balance)
            if guard(reservation['id']):
                return TransitionResult(
                    is_valid=False,
                    is_active=self.is_active,
                    guard_failed=True,
                    error_message=get_message('pending_payment')
                )

        return result


class CheckedOutReservationState(ReservationStateHandler):
    status = 'CHECKED_OUT'
    is_active = False
    TRANSITIONS = {
        'CHECKED_OUT': {'is_active': False, 'room_status': 'AVAILABLE'},
    }


class CanceledReservationState(ReservationStateHandler):
    status = 'CANCELED'
    is_active = False
    TRANSITIONS = {
        'CANCELED': {'is_active': False},
    }


# =============================================================================
# FACTORY
# =============================================================================

class ReservationStateFactory:
    """Resolve the handler for a reservation's current status."""

    _handlers = {
        'PENDING': PendingReservationState,
        'CONFIRMED': ConfirmedReservationState,
        'CHECKED_IN': CheckedInReservationState,
        'CHECKED_OUT': CheckedOutReservationState,
        'CANCELED': CanceledReservationState,
    }

    @classmethod
    def get_state_handler(cls, status: str) -> ReservationStateHandler:
        """
        Get the handler for a status.

        Raises:
            ValueError: If the status is unknown
        """
        handler_class = cls._handlers.get(status)
        if handler_class is None:
            raise ValueError(get_message('unknown_status', status=status))
        return handler_class()


# =============================================================================
# DERIVED ACTIONS
# =============================================================================

def get_available_actions(status: str, is_active: bool = True) -> dict:
    """
    What a client may do next with a reservation.

    Args:
        status: Current status
        is_active: Current is_active flag

    Returns:
        dict with can_confirm, can_check_in, can_check_out, can_cancel,
        can_modify and can_reactivate
    """
    live = bool(is_active)
    return {
        'can_confirm': live and status == 'PENDING',
        'can_check_in': live and status == 'CONFIRMED',
        'can_check_out': live and status == 'CHECKED_IN',
        'can_cancel': live and status in ('PENDING', 'CONFIRMED'),
        'can_modify': live and status in ('PENDING', 'CONFIRMED'),
        'can_reactivate': not live and status == 'CANCELED',
    }


def can_deactivate(status: str, is_active: bool = True) -> bool:
    """Deactivation is allowed exactly where cancellation is."""
    return get_available_actions(status, is_active)['can_cancel']
