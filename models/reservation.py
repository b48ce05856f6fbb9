"""
Reservation data access functions.

This module re-exports the functions of the split modules:
- reservation_state.py: State machine, handlers and derived actions
- reservation_crud.py: Read, insert and update operations
- reservation_availability.py: Interval overlap checks
"""

# =============================================================================
# RE-EXPORTS
# =============================================================================

# State machine
from .reservation_state import (
    # Constants
    RESERVATION_STATUSES,
    TERMINAL_STATUSES,
    INITIAL_STATUSES,
    # Handlers
    TransitionResult,
    ReservationStateHandler,
    ReservationStateFactory,
    # Derived actions
    get_available_actions,
    can_deactivate,
    get_status_label,
)

# CRUD operations
from .reservation_crud import (
    UPDATABLE_FIELDS,
    row_to_reservation,
    serialize_reservation,
    get_reservation_by_id,
    get_reservations_by_room,
    get_all_reasons,
    insert_reservation,
    update_reservation_fields,
)

# Availability
from .reservation_availability import (
    BLOCKING_STATUSES,
    is_room_available,
    get_overlapping_reservations,
    get_room_holding_statuses,
    get_reserved_room_ids,
    get_available_rooms,
)

__all__ = [
    'RESERVATION_STATUSES',
    'TERMINAL_STATUSES',
    'INITIAL_STATUSES',
    'TransitionResult',
    'ReservationStateHandler',
    'ReservationStateFactory',
    'get_available_actions',
    'can_deactivate',
    'get_status_label',
    'UPDATABLE_FIELDS',
    'row_to_reservation',
    'serialize_reservation',
    'get_reservation_by_id',
    'get_reservations_by_room',
    'get_all_reasons',
    'insert_reservation',
    'update_reservation_fields',
    'BLOCKING_STATUSES',
    'is_room_available',
    'get_overlapping_reservations',
    'get_room_holding_statuses',
    'get_reserved_room_ids',
    'get_available_rooms',
]
