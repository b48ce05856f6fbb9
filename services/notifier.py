"""
Reservation notifier.

Fan-out hub for reservation events. Events are published after the
transaction that produced them has committed; subscriber failures are logged
and never reach the caller.
"""

import logging

from flask import current_app

logger = logging.getLogger(__name__)

RESERVATION_CREATED = 'reservation_created'
RESERVATION_CHANGED = 'reservation_changed'
RESERVATION_DELETED = 'reservation_deleted'
AVAILABILITY_CHANGED = 'availability_changed'

EVENTS = (
    RESERVATION_CREATED,
    RESERVATION_CHANGED,
    RESERVATION_DELETED,
    AVAILABILITY_CHANGED,
)


class ReservationNotifier:
    """
    Best-effort publisher of reservation events.

    Multiple handlers can subscribe to the same event; each receives the
    event payload dict.
    """

    def __init__(self):
        self._subscribers = {event: [] for event in EVENTS}

    def subscribe(self, event: str, handler):
        """Register a handler for an event."""
        if event not in self._subscribers:
            raise ValueError(f'Unknown reservation event: {event}')
        self._subscribers[event].append(handler)
        logger.debug(f'Registered handler {getattr(handler, "__name__", handler)} for {event}')

    def publish(self, event: str, payload: dict):
        """
        Deliver an event to its subscribers.

        Errors in handlers are logged but don't stop other handlers.
        """
        for handler in self._subscribers.get(event, []):
            try:
                handler(payload)
            except Exception as e:
                logger.error(
                    f'Error in notifier handler {getattr(handler, "__name__", handler)} '
                    f'for {event}: {e}',
                    exc_info=True
                )

    def reservation_created(self, reservation: dict):
        self.publish(RESERVATION_CREATED, {'reservation': reservation})

    def reservation_changed(self, reservation: dict):
        self.publish(RESERVATION_CHANGED, {'reservation': reservation})

    def reservation_deleted(self, reservation_id: str):
        self.publish(RESERVATION_DELETED, {'reservation_id': reservation_id})

    def availability_changed(self, check_in, check_out):
        self.publish(AVAILABILITY_CHANGED, {'check_in': check_in, 'check_out': check_out})


def get_notifier() -> ReservationNotifier:
    """Notifier bound to the current application (created on first use)."""
    return current_app.extensions.setdefault('reservation_notifier', ReservationNotifier())
