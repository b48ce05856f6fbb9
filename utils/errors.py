"""
Reservation error taxonomy.

Every use-case raises one of these directly. The service layer re-raises them
unchanged and wraps anything else in UnexpectedError; the Flask error handler
renders them with their status_code.
"""


class ReservationError(Exception):
    """Base class for errors surfaced to callers of the reservation core."""

    status_code = 400

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict:
        """Error payload for API responses."""
        payload = {'success': False, 'error': self.message}
        if self.context:
            payload.update(self.context)
        return payload


class NotFoundError(ReservationError):
    """Reservation or room id does not resolve to a relevant record."""

    status_code = 404


class InvalidTransitionError(ReservationError):
    """The state machine rejects (current, target)."""

    status_code = 400


class GuardFailedError(ReservationError):
    """Transition is valid in the table but a cross-cutting guard blocks it."""

    status_code = 400


class SchedulingConflictError(ReservationError):
    """Another active reservation holds the requested interval."""

    status_code = 409


class ValidationError(ReservationError):
    """Malformed input."""

    status_code = 400


class UnexpectedError(ReservationError):
    """Unanticipated store or runtime failure."""

    status_code = 500
