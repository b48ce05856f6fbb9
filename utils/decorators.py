"""
Service decorators.
Provides the error boundary applied to every public reservation operation.
"""

import logging
import sqlite3
from functools import wraps

from utils.errors import ReservationError, ValidationError, UnexpectedError
from utils.messages import get_message

logger = logging.getLogger(__name__)


def handle_service_errors(action: str):
    """
    Decorator that turns unexpected failures into UnexpectedError.

    ReservationError subclasses pass through unchanged. Integrity violations
    raised by SQLite become a ValidationError with a user-safe message.
    Anything else is logged with its traceback and surfaced as a generic
    message naming the action.

    Usage:
        @handle_service_errors('crear la reservación')
        def create_reservation(data, user):
            ...

    Args:
        action: Spanish verb phrase used in the generic error message

    Returns:
        Decorator function
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except ReservationError:
                raise
            except sqlite3.IntegrityError as e:
                logger.warning(f'[Reservations] Integrity error in {func.__name__}: {e}')
                raise ValidationError(get_message('integrity_error')) from e
            except Exception as e:
                logger.exception(f'[Reservations] Unexpected error in {func.__name__}: {e}')
                raise UnexpectedError(get_message('unexpected_error', action=action)) from e
        return wrapper
    return decorator


__all__ = ['handle_service_errors']
