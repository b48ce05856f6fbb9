"""
Application extensions.
Collaborators of the reservation core are created per application here and
stored in app.extensions.
"""

from models.payment import has_pending_balance
from services.notifier import ReservationNotifier


def init_extensions(app):
    """
    Attach the reservation collaborators to the app.

    - reservation_notifier: post-commit event fan-out
    - payments_guard: callable(reservation_id) -> bool used by the checkout guard
    """
    app.extensions['reservation_notifier'] = ReservationNotifier()
    app.extensions['payments_guard'] = has_pending_balance
