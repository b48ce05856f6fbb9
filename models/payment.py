"""
Payment queries used by the reservation core.
Only the pending-balance check is consumed by the checkout guard; ledger
computation lives elsewhere.
"""

import uuid

from database import get_db

PAYMENT_STATUSES = ('PENDING', 'PARTIAL', 'PAID', 'CANCELED')


def has_pending_balance(reservation_id: str, cursor=None) -> bool:
    """
    Check whether a reservation still owes money.

    A payment is outstanding when it is not canceled and either is still
    PENDING or has been paid for less than its amount.

    Args:
        reservation_id: Reservation ID
        cursor: Optional cursor of an open transaction

    Returns:
        True if any payment is outstanding
    """
    cur = cursor or get_db().cursor()
    cur.execute('''
        SELECT COUNT(*) as pending
        FROM payments
        WHERE reservation_id = ?
          AND status != 'CANCELED'
          AND (status = 'PENDING' OR amount_paid < amount)
    ''', (reservation_id,))
    return cur.fetchone()['pending'] > 0


def create_payment(reservation_id: str, amount: float, amount_paid: float = 0,
                   status: str = 'PENDING', cursor=None) -> str:
    """
    Register a payment for a reservation.

    Args:
        reservation_id: Reservation ID
        amount: Amount due
        amount_paid: Amount already paid
        status: Payment status
        cursor: Optional cursor of an open transaction

    Returns:
        New payment ID
    """
    if status not in PAYMENT_STATUSES:
        raise ValueError(f'Estado de pago inválido: {status}')

    payment_id = str(uuid.uuid4())
    cur = cursor or get_db().cursor()
    cur.execute('''
        INSERT INTO payments (id, reservation_id, amount, amount_paid, status)
        VALUES (?, ?, ?, ?, ?)
    ''', (payment_id, reservation_id, amount, amount_paid, status))
    return payment_id


def update_payment_status(payment_id: str, status: str, amount_paid: float = None) -> bool:
    """
    Update payment status (and optionally the paid amount).

    Returns:
        True if a row was updated
    """
    if status not in PAYMENT_STATUSES:
        raise ValueError(f'Estado de pago inválido: {status}')

    cur = get_db().cursor()
    if amount_paid is None:
        cur.execute('''
            UPDATE payments SET status = ?, updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
        ''', (status, payment_id))
    else:
        cur.execute('''
            UPDATE payments SET status = ?, amount_paid = ?, updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
        ''', (status, amount_paid, payment_id))
    return cur.rowcount > 0
