"""
Reservation services.

- reservation_service: public entry points (result envelopes, error boundary, notifications)
- reservation_lifecycle: create, update and status changes
- reservation_stay: late checkout and stay extension
- reservation_batch: batch deactivation and reactivation
- notifier: post-commit event fan-out
"""
