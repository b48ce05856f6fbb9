"""
Pytest configuration and fixtures.
Ensures tests use an isolated test database, not the production database.
"""

import os
import pytest
import tempfile
from datetime import datetime, timedelta

# Set test database path BEFORE importing app
# This ensures all tests use an isolated database
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), 'hotel_reservations_test.db')
os.environ['DATABASE_PATH'] = TEST_DB_PATH


@pytest.fixture(scope='session', autouse=True)
def setup_test_environment():
    """Set up test environment before any tests run."""
    # Ensure test database path is set
    os.environ['DATABASE_PATH'] = TEST_DB_PATH
    os.environ['FLASK_ENV'] = 'test'

    yield

    # Cleanup: remove test database (and WAL side files) after all tests
    for path in (TEST_DB_PATH, f'{TEST_DB_PATH}-wal', f'{TEST_DB_PATH}-shm'):
        if os.path.exists(path):
            try:
                os.remove(path)
            except PermissionError:
                pass  # Windows may have file locked


@pytest.fixture
def app():
    """Create test application with isolated database."""
    from app import create_app
    from database import init_db

    # Ensure test database path
    os.environ['DATABASE_PATH'] = TEST_DB_PATH

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['DATABASE_PATH'] = TEST_DB_PATH

    with app.app_context():
        init_db()
        yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def user():
    """Acting user passed to every reservation operation."""
    return {'id': 'user-recepcion-1', 'name': 'Recepción'}


@pytest.fixture
def room(app):
    """Seeded room 101 (Simple)."""
    from models.room import get_room_by_number, get_room_by_id
    return get_room_by_id(get_room_by_number(101)['id'])


@pytest.fixture
def other_room(app):
    """Seeded room 201 (Matrimonial)."""
    from models.room import get_room_by_number, get_room_by_id
    return get_room_by_id(get_room_by_number(201)['id'])


@pytest.fixture
def future():
    """
    Build a datetime N days from now at a given hour.

    Usage:
        future(10)          -> 10 days ahead at 14:00
        future(12, hour=12) -> 12 days ahead at 12:00
    """
    def _future(days: int, hour: int = 14, minute: int = 0) -> datetime:
        base = datetime.now() + timedelta(days=days)
        return base.replace(hour=hour, minute=minute, second=0, microsecond=0)
    return _future


@pytest.fixture
def make_reservation(app, user):
    """
    Insert a reservation directly, bypassing availability checks.

    Lets tests place reservations in any status (including terminal ones)
    without walking the state machine.
    """
    from database import transaction
    from models.reservation import insert_reservation, get_reservation_by_id, TERMINAL_STATUSES

    def _make(room_id, check_in, check_out, status='CONFIRMED', is_active=None, **fields):
        if is_active is None:
            is_active = status not in TERMINAL_STATUSES
        with transaction() as cursor:
            reservation_id = insert_reservation({
                'room_id': room_id,
                'customer_id': fields.pop('customer_id', 'customer-1'),
                'user_id': user['id'],
                'check_in_date': check_in,
                'check_out_date': check_out,
                'status': status,
                'is_active': is_active,
                **fields,
            }, cursor)
        return get_reservation_by_id(reservation_id)

    return _make
