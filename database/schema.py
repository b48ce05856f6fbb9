"""
Database schema definitions.
Table creation, indexes, and structure management.
"""


def drop_tables(db):
    """Drop all existing tables."""
    # Children before parents so foreign keys never dangle
    tables = [
        'audit_log',
        'payments',
        'reservations',
        'rooms',
        'room_types',
    ]

    for table in tables:
        db.execute(f'DROP TABLE IF EXISTS {table}')


def create_tables(db):
    """Create all database tables."""

    # 1. Rooms
    db.execute('''
        CREATE TABLE room_types (
            id TEXT PRIMARY KEY,
            name TEXT UNIQUE NOT NULL,
            price REAL NOT NULL DEFAULT 0,
            is_active INTEGER DEFAULT 1,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    db.execute('''
        CREATE TABLE rooms (
            id TEXT PRIMARY KEY,
            number INTEGER UNIQUE NOT NULL,
            room_type_id TEXT REFERENCES room_types(id),
            status TEXT NOT NULL DEFAULT 'AVAILABLE'
                CHECK (status IN ('AVAILABLE', 'RESERVED', 'OCCUPIED', 'CLEANING')),
            trash_bin INTEGER DEFAULT 1,
            towel INTEGER DEFAULT 1,
            toilet_paper INTEGER DEFAULT 1,
            shower_soap INTEGER DEFAULT 1,
            hand_soap INTEGER DEFAULT 1,
            lamp INTEGER DEFAULT 1,
            is_active INTEGER DEFAULT 1,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 2. Reservations
    db.execute('''
        CREATE TABLE reservations (
            id TEXT PRIMARY KEY,
            room_id TEXT NOT NULL REFERENCES rooms(id),
            customer_id TEXT NOT NULL,
            user_id TEXT,
            reservation_date TEXT NOT NULL,
            check_in_date TEXT NOT NULL,
            check_out_date TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'PENDING'
                CHECK (status IN ('PENDING', 'CONFIRMED', 'CHECKED_IN', 'CHECKED_OUT', 'CANCELED')),
            is_active INTEGER NOT NULL DEFAULT 1,
            applied_late_checkout INTEGER NOT NULL DEFAULT 0,
            guests TEXT,
            observations TEXT,
            origin TEXT,
            reason TEXT,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
            CHECK (check_in_date < check_out_date)
        )
    ''')

    # 3. Payments (only the pending-balance query is used by the core)
    db.execute('''
        CREATE TABLE payments (
            id TEXT PRIMARY KEY,
            reservation_id TEXT NOT NULL REFERENCES reservations(id),
            amount REAL NOT NULL DEFAULT 0,
            amount_paid REAL NOT NULL DEFAULT 0,
            status TEXT NOT NULL DEFAULT 'PENDING'
                CHECK (status IN ('PENDING', 'PARTIAL', 'PAID', 'CANCELED')),
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 4. Audit log
    db.execute('''
        CREATE TABLE audit_log (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            entity_id TEXT,
            entity_type TEXT NOT NULL,
            action TEXT NOT NULL,
            performed_by_id TEXT,
            changes TEXT,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    ''')


def create_indexes(db):
    """Create database indexes for performance."""

    # Rooms
    db.execute('CREATE INDEX idx_rooms_status ON rooms(status)')
    db.execute('CREATE INDEX idx_rooms_type ON rooms(room_type_id)')

    # Reservations: overlap scan
    db.execute('''
        CREATE INDEX idx_reservations_overlap
        ON reservations(room_id, check_in_date, check_out_date, status, is_active)
    ''')
    db.execute('CREATE INDEX idx_reservations_customer ON reservations(customer_id)')
    db.execute('CREATE INDEX idx_reservations_status ON reservations(status, is_active)')

    # Payments
    db.execute('CREATE INDEX idx_payments_reservation ON payments(reservation_id, status)')

    # Audit log
    db.execute('CREATE INDEX idx_audit_entity ON audit_log(entity_type, entity_id)')
    db.execute('CREATE INDEX idx_audit_created ON audit_log(created_at)')
