"""
Database seed data.
Initial data population for fresh database installations.
"""

import uuid


def seed_database(db):
    """Insert initial seed data."""

    # 1. Room types
    room_types_data = [
        ('Simple', 120.0),
        ('Doble', 180.0),
        ('Matrimonial', 200.0),
        ('Suite', 350.0),
    ]

    room_type_ids = {}
    for name, price in room_types_data:
        room_type_id = str(uuid.uuid4())
        room_type_ids[name] = room_type_id
        db.execute('''
            INSERT INTO room_types (id, name, price)
            VALUES (?, ?, ?)
        ''', (room_type_id, name, price))

    # 2. Rooms: floor 1 simple/doble, floor 2 matrimonial, suite on top
    rooms_data = [
        (101, 'Simple'),
        (102, 'Simple'),
        (103, 'Doble'),
        (104, 'Doble'),
        (201, 'Matrimonial'),
        (202, 'Matrimonial'),
        (301, 'Suite'),
    ]

    for number, type_name in rooms_data:
        db.execute('''
            INSERT INTO rooms (id, number, room_type_id, status)
            VALUES (?, ?, ?, 'AVAILABLE')
        ''', (str(uuid.uuid4()), number, room_type_ids[type_name]))
