"""
Database package for the hotel reservations core.

This package provides modular database operations:
- connection: Database connection management (get_db, close_db, init_db)
- transaction: Explicit transaction and savepoint boundaries
- schema: Table creation and indexes
- seed: Initial seed data
"""

from database.connection import get_db, close_db, init_db
from database.transaction import IsolationLevel, transaction, savepoint
from database.schema import drop_tables, create_tables, create_indexes
from database.seed import seed_database

__all__ = [
    # Connection
    'get_db',
    'close_db',
    'init_db',
    # Transactions
    'IsolationLevel',
    'transaction',
    'savepoint',
    # Schema
    'drop_tables',
    'create_tables',
    'create_indexes',
    # Seed
    'seed_database',
]
