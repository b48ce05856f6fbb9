"""
Database connection management.
Handles per-application-context connections, initialization, and teardown.
"""

import os
import sqlite3
import logging
from flask import g, current_app

logger = logging.getLogger(__name__)


def get_db():
    """
    Get the database connection bound to the current application context.

    The connection runs in autocommit mode: every transaction is opened
    explicitly through database.transaction, so no statement is ever left
    inside an implicit transaction.

    Returns:
        sqlite3.Connection: Database connection object
    """
    if 'db' not in g:
        db_path = current_app.config.get('DATABASE_PATH', 'instance/hotel.db')
        if db_path != ':memory:':
            db_dir = os.path.dirname(db_path)
            if db_dir and not os.path.exists(db_dir):
                os.makedirs(db_dir, exist_ok=True)

        g.db = sqlite3.connect(db_path, isolation_level=None)
        g.db.row_factory = sqlite3.Row
        # Enable foreign key constraints
        g.db.execute('PRAGMA foreign_keys = ON')
        # Enable WAL mode for better concurrency
        g.db.execute('PRAGMA journal_mode = WAL')
        # Wait for the write lock instead of failing immediately
        busy_timeout = int(current_app.config.get('DATABASE_BUSY_TIMEOUT_MS', 5000))
        g.db.execute(f'PRAGMA busy_timeout = {busy_timeout}')
    return g.db


def close_db(e=None):
    """
    Close database connection.

    Args:
        e: Exception if any (from Flask teardown context)
    """
    db = g.pop('db', None)
    if db is not None:
        if db.in_transaction:
            logger.warning('Closing connection with an open transaction, rolling back')
            db.rollback()
        db.close()


def init_db():
    """
    Initialize database: drop existing tables, create new schema, insert seed data.
    WARNING: This will delete all existing data!
    """
    from database.schema import drop_tables, create_tables, create_indexes
    from database.seed import seed_database

    db = get_db()

    db.execute('BEGIN')
    try:
        # Drop existing tables (in reverse order of dependencies)
        drop_tables(db)

        # Create all tables
        create_tables(db)

        # Create indexes
        create_indexes(db)

        # Insert seed data
        seed_database(db)

        db.execute('COMMIT')
    except Exception:
        db.execute('ROLLBACK')
        raise

    logger.info(f'Database initialized at {current_app.config.get("DATABASE_PATH")}')
