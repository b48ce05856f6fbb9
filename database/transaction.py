"""
Transaction boundaries over the application-context connection.

SQLite has no per-transaction isolation levels; the two levels used by the
reservation core map to the BEGIN variants:

- DEFAULT       -> BEGIN DEFERRED  (locks are taken lazily on first read/write)
- SERIALIZABLE  -> BEGIN IMMEDIATE (the write lock is taken before the first
                   read, so concurrent read-then-decide writers run one at a time)

Usage:
    with transaction(IsolationLevel.SERIALIZABLE) as cursor:
        cursor.execute('SELECT ...')
        cursor.execute('UPDATE ...')
    # committed here, rolled back if the block raised
"""

import logging
import itertools
from contextlib import contextmanager
from enum import Enum

from database.connection import get_db

logger = logging.getLogger(__name__)

_savepoint_ids = itertools.count(1)


class IsolationLevel(Enum):
    """Isolation requested for a transaction."""

    DEFAULT = 'DEFERRED'
    SERIALIZABLE = 'IMMEDIATE'


@contextmanager
def transaction(isolation: IsolationLevel = IsolationLevel.DEFAULT):
    """
    Open a transaction and yield a cursor bound to it.

    A call made while a transaction is already open becomes a SAVEPOINT of
    the outer transaction; the isolation of the outer transaction applies.

    Args:
        isolation: IsolationLevel for the new transaction

    Yields:
        sqlite3.Cursor: Cursor to run statements inside the transaction
    """
    db = get_db()

    if db.in_transaction:
        with savepoint(db.cursor()) as cursor:
            yield cursor
        return

    cursor = db.cursor()
    cursor.execute(f'BEGIN {isolation.value}')
    logger.debug(f'Transaction opened (BEGIN {isolation.value})')

    try:
        yield cursor
    except BaseException:
        db.rollback()
        logger.debug('Transaction rolled back')
        raise
    else:
        db.commit()
        logger.debug('Transaction committed')


@contextmanager
def savepoint(cursor, name: str = None):
    """
    Run a block inside a SAVEPOINT of the current transaction.

    On error only the work of the block is undone; the outer transaction
    stays open and usable.

    Args:
        cursor: Cursor of the open transaction
        name: Optional savepoint name (generated when omitted)

    Yields:
        sqlite3.Cursor: The same cursor
    """
    name = name or f'sp_{next(_savepoint_ids)}'
    cursor.execute(f'SAVEPOINT {name}')
    try:
        yield cursor
    except BaseException:
        cursor.execute(f'ROLLBACK TO SAVEPOINT {name}')
        cursor.execute(f'RELEASE SAVEPOINT {name}')
        raise
    else:
        cursor.execute(f'RELEASE SAVEPOINT {name}')
