"""
Database connection pool, transactions and schema initialization.
"""

import logging
import queue
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from ..exceptions import DatabaseError
from .migrations import migrate

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """
    Manages a bounded pool of SQLite connections and the schema.

    Connections run in autocommit mode; multi-statement work goes through
    transaction(), which owns BEGIN/COMMIT/ROLLBACK. There is no
    application-level lock: isolation comes from SQLite itself.
    """

    def __init__(self, db_path: Path, pool_size: int = 5, busy_timeout: float = 5.0):
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.pool_size = max(1, pool_size)
        self.busy_timeout = busy_timeout

        self._pool: queue.LifoQueue[sqlite3.Connection] = queue.LifoQueue(maxsize=self.pool_size)
        self._created = 0
        self._lock = threading.Lock()
        self._closed = False

        self.schema_version = self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(
            self.db_path,
            timeout=self.busy_timeout,
            isolation_level=None,
            check_same_thread=False,
        )
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON")
        connection.execute("PRAGMA journal_mode = WAL")
        connection.execute(f"PRAGMA busy_timeout = {int(self.busy_timeout * 1000)}")
        return connection

    def _acquire(self) -> sqlite3.Connection:
        if self._closed:
            raise DatabaseError("Database is closed")
        try:
            return self._pool.get_nowait()
        except queue.Empty:
            pass

        with self._lock:
            if self._created < self.pool_size:
                self._created += 1
                create = True
            else:
                create = False

        if create:
            try:
                return self._connect()
            except sqlite3.Error:
                with self._lock:
                    self._created -= 1
                raise

        try:
            return self._pool.get(timeout=self.busy_timeout)
        except queue.Empty:
            raise DatabaseError("Database connection pool exhausted")

    def _release(self, connection: sqlite3.Connection):
        if connection.in_transaction:
            connection.rollback()
        with self._lock:
            if not self._closed:
                self._pool.put_nowait(connection)
                return
            # Borrowed across close(), so it is not coming back to the pool
            self._created -= 1
        connection.close()

    @contextmanager
    def _checkout(self) -> Iterator[sqlite3.Connection]:
        try:
            connection = self._acquire()
        except sqlite3.Error as e:
            logger.error(f"Could not open database {self.db_path}: {e}")
            raise DatabaseError() from e
        try:
            yield connection
        finally:
            self._release(connection)

    @contextmanager
    def conn(self) -> Iterator[sqlite3.Connection]:
        """Borrow a pooled connection for single-statement work."""
        with self._checkout() as connection:
            try:
                yield connection
            except sqlite3.Error as e:
                logger.error(f"Database error: {e}")
                raise DatabaseError() from e

    @contextmanager
    def transaction(self, immediate: bool = False) -> Iterator[sqlite3.Connection]:
        """
        Run a block inside one transaction.

        immediate=True takes the write lock up front (BEGIN IMMEDIATE), so
        no other writer can interleave between a read and the write that
        depends on it. Any exception rolls the whole block back.
        """
        with self._checkout() as connection:
            try:
                connection.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
                try:
                    yield connection
                except BaseException:
                    if connection.in_transaction:
                        connection.execute("ROLLBACK")
                    raise
                connection.execute("COMMIT")
            except sqlite3.Error as e:
                logger.error(f"Database transaction failed: {e}")
                raise DatabaseError() from e

    def close(self):
        """Close idle connections now and borrowed ones as they come back."""
        with self._lock:
            self._closed = True
        while True:
            try:
                connection = self._pool.get_nowait()
            except queue.Empty:
                break
            connection.close()
            with self._lock:
                self._created -= 1

    def _init_schema(self) -> int:
        """Run schema migrations before anything else uses the store."""
        with self._checkout() as connection:
            try:
                return migrate(connection)
            except sqlite3.Error as e:
                logger.error(f"Schema migration failed: {e}")
                raise DatabaseError() from e
