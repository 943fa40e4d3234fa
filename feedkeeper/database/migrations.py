"""
Forward-only schema migrations gated on PRAGMA user_version.

Each step runs when the stored version is below its target. All steps
share one transaction, so a failed start-up leaves the store untouched.
"""

import logging
import sqlite3
from typing import Callable

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 3


def _create_tables(conn: sqlite3.Connection):
    conn.execute("""
        CREATE TABLE IF NOT EXISTS feeds (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT,
            feed_link TEXT,
            link TEXT,
            feed_kind TEXT,
            refreshed_at TIMESTAMP,
            inserted_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS entries (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            feed_id INTEGER NOT NULL REFERENCES feeds(id) ON DELETE CASCADE,
            title TEXT,
            author TEXT,
            pub_date TIMESTAMP,
            description TEXT,
            content TEXT,
            link TEXT,
            read_at TIMESTAMP,
            inserted_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    conn.execute("""
        CREATE INDEX IF NOT EXISTS entries_feed_id_and_pub_date_and_inserted_at_index
        ON entries (feed_id, pub_date, inserted_at)
    """)


def _add_latest_etag(conn: sqlite3.Connection):
    conn.execute("ALTER TABLE feeds ADD COLUMN latest_etag TEXT")


def _unique_feed_link(conn: sqlite3.Connection):
    conn.execute("CREATE UNIQUE INDEX feeds_feed_link ON feeds (feed_link)")


# (target version, step)
MIGRATIONS: list[tuple[int, Callable[[sqlite3.Connection], None]]] = [
    (1, _create_tables),
    (2, _add_latest_etag),
    (3, _unique_feed_link),
]


def get_schema_version(conn: sqlite3.Connection) -> int:
    row = conn.execute("PRAGMA user_version").fetchone()
    return row[0] if row else 0


def migrate(conn: sqlite3.Connection) -> int:
    """
    Bring the schema up to SCHEMA_VERSION.

    The connection must be in autocommit mode; the transaction is managed
    here. Returns the resulting schema version.
    """
    conn.execute("BEGIN IMMEDIATE")
    try:
        version = get_schema_version(conn)
        for target, step in MIGRATIONS:
            if version < target:
                logger.info(f"Applying schema migration {step.__name__} (version {target})")
                step(conn)
                conn.execute(f"PRAGMA user_version = {target}")
        conn.execute("COMMIT")
    except BaseException:
        conn.execute("ROLLBACK")
        raise

    final_version = get_schema_version(conn)
    if final_version != version:
        logger.info(f"Schema migrated from version {version} to {final_version}")
    return final_version
