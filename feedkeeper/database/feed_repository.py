"""
Feed repository - insert and read operations for feeds.
"""

import sqlite3

from ..exceptions import BadInput
from .connection import DatabaseConnection
from .converters import row_to_feed, to_db_timestamp
from .models import DBFeed, NewFeed


class FeedRepository:
    """Repository for feed operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def insert(self, conn: sqlite3.Connection, feed: NewFeed) -> int:
        """
        Insert a feed on a connection that is already inside a transaction.

        A second feed with the same feed_link violates the unique index and
        is reported as BadInput, whichever request got there first.
        """
        try:
            cursor = conn.execute(
                """INSERT INTO feeds
                   (title, feed_link, link, feed_kind, refreshed_at, latest_etag)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (feed.title, feed.feed_link, feed.link, feed.feed_kind.value,
                 to_db_timestamp(feed.refreshed_at), feed.latest_etag)
            )
        except sqlite3.IntegrityError:
            raise BadInput("feed already exists")
        return cursor.lastrowid

    def get(self, feed_id: int) -> DBFeed | None:
        """Get single feed by ID."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM feeds WHERE id = ?", (feed_id,)
            ).fetchone()
            return row_to_feed(row) if row else None

    def get_by_feed_link(self, feed_link: str) -> DBFeed | None:
        """Get feed by its subscription URL (exact match, no normalization)."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM feeds WHERE feed_link = ?", (feed_link,)
            ).fetchone()
            return row_to_feed(row) if row else None

    def get_all(self) -> list[DBFeed]:
        """Get all feeds with read/unread counts and their newest entry date."""
        with self._db.conn() as conn:
            rows = conn.execute("""
                SELECT f.*,
                       COUNT(CASE WHEN e.id IS NOT NULL AND e.read_at IS NULL THEN 1 END) AS unread_count,
                       COUNT(e.read_at) AS read_count,
                       MAX(e.pub_date) AS latest_entry_at
                FROM feeds f
                LEFT JOIN entries e ON e.feed_id = f.id
                GROUP BY f.id
                ORDER BY f.title ASC, f.id ASC
            """).fetchall()
            return [row_to_feed(row) for row in rows]

    def count(self) -> int:
        with self._db.conn() as conn:
            return conn.execute("SELECT COUNT(*) FROM feeds").fetchone()[0]
