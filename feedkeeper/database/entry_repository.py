"""
Entry repository - entry inserts, visibility queries and read-state toggling.
"""

import sqlite3
from datetime import datetime, timezone

from ..exceptions import NotFound
from .connection import DatabaseConnection
from .converters import row_to_entry, to_db_timestamp
from .models import DBEntry, EntriesVisibility, NewEntry, ReadState


class EntryRepository:
    """Repository for entry operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def insert(self, conn: sqlite3.Connection, feed_id: int, entry: NewEntry) -> int:
        """Insert an entry on a connection that is already inside a transaction."""
        cursor = conn.execute(
            """INSERT INTO entries
               (feed_id, title, author, pub_date, description, content, link)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (feed_id, entry.title, entry.author, to_db_timestamp(entry.pub_date),
             entry.description, entry.content, entry.link)
        )
        return cursor.lastrowid

    def get(self, entry_id: int) -> DBEntry | None:
        """Get single entry by ID."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM entries WHERE id = ?", (entry_id,)
            ).fetchone()
            return row_to_entry(row) if row else None

    def get_for_feed(
        self,
        feed_id: int,
        visibility: EntriesVisibility = EntriesVisibility.UNREAD
    ) -> list[DBEntry]:
        """
        Get a feed's entries filtered by read state, newest first.

        SQLite sorts NULL below every other value, so with pub_date DESC
        the entries that have no publication date come last.
        """
        query = "SELECT * FROM entries WHERE feed_id = ?"
        params: list = [feed_id]

        if visibility is EntriesVisibility.UNREAD:
            query += " AND read_at IS NULL"
        elif visibility is EntriesVisibility.READ:
            query += " AND read_at IS NOT NULL"

        query += " ORDER BY pub_date DESC, inserted_at DESC, id DESC"

        with self._db.conn() as conn:
            rows = conn.execute(query, params).fetchall()
            return [row_to_entry(row) for row in rows]

    def toggle_read(self, entry_id: int) -> ReadState:
        """
        Flip an entry between read and unread. Returns the new state.

        The read and the write share one BEGIN IMMEDIATE transaction, so
        concurrent toggles of the same entry serialize on the write lock
        and the last to commit decides the final state.
        """
        with self._db.transaction(immediate=True) as conn:
            row = conn.execute(
                "SELECT read_at FROM entries WHERE id = ?", (entry_id,)
            ).fetchone()
            if row is None:
                raise NotFound("Entry not found")

            if row["read_at"] is None:
                read_at = to_db_timestamp(datetime.now(timezone.utc))
                new_state = ReadState.READ
            else:
                read_at = None
                new_state = ReadState.UNREAD

            conn.execute(
                "UPDATE entries SET read_at = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (read_at, entry_id)
            )
            return new_state

    def count_for_feed(self, feed_id: int) -> int:
        with self._db.conn() as conn:
            return conn.execute(
                "SELECT COUNT(*) FROM entries WHERE feed_id = ?", (feed_id,)
            ).fetchone()[0]

    def count(self) -> int:
        with self._db.conn() as conn:
            return conn.execute("SELECT COUNT(*) FROM entries").fetchone()[0]
