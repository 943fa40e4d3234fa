"""
Database facade - provides unified access to all repositories.
"""

import logging
from pathlib import Path

from .connection import DatabaseConnection
from .entry_repository import EntryRepository
from .feed_repository import FeedRepository
from .models import DBEntry, DBFeed, EntriesVisibility, NewEntry, NewFeed, ReadState

logger = logging.getLogger(__name__)


class Database:
    """
    Unified database access facade.

    Opening it migrates the schema, so nothing can read or write the
    store before it is at the current version.
    """

    def __init__(self, db_path: Path, pool_size: int = 5, busy_timeout: float = 5.0):
        self._connection = DatabaseConnection(db_path, pool_size=pool_size, busy_timeout=busy_timeout)

        self.feeds = FeedRepository(self._connection)
        self.entries = EntryRepository(self._connection)

    @property
    def schema_version(self) -> int:
        return self._connection.schema_version

    def close(self):
        self._connection.close()

    # ─────────────────────────────────────────────────────────────
    # Feed operations (delegated to FeedRepository)
    # ─────────────────────────────────────────────────────────────

    def get_feed(self, feed_id: int) -> DBFeed | None:
        return self.feeds.get(feed_id)

    def get_feed_by_link(self, feed_link: str) -> DBFeed | None:
        return self.feeds.get_by_feed_link(feed_link)

    def get_feeds(self) -> list[DBFeed]:
        return self.feeds.get_all()

    def add_feed_with_entries(self, feed: NewFeed, entries: list[NewEntry]) -> int:
        """
        Insert a feed and all of its entries atomically. Returns feed ID.

        Either every row commits or none does: a failure on any entry
        rolls back the feed row too.
        """
        with self._connection.transaction() as conn:
            feed_id = self.feeds.insert(conn, feed)
            for entry in entries:
                self.entries.insert(conn, feed_id, entry)
        logger.debug(f"Stored feed {feed_id} with {len(entries)} entries")
        return feed_id

    # ─────────────────────────────────────────────────────────────
    # Entry operations (delegated to EntryRepository)
    # ─────────────────────────────────────────────────────────────

    def get_entry(self, entry_id: int) -> DBEntry | None:
        return self.entries.get(entry_id)

    def get_entries(
        self,
        feed_id: int,
        visibility: EntriesVisibility = EntriesVisibility.UNREAD
    ) -> list[DBEntry]:
        return self.entries.get_for_feed(feed_id, visibility)

    def toggle_entry_read(self, entry_id: int) -> ReadState:
        return self.entries.toggle_read(entry_id)
