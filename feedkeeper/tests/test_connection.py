"""
Tests for the connection pool and transactions.
"""

import sqlite3
from concurrent.futures import ThreadPoolExecutor

import pytest

from feedkeeper.database import Database, EntriesVisibility, FeedKind, NewEntry, NewFeed
from feedkeeper.exceptions import BadInput, DatabaseError


def _seed(db) -> int:
    feed_id = db.add_feed_with_entries(
        NewFeed(
            title="Pool",
            feed_link="https://pool.example.com/feed",
            link="https://pool.example.com",
            feed_kind=FeedKind.RSS,
        ),
        [NewEntry(title="only")],
    )
    return db.get_entries(feed_id, EntriesVisibility.ALL)[0].id


class TestConnectionPool:
    """Tests for DatabaseConnection pooling."""

    def test_pool_exhaustion(self, temp_db_path):
        db = Database(temp_db_path, pool_size=1, busy_timeout=0.1)
        try:
            with db._connection.conn():
                with pytest.raises(DatabaseError, match="exhausted"):
                    with db._connection.conn():
                        pass
            # The connection went back to the pool
            assert db.feeds.count() == 0
        finally:
            db.close()

    def test_concurrent_toggles_serialize(self, temp_db_path):
        """An even number of toggles from many threads leaves the entry unread."""
        db = Database(temp_db_path, pool_size=4)
        try:
            entry_id = _seed(db)
            with ThreadPoolExecutor(max_workers=4) as executor:
                results = list(executor.map(lambda _: db.toggle_entry_read(entry_id), range(20)))

            assert len(results) == 20
            assert db.get_entry(entry_id).read_at is None
        finally:
            db.close()

    def test_close_reaches_borrowed_connections(self, temp_db_path):
        """A connection out on loan when the pool closes is closed on return."""
        db = Database(temp_db_path, pool_size=2)
        with db._connection.conn() as borrowed:
            db.close()
            # Still usable until it comes back
            borrowed.execute("SELECT 1")

        with pytest.raises(sqlite3.ProgrammingError):
            borrowed.execute("SELECT 1")
        assert db._connection._pool.empty()
        assert db._connection._created == 0

    def test_closed_pool_refuses_checkout(self, temp_db_path):
        db = Database(temp_db_path)
        db.close()

        with pytest.raises(DatabaseError, match="closed"):
            db.feeds.count()


class TestTransactions:
    """Tests for transaction()."""

    def test_error_in_block_rolls_back(self, test_db):
        with pytest.raises(RuntimeError):
            with test_db._connection.transaction() as conn:
                conn.execute(
                    "INSERT INTO feeds (title, feed_link, link, feed_kind) VALUES (?, ?, ?, ?)",
                    ("t", "https://t.example.com", "https://t.example.com", "RSS")
                )
                raise RuntimeError("boom")

        assert test_db.feeds.count() == 0

    def test_duplicate_feed_link_is_bad_input(self, test_db):
        feed = NewFeed(
            title="Twice",
            feed_link="https://twice.example.com/feed",
            link="https://twice.example.com",
            feed_kind=FeedKind.ATOM,
        )
        test_db.add_feed_with_entries(feed, [NewEntry(title="a")])

        with pytest.raises(BadInput, match="feed already exists"):
            test_db.add_feed_with_entries(feed, [NewEntry(title="b")])

        assert test_db.feeds.count() == 1
        assert test_db.entries.count() == 1

    def test_sql_error_becomes_database_error(self, test_db):
        with pytest.raises(DatabaseError) as exc_info:
            with test_db._connection.conn() as conn:
                conn.execute("SELECT * FROM no_such_table")

        assert exc_info.value.detail == "Database error"
