"""
Database row converters - convert SQLite rows to dataclasses.
"""

import sqlite3
from datetime import datetime, timezone

from .models import DBEntry, DBFeed, FeedKind


def to_db_timestamp(value: datetime | None) -> str | None:
    """Serialize a datetime as UTC ISO-8601 text, so text order is time order."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse ISO text or SQLite CURRENT_TIMESTAMP text into an aware UTC datetime."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        # CURRENT_TIMESTAMP is UTC without an offset
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def row_to_feed(row: sqlite3.Row) -> DBFeed:
    """Convert a database row to a DBFeed."""
    keys = row.keys()

    return DBFeed(
        id=row["id"],
        title=row["title"],
        feed_link=row["feed_link"],
        link=row["link"],
        feed_kind=FeedKind(row["feed_kind"]),
        refreshed_at=parse_timestamp(row["refreshed_at"]),
        latest_etag=row["latest_etag"],
        inserted_at=parse_timestamp(row["inserted_at"]),
        updated_at=parse_timestamp(row["updated_at"]),
        # Aggregates are only present in list queries
        unread_count=(row["unread_count"] or 0) if "unread_count" in keys else 0,
        read_count=(row["read_count"] or 0) if "read_count" in keys else 0,
        latest_entry_at=parse_timestamp(row["latest_entry_at"]) if "latest_entry_at" in keys else None,
    )


def row_to_entry(row: sqlite3.Row) -> DBEntry:
    """Convert a database row to a DBEntry."""
    return DBEntry(
        id=row["id"],
        feed_id=row["feed_id"],
        title=row["title"],
        author=row["author"],
        pub_date=parse_timestamp(row["pub_date"]),
        description=row["description"],
        content=row["content"],
        link=row["link"],
        read_at=parse_timestamp(row["read_at"]),
        inserted_at=parse_timestamp(row["inserted_at"]),
        updated_at=parse_timestamp(row["updated_at"]),
    )
