"""
Database module - SQLite operations for feeds and entries.

Uses repository pattern for better separation of concerns.
"""

from .connection import DatabaseConnection
from .models import (
    DBEntry,
    DBFeed,
    EntriesVisibility,
    EntryUpdateAction,
    FeedKind,
    NewEntry,
    NewFeed,
    ReadState,
)
from .entry_repository import EntryRepository
from .feed_repository import FeedRepository
from .migrations import SCHEMA_VERSION, migrate
from .database import Database

__all__ = [
    "Database",
    "DatabaseConnection",
    "DBEntry",
    "DBFeed",
    "EntriesVisibility",
    "EntryUpdateAction",
    "FeedKind",
    "NewEntry",
    "NewFeed",
    "ReadState",
    "EntryRepository",
    "FeedRepository",
    "SCHEMA_VERSION",
    "migrate",
]
