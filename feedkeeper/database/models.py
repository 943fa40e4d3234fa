"""
Database models - dataclasses for database entities and the closed
token sets used to query and update them.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ..exceptions import BadInput


class FeedKind(str, Enum):
    """Syndication format of a feed. All RSS versions collapse into RSS."""
    ATOM = "Atom"
    JSON = "JSON"
    RSS = "RSS"


class EntriesVisibility(str, Enum):
    """Read-state filter applied when listing a feed's entries."""
    UNREAD = "unread"
    READ = "read"
    ALL = "all"

    @classmethod
    def from_token(cls, token: str | None) -> "EntriesVisibility":
        """Map a query-string token to a variant. Missing means UNREAD."""
        if token is None:
            return cls.UNREAD
        try:
            return cls(token)
        except ValueError:
            raise BadInput(f"Unknown entries visibility: {token!r}")


class EntryUpdateAction(str, Enum):
    REFRESH = "refresh"
    TOGGLE_READ_UNREAD = "toggle_read_unread"

    @classmethod
    def from_token(cls, token: str | None) -> "EntryUpdateAction":
        if token is None:
            raise BadInput("Missing entry action")
        try:
            return cls(token)
        except ValueError:
            raise BadInput(f"Unknown entry action: {token!r}")


class ReadState(str, Enum):
    """Read state of an entry after a toggle."""
    READ = "read"
    UNREAD = "unread"

    @property
    def next_action(self) -> str:
        """Label for the action now available to the reader."""
        return "Mark unread" if self is ReadState.READ else "Mark read"


@dataclass
class NewFeed:
    title: str
    feed_link: str
    link: str
    feed_kind: FeedKind
    refreshed_at: datetime | None = None
    latest_etag: str | None = None


@dataclass
class NewEntry:
    title: str | None = None
    author: str | None = None
    pub_date: datetime | None = None
    description: str | None = None
    content: str | None = None
    link: str | None = None


@dataclass
class DBFeed:
    id: int
    title: str
    feed_link: str
    link: str
    feed_kind: FeedKind
    refreshed_at: datetime | None
    latest_etag: str | None
    inserted_at: datetime | None
    updated_at: datetime | None

    # Aggregates, only populated by list queries
    unread_count: int = 0
    read_count: int = 0
    latest_entry_at: datetime | None = None


@dataclass
class DBEntry:
    id: int
    feed_id: int
    title: str | None
    author: str | None
    pub_date: datetime | None
    description: str | None
    content: str | None
    link: str | None
    read_at: datetime | None
    inserted_at: datetime | None
    updated_at: datetime | None

    @property
    def is_read(self) -> bool:
        return self.read_at is not None
