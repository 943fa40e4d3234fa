"""
Pydantic models for API request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel

from .database import DBEntry, DBFeed, EntriesVisibility
from .services import EntryView


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


# ─────────────────────────────────────────────────────────────
# Feed Schemas
# ─────────────────────────────────────────────────────────────

class FeedResponse(BaseModel):
    """A subscribed feed."""
    id: int
    title: str
    feed_link: str
    link: str
    feed_kind: str
    refreshed_at: str | None
    inserted_at: str | None

    @classmethod
    def from_db(cls, feed: DBFeed) -> "FeedResponse":
        return cls(
            id=feed.id,
            title=feed.title,
            feed_link=feed.feed_link,
            link=feed.link,
            feed_kind=feed.feed_kind.value,
            refreshed_at=_iso(feed.refreshed_at),
            inserted_at=_iso(feed.inserted_at),
        )


class FeedSummaryResponse(BaseModel):
    """Feed for the index view, with entry counts."""
    id: int
    title: str
    feed_link: str
    link: str
    feed_kind: str
    unread_entries: int
    read_entries: int
    latest_entry_at: str | None
    refreshed_at: str | None

    @classmethod
    def from_db(cls, feed: DBFeed) -> "FeedSummaryResponse":
        return cls(
            id=feed.id,
            title=feed.title,
            feed_link=feed.feed_link,
            link=feed.link,
            feed_kind=feed.feed_kind.value,
            unread_entries=feed.unread_count,
            read_entries=feed.read_count,
            latest_entry_at=_iso(feed.latest_entry_at),
            refreshed_at=_iso(feed.refreshed_at),
        )


# ─────────────────────────────────────────────────────────────
# Entry Schemas
# ─────────────────────────────────────────────────────────────

class EntryResponse(BaseModel):
    """Entry for list view."""
    id: int
    feed_id: int
    title: str | None
    author: str | None
    link: str | None
    pub_date: str | None
    read_at: str | None
    is_read: bool

    @classmethod
    def from_db(cls, entry: DBEntry) -> "EntryResponse":
        return cls(
            id=entry.id,
            feed_id=entry.feed_id,
            title=entry.title,
            author=entry.author,
            link=entry.link,
            pub_date=_iso(entry.pub_date),
            read_at=_iso(entry.read_at),
            is_read=entry.is_read,
        )


class FeedDetailResponse(BaseModel):
    """A feed with the entries matching a visibility filter."""
    feed: FeedResponse
    entries_visibility: str
    entries: list[EntryResponse]

    @classmethod
    def from_db(
        cls,
        feed: DBFeed,
        visibility: EntriesVisibility,
        entries: list[DBEntry]
    ) -> "FeedDetailResponse":
        return cls(
            feed=FeedResponse.from_db(feed),
            entries_visibility=visibility.value,
            entries=[EntryResponse.from_db(e) for e in entries],
        )


class EntryDetailResponse(BaseModel):
    """Entry with sanitized content and its feed context."""
    id: int
    feed_id: int
    feed_title: str
    title: str | None
    author: str | None
    link: str | None
    pub_date: str | None
    read_at: str | None
    is_read: bool
    content_html: str
    next_action: str

    @classmethod
    def from_view(cls, view: EntryView) -> "EntryDetailResponse":
        entry = view.entry
        return cls(
            id=entry.id,
            feed_id=entry.feed_id,
            feed_title=view.feed.title,
            title=entry.title,
            author=entry.author,
            link=entry.link,
            pub_date=_iso(entry.pub_date),
            read_at=_iso(entry.read_at),
            is_read=entry.is_read,
            content_html=view.content_html,
            next_action=view.next_action,
        )


class ErrorResponse(BaseModel):
    """Body and X-Error header payload of a classified failure."""
    error: str
    detail: str
