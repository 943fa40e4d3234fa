"""
Error taxonomy for feed ingestion and entry state.

Every error carries the HTTP status it maps to and a short kind token,
so the API layer can render them with a single exception handler.
"""

from typing import TypeVar

T = TypeVar("T")


class FeedKeeperError(Exception):
    """Base class for classified, caller-facing errors."""

    status_code: int = 500
    error: str = "internal_error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class BadInput(FeedKeeperError):
    """User-correctable input: malformed URL, duplicate subscription, bad token."""

    status_code = 400
    error = "bad_input"


class NotFound(FeedKeeperError):
    """Requested feed or entry does not exist."""

    status_code = 404
    error = "not_found"


class FeedParseError(FeedKeeperError):
    """Remote document is not a usable feed. Retrying the same source won't help."""

    status_code = 422
    error = "feed_parse_error"


class NetworkError(FeedKeeperError):
    """Fetching the remote feed failed (status, transport or timeout)."""

    status_code = 502
    error = "network_error"


class DatabaseError(FeedKeeperError):
    """Persistence failure. The detail is kept opaque."""

    status_code = 500
    error = "database_error"

    def __init__(self, detail: str = "Database error"):
        super().__init__(detail)


def require_resource(resource: T | None, detail: str = "Resource not found") -> T:
    """
    Raise NotFound if resource is None, otherwise return the resource.

    Usage:
        entry = require_resource(db.get_entry(id), "Entry not found")
    """
    if resource is None:
        raise NotFound(detail)
    return resource


def require_feed(feed: T | None) -> T:
    """Raise NotFound if feed is None."""
    return require_resource(feed, "Feed not found")


def require_entry(entry: T | None) -> T:
    """Raise NotFound if entry is None."""
    return require_resource(entry, "Entry not found")
