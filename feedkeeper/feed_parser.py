"""
Feed Parser - decode RSS, Atom and JSON Feed documents.

Thin adapter over feedparser: it turns raw bytes into ParsedFeed and
ParsedItem values and classifies anything that is not a feed as
FeedParseError. Values the document does not declare stay None.
"""

import calendar
import io
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from xml.sax import SAXException

import feedparser

from .database.models import FeedKind
from .exceptions import FeedParseError

logger = logging.getLogger(__name__)


@dataclass
class ParsedItem:
    """Represents a single item/entry from a feed."""
    title: str | None = None
    author: str | None = None
    published: datetime | None = None
    description: str | None = None
    content: str | None = None
    link: str | None = None


@dataclass
class ParsedFeed:
    """Represents a parsed feed document."""
    kind: FeedKind
    title: str | None
    link: str | None
    items: list[ParsedItem] = field(default_factory=list)


def feed_kind_from_version(version: str | None) -> FeedKind | None:
    """
    Map a feedparser version string to a FeedKind.

    rss090, rss091u, rss10, rss20 and friends all collapse into RSS.
    Returns None for anything unrecognised.
    """
    if not version:
        return None
    if version.startswith("atom"):
        return FeedKind.ATOM
    if version.startswith("json"):
        return FeedKind.JSON
    if version.startswith("rss"):
        return FeedKind.RSS
    return None


def _struct_to_datetime(value) -> datetime | None:
    # feedparser normalizes *_parsed fields to UTC struct_time
    if not value:
        return None
    try:
        return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        return None


def _text(value) -> str | None:
    if value is None:
        return None
    value = str(value)
    return value if value.strip() else None


class FeedParser:
    """Parses feed documents with feedparser."""

    def parse(self, body: bytes, url: str = "", content_type: str | None = None) -> ParsedFeed:
        """
        Parse a feed document.

        Raises:
            FeedParseError: If the body is not a recognised feed format
        """
        headers = {"content-location": url} if url else {}
        if content_type:
            # feedparser only switches to its JSON Feed parser for this exact type
            if "json" in content_type.lower():
                content_type = "application/json"
            headers["content-type"] = content_type

        parsed = feedparser.parse(io.BytesIO(body), response_headers=headers)

        cause = parsed.get("bozo_exception")
        kind = feed_kind_from_version(parsed.get("version"))
        if kind is None:
            logger.warning(f"Unrecognised feed document at {url or '<body>'}: {cause}")
            if cause:
                raise FeedParseError(f"Not a valid feed document: {cause}")
            raise FeedParseError("Not a valid feed document: unsupported or unrecognised format")

        # Encoding and content-type complaints are harmless; an XML
        # well-formedness error means feedparser only recovered part of it
        if parsed.bozo and isinstance(cause, SAXException):
            logger.warning(f"Malformed feed document at {url or '<body>'}: {cause}")
            raise FeedParseError(f"Malformed feed document: {cause}")

        if parsed.bozo and not parsed.entries and not parsed.feed:
            raise FeedParseError(f"Failed to parse feed: {cause}")

        items = [self._parse_item(entry) for entry in parsed.entries]

        return ParsedFeed(
            kind=kind,
            title=_text(parsed.feed.get("title")),
            link=_text(parsed.feed.get("link")),
            items=items,
        )

    def _parse_item(self, entry) -> ParsedItem:
        content = None
        raw_content = entry.get("content")
        if isinstance(raw_content, list) and raw_content:
            content = _text(raw_content[0].get("value"))
        elif raw_content:
            # JSON Feed items carry a single content mapping
            content = _text(raw_content.get("value"))

        published = _struct_to_datetime(entry.get("published_parsed"))
        if published is None:
            published = _struct_to_datetime(entry.get("updated_parsed"))

        link = _text(entry.get("link"))
        if not link:
            for candidate in entry.get("links", []):
                if candidate.get("rel") == "alternate" or candidate.get("type") == "text/html":
                    link = _text(candidate.get("href"))
                    break

        return ParsedItem(
            title=_text(entry.get("title")),
            author=_text(entry.get("author")),
            published=published,
            description=_text(entry.get("summary")),
            content=content,
            link=link,
        )
