"""
Ingestion pipeline: validate → dedupe → fetch → parse → transform → persist.

A subscription either stores the feed and every one of its entries or
stores nothing. No store connection is held while the remote document is
fetched or parsed.
"""

import asyncio
import logging
from datetime import datetime, timezone

from ..database import Database, DBFeed, NewEntry, NewFeed
from ..exceptions import BadInput, FeedKeeperError, FeedParseError
from ..feed_parser import FeedParser, ParsedFeed
from ..fetcher import Fetcher
from ..url_validator import validate_feed_url

logger = logging.getLogger(__name__)


def build_records(
    parsed: ParsedFeed,
    feed_link: str,
    etag: str | None = None,
    refreshed_at: datetime | None = None,
) -> tuple[NewFeed, list[NewEntry]]:
    """
    Turn a parsed document into the rows to insert.

    Raises:
        FeedParseError: If the document declares no title
    """
    if not parsed.title or not parsed.title.strip():
        raise FeedParseError("Feed document has no title")

    feed = NewFeed(
        title=parsed.title,
        feed_link=feed_link,
        link=parsed.link or feed_link,
        feed_kind=parsed.kind,
        refreshed_at=refreshed_at,
        latest_etag=etag,
    )

    entries = [
        NewEntry(
            title=item.title,
            author=item.author,
            pub_date=item.published,
            description=item.description,
            content=item.content,
            link=item.link,
        )
        for item in parsed.items
    ]

    return feed, entries


class IngestionPipeline:
    """Subscribes to a feed: fetches it once and stores it with its entries."""

    def __init__(self, db: Database, fetcher: Fetcher, feed_parser: FeedParser):
        self.db = db
        self.fetcher = fetcher
        self.feed_parser = feed_parser

    async def subscribe(self, url: str) -> DBFeed:
        """
        Ingest the feed at url.

        Returns:
            The stored feed

        Raises:
            BadInput: Malformed URL, blocked target or already subscribed
            NetworkError: The fetch failed
            FeedParseError: The document is not a usable feed
            DatabaseError: The dedupe check or the insert failed
        """
        try:
            return await self._subscribe(url)
        except FeedKeeperError as e:
            logger.warning(f"Subscription to {url!r} failed ({e.error}): {e.detail}")
            raise

    async def _subscribe(self, url: str) -> DBFeed:
        feed_link = validate_feed_url(url)

        # Pre-check only: the unique index on feed_link is what actually
        # stops two concurrent subscriptions to the same URL.
        if self.db.get_feed_by_link(feed_link) is not None:
            raise BadInput("feed already exists")

        logger.info(f"Subscribing to {feed_link}")
        document = await self.fetcher.fetch(feed_link)

        parsed = await asyncio.to_thread(
            self.feed_parser.parse, document.body, document.final_url, document.content_type
        )

        feed, entries = build_records(
            parsed,
            feed_link,
            etag=document.etag,
            refreshed_at=datetime.now(timezone.utc),
        )

        feed_id = self.db.add_feed_with_entries(feed, entries)
        logger.info(f"Subscribed to {feed_link} as feed {feed_id} with {len(entries)} entries")

        stored = self.db.get_feed(feed_id)
        if stored is None:
            raise FeedKeeperError("Failed to retrieve feed")
        return stored
