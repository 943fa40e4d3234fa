"""
Feed service: business logic for feed listing and subscription.
"""

from ..database import Database
from ..database.models import DBFeed
from ..exceptions import FeedKeeperError
from .ingestion import IngestionPipeline


class FeedService:
    """Service for feed-related business logic."""

    def __init__(self, db: Database, ingestion: IngestionPipeline | None = None):
        self.db = db
        self.ingestion = ingestion

    def list_feeds(self) -> list[DBFeed]:
        """
        List all subscribed feeds.

        Returns:
            Feeds ordered by title, with unread/read counts and the
            publication date of their newest entry
        """
        return self.db.get_feeds()

    async def subscribe(self, url: str) -> DBFeed:
        """
        Subscribe to a new feed.

        Args:
            url: Feed URL to subscribe to, stored exactly as given

        Returns:
            The created feed

        Raises:
            FeedKeeperError: Classified failure from the ingestion pipeline
        """
        if self.ingestion is None:
            raise FeedKeeperError("Ingestion pipeline not initialized")
        return await self.ingestion.subscribe(url)
