"""
Configuration and application state management.
"""

import os
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from .exceptions import DatabaseError

if TYPE_CHECKING:
    from .database import Database
    from .feed_parser import FeedParser
    from .fetcher import Fetcher
    from .services import IngestionPipeline

# Load environment variables
load_dotenv()


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse boolean from environment variable."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


class Config:
    """Application configuration from environment."""
    DB_PATH: Path = Path(os.getenv("DB_PATH", "./data/feeds.db"))
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "5"))
    # Seconds to wait on a locked database or an exhausted pool
    DB_BUSY_TIMEOUT: float = float(os.getenv("DB_BUSY_TIMEOUT", "5.0"))

    PORT: int = int(os.getenv("PORT", "4000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Outbound feed fetching
    FETCH_TIMEOUT: int = int(os.getenv("FETCH_TIMEOUT", "30"))  # seconds
    USER_AGENT: str = os.getenv("USER_AGENT", "feedkeeper/1.0")
    BLOCK_PRIVATE_NETWORKS: bool = _parse_bool(os.getenv("BLOCK_PRIVATE_NETWORKS"), default=True)


config = Config()


class AppState:
    """Shared application state."""
    db: "Database | None" = None
    feed_parser: "FeedParser | None" = None
    fetcher: "Fetcher | None" = None
    ingestion: "IngestionPipeline | None" = None


state = AppState()


def get_db() -> "Database":
    """Dependency to get database instance."""
    if not state.db:
        raise DatabaseError("Database not initialized")
    return state.db


