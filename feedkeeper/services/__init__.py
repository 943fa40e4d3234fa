"""
Service layer for business logic.

Services encapsulate business logic, keeping routes as thin HTTP adapters.
Each service receives its dependencies via constructor injection.

Usage in routes:
    from ..services import EntryServiceDep

    @router.get("/entries/{entry_id}")
    async def get_entry(entry_id: int, service: EntryServiceDep):
        return service.show(entry_id)
"""

from typing import Annotated

from fastapi import Depends

from ..config import state, get_db
from ..database import Database

from .entry_service import EntryService, EntryView
from .feed_service import FeedService
from .ingestion import IngestionPipeline, build_records

__all__ = [
    # Services
    "EntryService",
    "EntryView",
    "FeedService",
    "IngestionPipeline",
    "build_records",
    # Dependency factories
    "get_entry_service",
    "get_feed_service",
    # Type aliases for dependency injection
    "EntryServiceDep",
    "FeedServiceDep",
]


def get_entry_service(db: Annotated[Database, Depends(get_db)]) -> EntryService:
    """Dependency to get EntryService instance."""
    return EntryService(db=db)


def get_feed_service(db: Annotated[Database, Depends(get_db)]) -> FeedService:
    """Dependency to get FeedService instance."""
    return FeedService(
        db=db,
        ingestion=state.ingestion,
    )


# Re-export the service factories for convenience
EntryServiceDep = Annotated[EntryService, Depends(get_entry_service)]
FeedServiceDep = Annotated[FeedService, Depends(get_feed_service)]
