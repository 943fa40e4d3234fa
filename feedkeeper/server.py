"""
Feed Reader API Server

FastAPI application providing endpoints for:
- Feed index with read/unread counts
- Subscribing to a feed (one-time ingestion)
- Feed detail filtered by read state
- Entry detail and read/unread toggling
"""

import json
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from . import __version__
from .config import config, state
from .database import Database
from .exceptions import BadInput, FeedKeeperError
from .feed_parser import FeedParser
from .fetcher import Fetcher
from .routes import entries_router, feeds_router, misc_router
from .schemas import ErrorResponse
from .services import IngestionPipeline

logger = logging.getLogger(__name__)

# Thin clients read the classified error from this header
ERROR_HEADER = "X-Error"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup application resources."""
    logging.getLogger("feedkeeper").setLevel(config.LOG_LEVEL.upper())

    # Startup - skip if already initialized (e.g., by tests)
    owns_db = state.db is None
    if owns_db:
        # Opening the database runs the schema migrations
        state.db = Database(
            config.DB_PATH,
            pool_size=config.DB_POOL_SIZE,
            busy_timeout=config.DB_BUSY_TIMEOUT,
        )
        logger.info(f"Database ready at {config.DB_PATH} (schema version {state.db.schema_version})")
    if state.feed_parser is None:
        state.feed_parser = FeedParser()
    if state.fetcher is None:
        state.fetcher = Fetcher(
            timeout=config.FETCH_TIMEOUT,
            user_agent=config.USER_AGENT,
            block_private_networks=config.BLOCK_PRIVATE_NETWORKS,
        )
    if state.ingestion is None:
        state.ingestion = IngestionPipeline(state.db, state.fetcher, state.feed_parser)

    yield

    # Shutdown
    if owns_db and state.db:
        state.db.close()


app = FastAPI(
    title="Feed Reader API",
    version=__version__,
    lifespan=lifespan
)


@app.exception_handler(FeedKeeperError)
async def feedkeeper_error_handler(request: Request, exc: FeedKeeperError) -> JSONResponse:
    """Render a classified error as JSON, mirrored into the X-Error header."""
    payload = ErrorResponse(error=exc.error, detail=exc.detail)
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed ({exc.error}): {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=payload.model_dump(),
        headers={ERROR_HEADER: json.dumps(payload.model_dump())},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed path or query parameters are bad input like any other."""
    detail = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return await feedkeeper_error_handler(request, BadInput(detail or "Invalid request"))


# Include routers
app.include_router(misc_router)
app.include_router(feeds_router)
app.include_router(entries_router)


def main():
    """Run the API with uvicorn on the configured port."""
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=config.PORT, log_level=config.LOG_LEVEL.lower())
