"""
Feed routes: index, subscription, feed detail.
"""

from typing import Annotated

from fastapi import APIRouter, Header, Query, Response, status

from ..database import EntriesVisibility
from ..exceptions import BadInput
from ..schemas import FeedDetailResponse, FeedResponse, FeedSummaryResponse
from ..services import EntryServiceDep, FeedServiceDep

router = APIRouter(prefix="/feeds", tags=["feeds"])

# Thin clients deliver the subscription URL through a prompt dialog,
# which arrives as this header rather than a request body.
PROMPT_HEADER = "HX-Prompt"
REDIRECT_HEADER = "HX-Redirect"


@router.get("")
async def list_feeds(service: FeedServiceDep) -> list[FeedSummaryResponse]:
    """List all subscribed feeds with unread/read counts."""
    return [FeedSummaryResponse.from_db(f) for f in service.list_feeds()]


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_feed(
    response: Response,
    service: FeedServiceDep,
    hx_prompt: Annotated[str | None, Header(alias=PROMPT_HEADER)] = None,
) -> FeedResponse:
    """
    Subscribe to a new feed.

    On success the client is pointed at the new feed via HX-Redirect.
    Failures are rendered by the error handler, which also sets X-Error.
    """
    if hx_prompt is None:
        raise BadInput(f"Missing {PROMPT_HEADER} header with the feed URL")

    feed = await service.subscribe(hx_prompt)
    response.headers[REDIRECT_HEADER] = f"/feeds/{feed.id}"
    return FeedResponse.from_db(feed)


@router.get("/{feed_id}")
async def get_feed(
    feed_id: int,
    service: EntryServiceDep,
    entries_visibility: Annotated[str | None, Query()] = None,
) -> FeedDetailResponse:
    """Show a feed with its entries, unread only by default."""
    visibility = EntriesVisibility.from_token(entries_visibility)
    feed, entries = service.list_entries(feed_id, visibility)
    return FeedDetailResponse.from_db(feed, visibility, entries)
