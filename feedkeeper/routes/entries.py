"""
Entry routes: detail and update actions.
"""

from typing import Annotated

from fastapi import APIRouter, Query
from fastapi.responses import PlainTextResponse

from ..database import EntryUpdateAction
from ..schemas import EntryDetailResponse
from ..services import EntryServiceDep

router = APIRouter(prefix="/entries", tags=["entries"])


@router.get("/{entry_id}")
async def get_entry(
    entry_id: int,
    service: EntryServiceDep,
) -> EntryDetailResponse:
    """Get single entry with sanitized content."""
    return EntryDetailResponse.from_view(service.show(entry_id))


@router.put("/{entry_id}", response_class=PlainTextResponse)
async def update_entry(
    entry_id: int,
    service: EntryServiceDep,
    action: Annotated[str | None, Query()] = None,
) -> PlainTextResponse:
    """
    Apply an update action.

    Returns a short token: "ok" for refresh, or for toggle_read_unread the
    label of the next available action ("Mark read" / "Mark unread").
    """
    token = service.apply_action(entry_id, EntryUpdateAction.from_token(action))
    return PlainTextResponse(token)
