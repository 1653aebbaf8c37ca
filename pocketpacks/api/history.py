"""
Recently opened packs and the three-slot selector.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from pocketpacks.api.dependencies import get_registry
from pocketpacks.api.schemas import DisplayView
from pocketpacks.services.collection_service import CollectionService
from pocketpacks.services.session_registry import SessionRegistry

router = APIRouter(prefix="/history", tags=["history"])


class SelectSetRequest(BaseModel):
    set_code: str = Field(..., min_length=1, examples=["BLB"])


class HistoryResponse(BaseModel):
    """Recent sets (most recent first), the active set and its display."""

    save_id: str
    recent_packs: list[str] = Field(default_factory=list)
    active_set: str | None = None
    display: DisplayView | None = None


def _history_response(save_id: str, service: CollectionService) -> HistoryResponse:
    slots = service.display()
    return HistoryResponse(
        save_id=save_id,
        recent_packs=service.history.to_list(),
        active_set=slots.center if slots else None,
        display=DisplayView.from_slots(slots) if slots else None,
    )


@router.get("/{save_id}", response_model=HistoryResponse)
async def get_history(
    save_id: str,
    registry: Annotated[SessionRegistry, Depends(get_registry)],
) -> HistoryResponse:
    """Recent sets and the current selector display."""
    service = await registry.get(save_id)
    return _history_response(save_id, service)


@router.post("/{save_id}/select", response_model=HistoryResponse)
async def select_set(
    save_id: str,
    request: SelectSetRequest,
    registry: Annotated[SessionRegistry, Depends(get_registry)],
) -> HistoryResponse:
    """
    Make a set the active selection.

    Only the display changes; the recent-packs history is untouched.
    """
    service = await registry.get(save_id)
    service.select_set(request.set_code)
    return _history_response(save_id, service)
