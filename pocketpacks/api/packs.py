"""
Pack API endpoints.

Opening a pack returns the response envelope: success with the drawn
cards, or a refusal when the save cannot pay for the pack.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from pocketpacks.api.dependencies import get_catalog, get_registry
from pocketpacks.api.schemas import SlotView
from pocketpacks.models.failure import ApiResponse, FailureKind, create_refusal, create_success
from pocketpacks.services.catalog import CatalogRegistry
from pocketpacks.services.session_registry import SessionRegistry

router = APIRouter(prefix="/packs", tags=["packs"])


class OpenPackRequest(BaseModel):
    """Request to open one pack."""

    set_code: str = Field(..., min_length=1, examples=["BLB"])
    free_mode: bool = Field(
        default=False,
        description="Open without spending points",
    )


class PackResponse(BaseModel):
    """An opened pack, slots in draw order."""

    save_id: str
    set_code: str
    slots: list[SlotView] = Field(default_factory=list)
    is_god_pack: bool = False
    dropped_slots: int = 0
    points_spent: int = 0
    points_remaining: int = 0
    persisted: bool = Field(
        default=True,
        description="False if the save could not be written; state is kept in memory",
    )


class PointsResponse(BaseModel):
    """Point balance and regeneration countdown."""

    save_id: str
    points: int
    pack_cost: int
    can_open: bool
    ms_until_next_point: int


@router.post("/{save_id}/open", response_model=ApiResponse[PackResponse])
async def open_pack(
    save_id: str,
    request: OpenPackRequest,
    registry: Annotated[SessionRegistry, Depends(get_registry)],
    catalog: Annotated[CatalogRegistry, Depends(get_catalog)],
) -> ApiResponse[PackResponse]:
    """
    Open a pack for a set.

    Refused (no state change) when not in free mode and the save has
    fewer points than the pack costs.
    """
    pools = catalog.get(request.set_code)
    service = await registry.get(save_id)

    outcome = service.open_pack(request.set_code, pools, free_mode=request.free_mode)
    if outcome.result is None:
        return create_refusal(
            outcome.refusal or FailureKind.INSUFFICIENT_FUNDS,
            outcome.refusal_detail or "pack cannot be opened",
        )

    persisted = await registry.save_if_dirty(save_id)
    result = outcome.result
    return create_success(
        PackResponse(
            save_id=save_id,
            set_code=result.set_code,
            slots=[SlotView.from_slot(slot) for slot in result.slots],
            is_god_pack=result.is_god_pack,
            dropped_slots=result.dropped_slots,
            points_spent=result.points_spent,
            points_remaining=service.points.points,
            persisted=persisted,
        )
    )


@router.get("/{save_id}/points", response_model=PointsResponse)
async def get_points(
    save_id: str,
    registry: Annotated[SessionRegistry, Depends(get_registry)],
) -> PointsResponse:
    """Current points, after awarding any elapsed regeneration."""
    service = await registry.get(save_id)
    if service.regenerate():
        await registry.save_if_dirty(save_id)

    return PointsResponse(
        save_id=save_id,
        points=service.points.points,
        pack_cost=service.composer.rules.cost,
        can_open=service.can_open(),
        ms_until_next_point=service.ms_until_next_point(),
    )
