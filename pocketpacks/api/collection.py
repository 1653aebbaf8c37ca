"""
Collection API endpoints.

Views of a save's ledger, manual card additions and the explicit
destructive clears.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from pocketpacks.api.dependencies import get_catalog, get_registry
from pocketpacks.api.schemas import CardView
from pocketpacks.services.catalog import CatalogRegistry
from pocketpacks.services.collection_filter import CollectionFilter, filter_records
from pocketpacks.services.collection_stats import Progress, compute_set_stats
from pocketpacks.services.session_registry import SessionRegistry

router = APIRouter(prefix="/collection", tags=["collection"])


class SetCollectionResponse(BaseModel):
    """Owned variants of one set, ordered by collector number."""

    save_id: str
    set_code: str
    cards: list[CardView] = Field(default_factory=list)
    total_collected: int = Field(default=0, description="Every copy of every variant")
    unique_regular_names: int = Field(default=0, description="Distinct regular card names owned")


class ProgressView(BaseModel):
    owned: int
    total: int
    percentage: int

    @classmethod
    def from_progress(cls, progress: Progress) -> "ProgressView":
        return cls(owned=progress.owned, total=progress.total, percentage=progress.percentage)


class CollectionStatsResponse(BaseModel):
    """Completion statistics for one set."""

    save_id: str
    set_code: str
    by_rarity: dict[str, ProgressView] = Field(
        default_factory=dict,
        description="Regular cards owned per rarity (common, uncommon, rare, mythic)",
    )
    full_art: ProgressView
    spotlight: ProgressView
    masterpiece_owned: int = 0
    total_collected: int = 0
    unique_cards: int = 0


class AddCardRequest(BaseModel):
    collector_number: str = Field(..., min_length=1)


class AddCardResponse(BaseModel):
    save_id: str
    set_code: str
    card: CardView


class ClearResponse(BaseModel):
    """Response model for destructive clears."""

    save_id: str
    set_code: str | None = None
    cleared: bool
    message: str = ""


@router.get("/{save_id}/{set_code}", response_model=SetCollectionResponse)
async def get_set_collection(
    save_id: str,
    set_code: str,
    registry: Annotated[SessionRegistry, Depends(get_registry)],
    view: Annotated[CollectionFilter, Query(alias="filter")] = CollectionFilter.ALL,
) -> SetCollectionResponse:
    """
    Owned cards for a set, sorted by numeric collector number.

    `filter` narrows the card list; the totals always cover the whole set.
    """
    service = await registry.get(save_id)
    ledger = service.ledger

    return SetCollectionResponse(
        save_id=save_id,
        set_code=set_code,
        cards=[
            CardView.from_record(key, record)
            for key, record in filter_records(ledger, set_code, view)
        ],
        total_collected=ledger.aggregate_total_count(set_code),
        unique_regular_names=ledger.aggregate_unique_count(
            set_code, lambda record: record.is_regular
        ),
    )


@router.get("/{save_id}/{set_code}/stats", response_model=CollectionStatsResponse)
async def get_set_stats(
    save_id: str,
    set_code: str,
    registry: Annotated[SessionRegistry, Depends(get_registry)],
    catalog: Annotated[CatalogRegistry, Depends(get_catalog)],
) -> CollectionStatsResponse:
    """
    Completion statistics for a set.

    Totals come from the registered catalog; if the set is not loaded
    they are reported as 0.
    """
    service = await registry.get(save_id)
    pools = catalog.get(set_code) if set_code in catalog else None
    stats = compute_set_stats(service.ledger, set_code, pools)

    return CollectionStatsResponse(
        save_id=save_id,
        set_code=set_code,
        by_rarity={
            rarity: ProgressView.from_progress(progress)
            for rarity, progress in stats.by_rarity.items()
        },
        full_art=ProgressView.from_progress(stats.full_art),
        spotlight=ProgressView.from_progress(stats.spotlight),
        masterpiece_owned=stats.masterpiece_owned,
        total_collected=stats.total_collected,
        unique_cards=stats.unique_cards,
    )


@router.post(
    "/{save_id}/{set_code}/cards",
    response_model=AddCardResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_card(
    save_id: str,
    set_code: str,
    request: AddCardRequest,
    registry: Annotated[SessionRegistry, Depends(get_registry)],
    catalog: Annotated[CatalogRegistry, Depends(get_catalog)],
) -> AddCardResponse:
    """
    Add one regular copy of a card by collector number.

    The card must be in the set's main pool. Points and history are not
    affected.
    """
    pools = catalog.get(set_code)
    service = await registry.get(save_id)
    key, record = service.add_card(set_code, pools, request.collector_number)
    await registry.save_if_dirty(save_id)

    return AddCardResponse(
        save_id=save_id, set_code=set_code, card=CardView.from_record(key, record)
    )


@router.delete("/{save_id}/{set_code}", response_model=ClearResponse)
async def clear_set_collection(
    save_id: str,
    set_code: str,
    registry: Annotated[SessionRegistry, Depends(get_registry)],
) -> ClearResponse:
    """
    Remove every owned card of one set.

    This is an explicit, irreversible operation. Points and history are
    not affected.
    """
    service = await registry.get(save_id)
    cleared = service.clear_set(set_code)
    await registry.save_if_dirty(save_id)

    message = f"Cleared all cards from {set_code}." if cleared else "No cards to clear."
    return ClearResponse(save_id=save_id, set_code=set_code, cleared=cleared, message=message)


@router.delete("/{save_id}", response_model=ClearResponse)
async def clear_collection(
    save_id: str,
    registry: Annotated[SessionRegistry, Depends(get_registry)],
) -> ClearResponse:
    """Remove every owned card in every set."""
    service = await registry.get(save_id)
    service.clear_all()
    await registry.save_if_dirty(save_id)

    return ClearResponse(save_id=save_id, cleared=True, message="Cleared all cards.")
