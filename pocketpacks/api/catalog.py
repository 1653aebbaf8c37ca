"""
Catalog API endpoints.

Registers the resolved card pools for a set. Fetching and paginating the
external catalog happens upstream; this endpoint only accepts the
result.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from pocketpacks.api.dependencies import get_catalog
from pocketpacks.models.card import CardPools
from pocketpacks.parsers.scryfall import build_pools
from pocketpacks.services.catalog import CatalogRegistry

router = APIRouter(prefix="/catalog", tags=["catalog"])


class CatalogUploadRequest(BaseModel):
    """Raw Scryfall card objects for each pool of a set."""

    main: list[dict[str, Any]] = Field(
        ...,
        description="Main set cards, drawn by rarity",
    )
    full_art: list[dict[str, Any]] = Field(default_factory=list)
    masterpiece: list[dict[str, Any]] = Field(default_factory=list)
    spotlight: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Main set cards that are also story spotlights",
    )


class CatalogSummary(BaseModel):
    """Pool sizes for a registered set."""

    set_code: str
    main: int
    full_art: int
    masterpiece: int
    spotlight: int


def _summary(set_code: str, pools: CardPools) -> CatalogSummary:
    return CatalogSummary(
        set_code=set_code,
        main=len(pools.main),
        full_art=len(pools.full_art),
        masterpiece=len(pools.masterpiece),
        spotlight=len(pools.spotlight),
    )


@router.put("/{set_code}", response_model=CatalogSummary)
async def register_set(
    set_code: str,
    request: CatalogUploadRequest,
    catalog: Annotated[CatalogRegistry, Depends(get_catalog)],
) -> CatalogSummary:
    """
    Register (or replace) a set's card pools.

    Every card is normalized here; cards without an id or name are
    rejected so the draw engine never sees them.
    """
    try:
        pools = build_pools(request.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    catalog.register(set_code, pools)
    return _summary(set_code, pools)


@router.get("/{set_code}", response_model=CatalogSummary)
async def get_set(
    set_code: str,
    catalog: Annotated[CatalogRegistry, Depends(get_catalog)],
) -> CatalogSummary:
    """Pool sizes for a registered set."""
    if set_code not in catalog:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Set '{set_code}' is not loaded",
        )
    return _summary(set_code, catalog.get(set_code))
