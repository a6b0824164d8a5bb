"""Discovery feed endpoints backed by the secondary listings provider."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ..core.config import settings
from ..schemas import discovery as schemas
from ..services.discovery import DiscoveryClient, get_discovery_client

router = APIRouter()


@router.get("/properties", response_model=schemas.DiscoveryPage)
async def list_properties(
    location_ids: list[str] | None = Query(default=None),
    purpose: str = Query(default="for-rent", pattern="^for-(rent|sale)$"),
    page: int = Query(default=1, ge=0),
    page_size: int = Query(default=20, ge=1, le=100),
    sort: str = "date-desc",
    client: DiscoveryClient = Depends(get_discovery_client),
) -> schemas.DiscoveryPage:
    return await client.list_properties(
        location_ids=location_ids,
        purpose=purpose,
        page=page,
        page_size=page_size,
        sort=sort,
    )


@router.get("/home", response_model=schemas.DiscoveryHomeResponse)
async def home_feed(
    featured: int = Query(default=settings.featured_window, ge=0, le=50),
    recommended: int = Query(default=settings.recommended_window, ge=0, le=50),
    client: DiscoveryClient = Depends(get_discovery_client),
) -> schemas.DiscoveryHomeResponse:
    """Featured and recommended carousels; never fails, falls back to sample data."""

    return await client.home_feed(featured, recommended)


@router.get("/properties/{external_id}", response_model=schemas.DiscoveryProperty)
async def get_property(
    external_id: str,
    client: DiscoveryClient = Depends(get_discovery_client),
) -> schemas.DiscoveryProperty:
    return await client.get_details(external_id)


@router.post("/search", response_model=schemas.DiscoveryPage)
async def search(
    filters: schemas.DiscoverySearchFilters,
    client: DiscoveryClient = Depends(get_discovery_client),
) -> schemas.DiscoveryPage:
    return await client.search(filters)


@router.get("/locations", response_model=schemas.LocationSuggestionResponse)
async def locations(
    query: str = Query(min_length=1),
    client: DiscoveryClient = Depends(get_discovery_client),
) -> schemas.LocationSuggestionResponse:
    """Location autocomplete for the search screen."""

    return schemas.LocationSuggestionResponse(hits=await client.autocomplete(query))
