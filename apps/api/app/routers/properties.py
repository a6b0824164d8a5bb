"""Property service endpoints: listings, home feed, detail, search and favorites."""
from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, Depends, Query

from ..core.config import settings
from ..core.errors import NetworkFailure
from ..schemas import properties as schemas
from ..services import engine
from ..services.favorites import FavoriteToggler
from ..services.property_api import PropertyServiceClient, get_property_client
from ..services.screen import ADDED_MESSAGE, REMOVED_MESSAGE, TOGGLE_FAILED_MESSAGE

router = APIRouter()


@lru_cache
def _toggler_for(client: PropertyServiceClient) -> FavoriteToggler:
    return FavoriteToggler(client)


def get_favorite_toggler(client: PropertyServiceClient = Depends(get_property_client)) -> FavoriteToggler:
    """One toggler per client so same-property toggles share their lock."""

    return _toggler_for(client)


@router.get("/properties", response_model=schemas.PropertyListResponse)
async def list_properties(
    search: str = "",
    property_type: str = Query(default=schemas.ALL, alias="type"),
    city: str = schemas.ALL,
    min_bedrooms: int = Query(default=0, ge=0),
    min_bathrooms: int = Query(default=0, ge=0),
    size: schemas.SizeBucket = schemas.SizeBucket.ALL,
    sort: schemas.SortKey = schemas.SortKey.NEWEST,
    client: PropertyServiceClient = Depends(get_property_client),
) -> schemas.PropertyListResponse:
    """Fetch the collection and return it filtered and sorted."""

    records = await client.list_properties()
    criteria = schemas.FilterCriteria(
        search=search,
        property_type=property_type,
        city=city,
        min_bedrooms=min_bedrooms,
        min_bathrooms=min_bathrooms,
        size=size,
    )
    items = engine.compose(records, criteria, sort)
    return schemas.PropertyListResponse(
        total=len(items),
        items=items,
        cities=engine.distinct_values(records, "city"),
        property_types=engine.distinct_values(records, "property_type"),
    )


@router.get("/properties/home", response_model=schemas.HomeFeedResponse)
async def home_feed(
    featured: int = Query(default=settings.featured_window, ge=0, le=50),
    recommended: int = Query(default=settings.recommended_window, ge=0, le=50),
    client: PropertyServiceClient = Depends(get_property_client),
) -> schemas.HomeFeedResponse:
    """Newest listings split into disjoint featured and recommended carousels."""

    records = engine.sort_properties(engine.unique_by_id(await client.list_properties()), schemas.SortKey.NEWEST)
    featured_items, recommended_items = engine.split_windows(records, featured, recommended)
    return schemas.HomeFeedResponse(featured=featured_items, recommended=recommended_items)


@router.get("/properties/{property_id}", response_model=schemas.PropertyRecord)
async def get_property(
    property_id: str,
    client: PropertyServiceClient = Depends(get_property_client),
) -> schemas.PropertyRecord:
    return await client.get_property(property_id)


@router.get("/search", response_model=schemas.PropertyListResponse)
async def search(
    q: str = Query(min_length=1),
    sort: schemas.SortKey | None = None,
    client: PropertyServiceClient = Depends(get_property_client),
) -> schemas.PropertyListResponse:
    items = await client.search(q)
    if sort is not None:
        items = engine.sort_properties(items, sort)
    return schemas.PropertyListResponse(total=len(items), items=items)


@router.get("/favorites/{user_id}", response_model=schemas.FavoritesResponse)
async def list_favorites(
    user_id: str,
    client: PropertyServiceClient = Depends(get_property_client),
) -> schemas.FavoritesResponse:
    records = await client.get_favorites(user_id)
    return schemas.FavoritesResponse(
        user_id=user_id,
        property_ids=sorted(engine.favorite_ids(records)),
        items=records,
    )


@router.post("/favorites", response_model=schemas.ToggleFavoriteResponse)
async def toggle_favorite(
    payload: schemas.ToggleFavoriteRequest,
    toggler: FavoriteToggler = Depends(get_favorite_toggler),
) -> schemas.ToggleFavoriteResponse:
    """Flip membership upstream and echo the confirmed value."""

    try:
        confirmed = await toggler.toggle(payload.user_id, payload.property_id, payload.is_favorite)
    except NetworkFailure as exc:
        raise NetworkFailure(TOGGLE_FAILED_MESSAGE, status_code=exc.status_code) from exc

    return schemas.ToggleFavoriteResponse(
        property_id=payload.property_id,
        is_favorite=confirmed,
        message=ADDED_MESSAGE if confirmed else REMOVED_MESSAGE,
    )
