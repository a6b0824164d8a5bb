"""Client for the secondary listings provider backing the discovery feed.

The provider is rate-limited and best effort: any failure, including HTTP 429,
is logged and answered from the bundled sample catalog instead of surfacing an
error to the user.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Sequence

import httpx
from pydantic import ValidationError

from ..core.config import settings
from ..core.errors import NetworkFailure, NotFound, RateLimited
from ..data.listings import SALE_PRICE_MULTIPLIER, SAMPLE_LOCATIONS, SAMPLE_PROPERTIES
from ..schemas import discovery as schemas
from ..schemas.properties import SortKey
from . import engine

logger = logging.getLogger(__name__)

_SORT_VALUES = {key.value for key in SortKey}


class DiscoveryClient:
    """Read-only access to the provider's list, detail, search and autocomplete endpoints."""

    def __init__(
        self,
        base_url: str,
        *,
        api_key: str,
        api_host: str,
        default_location_ids: Sequence[str] = ("5002", "6020"),
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._headers = {"X-RapidAPI-Host": api_host, "X-RapidAPI-Key": api_key}
        self._default_location_ids = list(default_location_ids)
        self._timeout = timeout
        self._transport = transport

    async def list_properties(
        self,
        *,
        location_ids: Sequence[str] | None = None,
        purpose: str = "for-rent",
        page: int = 1,
        page_size: int = 20,
        sort: str | None = None,
    ) -> schemas.DiscoveryPage:
        filters = schemas.DiscoverySearchFilters(
            location_ids=list(location_ids) if location_ids else None,
            purpose=purpose,
            page=page,
            page_size=page_size,
            sort=sort or "date-desc",
        )
        return await self.search(filters)

    async def search(self, filters: schemas.DiscoverySearchFilters) -> schemas.DiscoveryPage:
        location_ids = filters.location_ids or self._default_location_ids
        params: dict[str, Any] = {
            "locationExternalIDs": ",".join(location_ids),
            "purpose": filters.purpose,
            "page": filters.page,
            "hitsPerPage": filters.page_size,
            "sort": filters.sort,
            "lang": "en",
        }
        optional = {
            "priceMin": filters.min_price,
            "priceMax": filters.max_price,
            "roomsMin": filters.rooms_min,
            "roomsMax": filters.rooms_max,
            "bathsMin": filters.baths_min,
            "bathsMax": filters.baths_max,
            "areaMin": filters.area_min,
            "areaMax": filters.area_max,
            "categoryExternalID": filters.category_external_id,
        }
        params.update({key: value for key, value in optional.items() if value})

        payload = await self._fetch_or_none("/properties/list", params)
        if payload is not None:
            try:
                return schemas.DiscoveryPage.model_validate(payload)
            except ValidationError as exc:
                logger.warning("Discovery list payload malformed (%s); using sample data", exc)

        return self._sample_page(filters, location_ids)

    async def get_details(self, external_id: str) -> schemas.DiscoveryProperty:
        payload = await self._fetch_or_none(
            "/properties/detail", {"externalID": external_id, "lang": "en"}
        )
        if payload is not None:
            try:
                return schemas.DiscoveryProperty.model_validate(payload)
            except ValidationError as exc:
                logger.warning("Discovery detail payload malformed (%s); using sample data", exc)

        for hit in _sample_hits("for-rent"):
            if hit.external_id == external_id:
                return hit
        raise NotFound("Property not found")

    async def autocomplete(self, query: str) -> list[schemas.LocationSuggestion]:
        payload = await self._fetch_or_none("/auto-complete", {"query": query, "lang": "en"})
        if payload is not None:
            try:
                return schemas.LocationSuggestionResponse.model_validate(payload).hits
            except ValidationError as exc:
                logger.warning("Discovery autocomplete payload malformed (%s); using sample data", exc)

        needle = query.strip().lower()
        return [
            schemas.LocationSuggestion.model_validate(item)
            for item in SAMPLE_LOCATIONS
            if needle in item["name"].lower()
        ]

    async def home_feed(self, featured_size: int, recommended_size: int) -> schemas.DiscoveryHomeResponse:
        """Featured and recommended carousels cut from a single fetched page."""

        page = await self.list_properties(page_size=max(1, featured_size + recommended_size), sort="date-desc")
        hits = engine.unique_by_id(page.hits)
        featured, recommended = engine.split_windows(hits, featured_size, recommended_size)
        return schemas.DiscoveryHomeResponse(
            featured=featured,
            recommended=recommended,
            from_sample=page.from_sample,
        )

    async def _fetch(self, path: str, params: dict[str, Any]) -> Any:
        url = f"{self._base_url}{path}"
        logger.debug("Discovery request %s params=%s", url, params)
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(url, params=params, headers=self._headers)
        except httpx.HTTPError as exc:
            raise NetworkFailure(f"Discovery provider unreachable: {exc}") from exc

        if response.status_code == 429:
            raise RateLimited("Rate limit exceeded. Using demo data instead.")
        if not response.is_success:
            raise NetworkFailure(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise NetworkFailure("Discovery provider returned invalid JSON") from exc

    async def _fetch_or_none(self, path: str, params: dict[str, Any]) -> Any | None:
        try:
            return await self._fetch(path, params)
        except RateLimited:
            logger.warning("Discovery provider rate limited %s; falling back to sample data", path)
        except NetworkFailure as exc:
            logger.warning("Discovery call %s failed (%s); falling back to sample data", path, exc)
        return None

    def _sample_page(
        self,
        filters: schemas.DiscoverySearchFilters,
        location_ids: Sequence[str],
    ) -> schemas.DiscoveryPage:
        wanted = set(location_ids)
        hits = [
            hit
            for hit in _sample_hits(filters.purpose)
            if not wanted or any(level.external_id in wanted for level in hit.location)
        ]
        hits = [hit for hit in hits if _within_bounds(hit, filters)]
        hits = _sort_sample(hits, filters.sort)[: filters.page_size]
        return schemas.DiscoveryPage(
            hits=hits,
            nb_hits=len(hits),
            page=filters.page,
            nb_pages=1,
            from_sample=True,
        )


def _sample_hits(purpose: str) -> list[schemas.DiscoveryProperty]:
    hits = [schemas.DiscoveryProperty.model_validate(item) for item in SAMPLE_PROPERTIES]
    if purpose == "for-sale":
        return [
            hit.model_copy(
                update={
                    "purpose": "for-sale",
                    "price": hit.price * SALE_PRICE_MULTIPLIER,
                    "rent_frequency": None,
                }
            )
            for hit in hits
        ]
    return [hit for hit in hits if hit.purpose == purpose]


def _within_bounds(hit: schemas.DiscoveryProperty, filters: schemas.DiscoverySearchFilters) -> bool:
    bounds = (
        (hit.price, filters.min_price, filters.max_price),
        (hit.rooms, filters.rooms_min, filters.rooms_max),
        (hit.baths, filters.baths_min, filters.baths_max),
        (hit.area, filters.area_min, filters.area_max),
    )
    for value, lower, upper in bounds:
        if lower and value < lower:
            return False
        if upper and value > upper:
            return False
    return True


def _sort_sample(hits: list[schemas.DiscoveryProperty], sort: str) -> list[schemas.DiscoveryProperty]:
    """Order sample hits with the listing engine when the provider sort has an equivalent."""

    if sort not in _SORT_VALUES:
        return hits
    by_id = {hit.external_id: hit for hit in hits}
    ordered = engine.sort_properties([hit.to_property_record() for hit in hits], SortKey(sort))
    return [by_id[record.id] for record in ordered]


@lru_cache
def get_discovery_client() -> DiscoveryClient:
    """FastAPI dependency returning the shared discovery client."""

    return DiscoveryClient(
        settings.discovery_base_url,
        api_key=settings.discovery_api_key,
        api_host=settings.discovery_api_host,
        default_location_ids=settings.discovery_location_ids,
        timeout=settings.discovery_timeout,
    )
