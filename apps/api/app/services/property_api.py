"""Client for the REST property service (list, detail, search, favorites)."""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Mapping

import httpx
from pydantic import ValidationError

from ..core.config import settings
from ..core.errors import NetworkFailure, NotFound
from ..schemas.properties import (
    FavoriteToggleEnvelope,
    PropertyEnvelope,
    PropertyListEnvelope,
    PropertyRecord,
)

logger = logging.getLogger(__name__)


class PropertyServiceClient:
    """Thin async wrapper over the property service endpoints.

    A fresh ``httpx.AsyncClient`` is opened per call; ``transport`` lets tests
    substitute an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def list_properties(self, filters: Mapping[str, Any] | None = None) -> list[PropertyRecord]:
        params = {key: str(value) for key, value in (filters or {}).items() if value is not None}
        payload = await self._request("GET", "/properties", params=params)
        return self._parse_list(payload, "properties")

    async def get_property(self, property_id: str) -> PropertyRecord:
        try:
            payload = await self._request("GET", f"/properties/{property_id}")
        except NetworkFailure as exc:
            if exc.status_code == 404:
                raise NotFound("Property not found") from exc
            raise

        envelope = self._validate(PropertyEnvelope, payload, "property")
        if not envelope.success or envelope.data is None:
            raise NotFound("Property not found")
        return envelope.data

    async def search(self, query: str) -> list[PropertyRecord]:
        payload = await self._request("GET", "/search", params={"q": query})
        return self._parse_list(payload, "search")

    async def get_favorites(self, user_id: str) -> list[PropertyRecord]:
        payload = await self._request("GET", f"/favorites/{user_id}")
        return self._parse_list(payload, "favorites")

    async def toggle_favorite(self, user_id: str, property_id: str) -> bool:
        """Flip membership upstream and return the server-confirmed value."""

        payload = await self._request(
            "POST",
            "/favorites",
            json={"userId": user_id, "propertyId": property_id},
        )
        envelope = self._validate(FavoriteToggleEnvelope, payload, "favorite toggle")
        if not envelope.success:
            raise NetworkFailure("Favorite toggle was not confirmed")
        return envelope.is_favorite

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self._base_url}{path}"
        logger.debug("Property service request %s %s", method, url)
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Property service unreachable: %s %s (%s)", method, url, exc)
            raise NetworkFailure(f"Property service unreachable: {exc}") from exc

        if not response.is_success:
            logger.warning("Property service returned %s for %s %s", response.status_code, method, url)
            raise NetworkFailure(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise NetworkFailure("Property service returned invalid JSON") from exc

    def _parse_list(self, payload: Any, what: str) -> list[PropertyRecord]:
        envelope = self._validate(PropertyListEnvelope, payload, what)
        if not envelope.success:
            raise NetworkFailure(f"Property service reported failure loading {what}")
        return envelope.data

    @staticmethod
    def _validate(model: type, payload: Any, what: str) -> Any:
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            logger.error("Malformed %s payload from property service: %s", what, exc)
            raise NetworkFailure(f"Malformed {what} response") from exc


@lru_cache
def get_property_client() -> PropertyServiceClient:
    """FastAPI dependency returning the shared property service client."""

    return PropertyServiceClient(settings.property_api_base_url, timeout=settings.property_api_timeout)
