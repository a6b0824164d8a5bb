"""Listing screen state: fetch status, criteria, sort key and favorite membership."""
from __future__ import annotations

import enum
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from ..core.errors import ListingError, NetworkFailure
from ..schemas.properties import FilterCriteria, PropertyRecord, SortKey
from . import engine
from .favorites import FavoriteToggler

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[list[PropertyRecord]]]
FavoritesLoader = Callable[[str], Awaitable[list[PropertyRecord]]]

ADDED_MESSAGE = "Added to favorites!"
REMOVED_MESSAGE = "Removed from favorites!"
TOGGLE_FAILED_MESSAGE = "Failed to update favorites. Please try again."


class ScreenStatus(str, enum.Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class ListingScreen:
    """Ephemeral view state for one listing screen.

    ``view()`` is recomputed from the latest fetched records and the current
    criteria on every call. Overlapping loads are not cancelled: whichever
    completes last sets the records.
    """

    def __init__(
        self,
        loader: Loader,
        *,
        toggler: FavoriteToggler | None = None,
        favorites_loader: FavoritesLoader | None = None,
        sort_key: SortKey = SortKey.NEWEST,
    ) -> None:
        self._loader = loader
        self._toggler = toggler
        self._favorites_loader = favorites_loader
        self.status = ScreenStatus.LOADING
        self.error: Optional[ListingError] = None
        self.records: list[PropertyRecord] = []
        self.criteria = FilterCriteria()
        self.sort_key = sort_key
        self.favorites: Dict[str, bool] = {}
        self.notification: Optional[str] = None

    async def load(self) -> ScreenStatus:
        self.status = ScreenStatus.LOADING
        self.error = None
        try:
            records = await self._loader()
        except ListingError as exc:
            logger.warning("Listing load failed: %s", exc.message)
            self.status = ScreenStatus.ERROR
            self.error = exc
            return self.status
        self.records = list(records)
        self.status = ScreenStatus.READY
        return self.status

    async def refresh(self) -> ScreenStatus:
        return await self.load()

    async def retry(self) -> ScreenStatus:
        return await self.load()

    def view(self) -> list[PropertyRecord]:
        return engine.compose(self.records, self.criteria, self.sort_key)

    def windows(self, featured_size: int, recommended_size: int) -> tuple[list[PropertyRecord], list[PropertyRecord]]:
        return engine.split_windows(self.view(), featured_size, recommended_size)

    def set_criteria(self, criteria: FilterCriteria) -> None:
        self.criteria = criteria

    def update_criteria(self, **changes: Any) -> FilterCriteria:
        """Replace individual fields of the current criteria."""

        self.criteria = FilterCriteria.model_validate({**self.criteria.model_dump(), **changes})
        return self.criteria

    def reset_criteria(self) -> None:
        self.criteria = FilterCriteria()

    def set_sort(self, sort_key: SortKey) -> None:
        self.sort_key = SortKey(sort_key)

    def is_favorite(self, property_id: str) -> bool:
        return self.favorites.get(property_id, False)

    def is_pending(self, user_id: str, property_id: str) -> bool:
        return self._toggler is not None and self._toggler.is_pending(user_id, property_id)

    async def load_favorites(self, user_id: str) -> None:
        if self._favorites_loader is None:
            return
        records = await self._favorites_loader(user_id)
        self.favorites = {property_id: True for property_id in engine.favorite_ids(records)}

    async def toggle_favorite(self, user_id: str, property_id: str) -> bool:
        """Apply the server-confirmed membership; on failure keep the old one."""

        if self._toggler is None:
            raise RuntimeError("ListingScreen has no favorite toggler")

        current = self.is_favorite(property_id)
        try:
            confirmed = await self._toggler.toggle(user_id, property_id, current)
        except NetworkFailure:
            self.notification = TOGGLE_FAILED_MESSAGE
            return current

        self.favorites[property_id] = confirmed
        self.notification = ADDED_MESSAGE if confirmed else REMOVED_MESSAGE
        return confirmed
