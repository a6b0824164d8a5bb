"""Favorite-toggle synchronization against the property service."""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, Protocol

from ..core.errors import NetworkFailure

logger = logging.getLogger(__name__)


class FavoritesBackend(Protocol):
    async def toggle_favorite(self, user_id: str, property_id: str) -> bool: ...


class FavoriteToggler:
    """Issue toggles and report the membership the server confirmed.

    Toggles for the same user and property are serialized; different
    properties proceed concurrently.
    """

    def __init__(self, backend: FavoritesBackend) -> None:
        self._backend = backend
        self._locks: Dict[tuple[str, str], asyncio.Lock] = {}
        self._pending: Dict[tuple[str, str], int] = {}

    def is_pending(self, user_id: str, property_id: str) -> bool:
        return self._pending.get((user_id, property_id), 0) > 0

    async def toggle(self, user_id: str, property_id: str, current: bool) -> bool:
        """Return the confirmed membership, or raise and leave ``current`` authoritative."""

        key = (user_id, property_id)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._pending[key] = self._pending.get(key, 0) + 1
        try:
            async with lock:
                try:
                    confirmed = await self._backend.toggle_favorite(user_id, property_id)
                except NetworkFailure:
                    logger.warning(
                        "Favorite toggle failed for user=%s property=%s; keeping %s",
                        user_id,
                        property_id,
                        current,
                    )
                    raise
                if confirmed == current:
                    logger.info(
                        "Favorite toggle for property=%s confirmed unchanged membership %s",
                        property_id,
                        confirmed,
                    )
                return confirmed
        finally:
            remaining = self._pending[key] - 1
            if remaining:
                self._pending[key] = remaining
            else:
                self._pending.pop(key, None)
                if not lock.locked():
                    self._locks.pop(key, None)
