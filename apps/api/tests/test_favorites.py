"""Tests for favorite toggle synchronization."""
from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from app.core.errors import NetworkFailure
from app.services.favorites import FavoriteToggler


class GatedBackend:
    """Backend that blocks each toggle until released and records call order."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.active = 0
        self.max_active: dict[str, int] = {}
        self.release = asyncio.Event()
        self.membership: dict[str, bool] = {}

    async def toggle_favorite(self, user_id: str, property_id: str) -> bool:
        self.calls.append(property_id)
        self.active += 1
        self.max_active[property_id] = max(self.max_active.get(property_id, 0), self.active)
        await self.release.wait()
        self.active -= 1
        self.membership[property_id] = not self.membership.get(property_id, False)
        return self.membership[property_id]


@pytest.mark.asyncio
async def test_toggle_returns_server_confirmed_value():
    backend = AsyncMock()
    backend.toggle_favorite.return_value = True
    toggler = FavoriteToggler(backend)

    assert await toggler.toggle("user-1", "p-1", current=False) is True
    backend.toggle_favorite.assert_awaited_once_with("user-1", "p-1")


@pytest.mark.asyncio
async def test_failed_toggle_raises_and_clears_pending():
    backend = AsyncMock()
    backend.toggle_favorite.side_effect = NetworkFailure("boom", status_code=500)
    toggler = FavoriteToggler(backend)

    with pytest.raises(NetworkFailure):
        await toggler.toggle("user-1", "p-1", current=False)

    assert not toggler.is_pending("user-1", "p-1")


@pytest.mark.asyncio
async def test_same_property_toggles_are_serialized():
    backend = GatedBackend()
    toggler = FavoriteToggler(backend)

    first = asyncio.create_task(toggler.toggle("user-1", "p-1", current=False))
    second = asyncio.create_task(toggler.toggle("user-1", "p-1", current=True))
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    assert toggler.is_pending("user-1", "p-1")
    assert backend.calls == ["p-1"]

    backend.release.set()
    results = await asyncio.gather(first, second)

    assert results == [True, False]
    assert backend.max_active["p-1"] == 1
    assert not toggler.is_pending("user-1", "p-1")


@pytest.mark.asyncio
async def test_different_properties_run_concurrently():
    backend = GatedBackend()
    toggler = FavoriteToggler(backend)

    tasks = [
        asyncio.create_task(toggler.toggle("user-1", "p-1", current=False)),
        asyncio.create_task(toggler.toggle("user-1", "p-2", current=False)),
    ]
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    assert sorted(backend.calls) == ["p-1", "p-2"]

    backend.release.set()
    assert await asyncio.gather(*tasks) == [True, True]
