"""Tests for the client session state machine and registry."""
from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from app.core.errors import AuthFailure, NetworkFailure, ValidationFailure
from app.schemas.auth import AuthUser, SessionStatus, UserProfile
from app.services import session as session_module
from app.services.session import SessionManager, SessionRegistry

USER = AuthUser(uid="uid-1", email="jane@example.com", id_token="token-1")
PROFILE = UserProfile(uid="uid-1", email="jane@example.com", display_name="Jane Doe")


def make_auth() -> AsyncMock:
    auth = AsyncMock()
    auth.sign_in.return_value = USER
    auth.sign_up.return_value = (USER, PROFILE)
    auth.fetch_profile.return_value = PROFILE
    auth.update_profile.side_effect = lambda user, profile, name, photo: profile.model_copy(
        update={"display_name": name, "photo_url": photo}
    )
    return auth


def record_states(manager: SessionManager) -> list[SessionStatus]:
    seen: list[SessionStatus] = []

    async def listener(session) -> None:
        seen.append(session.status)

    manager.subscribe(listener)
    return seen


@pytest.mark.asyncio
async def test_sign_in_transitions_through_authenticating():
    manager = SessionManager(make_auth())
    seen = record_states(manager)

    session = await manager.sign_in("jane@example.com", "secret1")

    assert seen == [SessionStatus.AUTHENTICATING, SessionStatus.SIGNED_IN]
    assert session.user == USER
    assert session.profile == PROFILE


@pytest.mark.asyncio
async def test_failed_sign_in_returns_to_signed_out_with_error():
    auth = make_auth()
    auth.sign_in.side_effect = AuthFailure("Invalid email or password")
    manager = SessionManager(auth)
    seen = record_states(manager)

    with pytest.raises(AuthFailure):
        await manager.sign_in("jane@example.com", "wrong-pass")

    assert seen == [SessionStatus.AUTHENTICATING, SessionStatus.SIGNED_OUT]
    assert manager.session.error == "Invalid email or password"


@pytest.mark.asyncio
async def test_invalid_input_never_reaches_auth_service():
    auth = make_auth()
    manager = SessionManager(auth)
    seen = record_states(manager)

    with pytest.raises(ValidationFailure) as excinfo:
        await manager.sign_in("jane", "123")

    assert set(excinfo.value.errors) == {"email", "password"}
    auth.sign_in.assert_not_awaited()
    assert seen == []
    assert manager.session.status is SessionStatus.SIGNED_OUT


@pytest.mark.asyncio
async def test_profile_fetch_failure_still_signs_in(monkeypatch):
    auth = make_auth()
    auth.fetch_profile.side_effect = NetworkFailure("down", status_code=503)
    logged: list[str] = []
    monkeypatch.setattr(session_module.logger, "error", lambda message, *args: logged.append(message % args))

    session = await SessionManager(auth).sign_in("jane@example.com", "secret1")

    assert session.status is SessionStatus.SIGNED_IN
    assert session.profile is None
    assert logged and "uid-1" in logged[0]


@pytest.mark.asyncio
async def test_sign_up_publishes_new_profile():
    auth = make_auth()
    manager = SessionManager(auth)

    session = await manager.sign_up(" jane@example.com ", "secret1", " Jane Doe ")

    auth.sign_up.assert_awaited_once_with("jane@example.com", "secret1", "Jane Doe")
    assert session.status is SessionStatus.SIGNED_IN
    assert session.profile.display_name == "Jane Doe"


@pytest.mark.asyncio
async def test_sign_out_always_ends_signed_out():
    manager = SessionManager(make_auth())
    await manager.sign_in("jane@example.com", "secret1")

    session = await manager.sign_out()

    assert session.status is SessionStatus.SIGNED_OUT
    assert session.user is None
    assert (await manager.sign_out()).status is SessionStatus.SIGNED_OUT


@pytest.mark.asyncio
async def test_update_profile_requires_signed_in_session():
    manager = SessionManager(make_auth())

    with pytest.raises(AuthFailure):
        await manager.update_profile("Jane")


@pytest.mark.asyncio
async def test_update_profile_validates_and_publishes():
    auth = make_auth()
    manager = SessionManager(auth)
    await manager.sign_in("jane@example.com", "secret1")

    with pytest.raises(ValidationFailure):
        await manager.update_profile("  ")
    auth.update_profile.assert_not_called()

    session = await manager.update_profile("Jane D.", "https://img.test/me.png")

    assert session.status is SessionStatus.SIGNED_IN
    assert session.profile.display_name == "Jane D."
    assert session.profile.photo_url == "https://img.test/me.png"


@pytest.mark.asyncio
async def test_update_queued_behind_sign_out_is_rejected():
    auth = make_auth()
    release = asyncio.Event()

    async def gated_update(user, profile, name, photo):
        await release.wait()
        return profile.model_copy(update={"display_name": name})

    auth.update_profile.side_effect = gated_update
    manager = SessionManager(auth)
    await manager.sign_in("jane@example.com", "secret1")

    first = asyncio.create_task(manager.update_profile("Bob"))
    await asyncio.sleep(0)
    sign_out = asyncio.create_task(manager.sign_out())
    second = asyncio.create_task(manager.update_profile("Carl"))
    await asyncio.sleep(0)

    release.set()
    await first
    await sign_out
    with pytest.raises(AuthFailure):
        await second

    assert manager.session.status is SessionStatus.SIGNED_OUT
    assert manager.session.user is None
    assert auth.update_profile.await_count == 1


@pytest.mark.asyncio
async def test_failing_listener_does_not_block_others():
    manager = SessionManager(make_auth())
    received: list[SessionStatus] = []

    async def broken(session) -> None:
        raise RuntimeError("listener bug")

    async def healthy(session) -> None:
        received.append(session.status)

    manager.subscribe(broken)
    unsubscribe = manager.subscribe(healthy)

    await manager.sign_in("jane@example.com", "secret1")
    unsubscribe()
    await manager.sign_out()

    assert received == [SessionStatus.AUTHENTICATING, SessionStatus.SIGNED_IN]


def test_registry_creates_and_expires_sessions(monkeypatch):
    now = [1_000.0]
    monkeypatch.setattr(session_module.time, "time", lambda: now[0])
    registry = SessionRegistry(make_auth(), ttl_seconds=60)

    session_id, manager = registry.create()
    assert registry.get(session_id) is manager

    now[0] += 30
    assert registry.get(session_id) is manager

    now[0] += 61
    assert registry.get(session_id) is None


def test_registry_discard():
    registry = SessionRegistry(make_auth())
    session_id, _ = registry.create()

    registry.discard(session_id)

    assert registry.get(session_id) is None
