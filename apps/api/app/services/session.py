"""Explicit client session state with change subscriptions.

Each client gets its own ``SessionManager``; the registry hands them out by
session id and evicts idle ones.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional
from uuid import uuid4

from ..core.errors import AuthFailure, ListingError, NetworkFailure
from ..schemas.auth import Session, SessionStatus, UserProfile
from . import validation
from .auth import AuthClient

logger = logging.getLogger(__name__)

SessionListener = Callable[[Session], Awaitable[None]]


class SessionManager:
    """Drive one session through signed_out -> authenticating -> signed_in."""

    def __init__(self, auth: AuthClient) -> None:
        self._auth = auth
        self._session = Session()
        self._listeners: list[SessionListener] = []
        self._lock = asyncio.Lock()

    @property
    def session(self) -> Session:
        return self._session

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register for session changes; returns a callable that unsubscribes."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def sign_up(self, email: str, password: str, display_name: str) -> Session:
        errors = validation.login_errors(email, password)
        errors.update(validation.display_name_errors(display_name))
        validation.ensure_valid(errors)

        async with self._lock:
            await self._publish(Session(status=SessionStatus.AUTHENTICATING))
            try:
                user, profile = await self._auth.sign_up(email.strip(), password, display_name.strip())
            except ListingError as exc:
                await self._publish(Session(status=SessionStatus.SIGNED_OUT, error=exc.message))
                raise
            return await self._publish(Session(status=SessionStatus.SIGNED_IN, user=user, profile=profile))

    async def sign_in(self, email: str, password: str) -> Session:
        validation.ensure_valid(validation.login_errors(email, password))

        async with self._lock:
            await self._publish(Session(status=SessionStatus.AUTHENTICATING))
            try:
                user = await self._auth.sign_in(email.strip(), password)
            except ListingError as exc:
                await self._publish(Session(status=SessionStatus.SIGNED_OUT, error=exc.message))
                raise

            try:
                profile = await self._auth.fetch_profile(user)
            except (AuthFailure, NetworkFailure) as exc:
                logger.error("Error fetching user profile for %s: %s", user.uid, exc)
                profile = None
            return await self._publish(Session(status=SessionStatus.SIGNED_IN, user=user, profile=profile))

    async def sign_out(self) -> Session:
        async with self._lock:
            return await self._publish(Session(status=SessionStatus.SIGNED_OUT))

    async def update_profile(self, display_name: str, photo_url: str | None = None) -> Session:
        self._require_signed_in()
        validation.ensure_valid(validation.display_name_errors(display_name))

        async with self._lock:
            # A sign-out may have completed while this call waited for the lock.
            current = self._require_signed_in()
            user = current.user
            profile = current.profile or UserProfile(uid=user.uid, email=user.email, display_name="")
            updated = await self._auth.update_profile(user, profile, display_name.strip(), photo_url)
            return await self._publish(current.model_copy(update={"profile": updated, "error": None}))

    def _require_signed_in(self) -> Session:
        current = self._session
        if current.status is not SessionStatus.SIGNED_IN or current.user is None:
            raise AuthFailure("Please sign in to update your profile")
        return current

    async def _publish(self, session: Session) -> Session:
        self._session = session
        logger.debug("Session state changed: %s", session.status.value)
        listeners = list(self._listeners)
        if listeners:
            results = await asyncio.gather(*(listener(session) for listener in listeners), return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    logger.warning("Session listener failed: %s", result)
        return session


@dataclass
class _RegistryEntry:
    manager: SessionManager
    last_seen: float


class SessionRegistry:
    """In-memory session registry with TTL eviction."""

    def __init__(self, auth: AuthClient, ttl_seconds: int = 3600) -> None:
        self._auth = auth
        self._ttl = ttl_seconds
        self._sessions: Dict[str, _RegistryEntry] = {}

    def create(self) -> tuple[str, SessionManager]:
        self._evict_expired()
        session_id = str(uuid4())
        manager = SessionManager(self._auth)
        self._sessions[session_id] = _RegistryEntry(manager=manager, last_seen=time.time())
        return session_id, manager

    def get(self, session_id: str) -> Optional[SessionManager]:
        self._evict_expired()
        entry = self._sessions.get(session_id)
        if not entry:
            return None
        entry.last_seen = time.time()
        return entry.manager

    def discard(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def _evict_expired(self) -> None:
        now = time.time()
        expired = [key for key, entry in self._sessions.items() if now - entry.last_seen > self._ttl]
        for key in expired:
            self._sessions.pop(key, None)
