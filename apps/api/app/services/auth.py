"""Auth/profile service client built on the Firebase Identity Toolkit and Firestore REST APIs."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

import httpx

from ..core.config import settings
from ..core.errors import AuthFailure, NetworkFailure
from ..schemas.auth import AuthUser, UserProfile

logger = logging.getLogger(__name__)

FRIENDLY_MESSAGES = {
    "EMAIL_EXISTS": "An account with this email already exists",
    "EMAIL_NOT_FOUND": "Invalid email or password",
    "INVALID_PASSWORD": "Invalid email or password",
    "INVALID_LOGIN_CREDENTIALS": "Invalid email or password",
    "USER_DISABLED": "This account has been disabled",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts. Please try again later",
}


class AuthClient:
    """Sign-up, sign-in and profile persistence against Firebase."""

    def __init__(
        self,
        *,
        api_key: str,
        project_id: str,
        identity_url: str = "https://identitytoolkit.googleapis.com/v1",
        firestore_url: str = "https://firestore.googleapis.com/v1",
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._identity_url = identity_url.rstrip("/")
        self._documents_url = (
            f"{firestore_url.rstrip('/')}/projects/{project_id}/databases/(default)/documents"
        )
        self._timeout = timeout
        self._transport = transport

    async def sign_up(self, email: str, password: str, display_name: str) -> tuple[AuthUser, UserProfile]:
        """Create the account, set its display name and write the profile document."""

        user = await self._identity_call(
            "accounts:signUp",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        await self._identity_call(
            "accounts:update",
            {"idToken": user.id_token, "displayName": display_name, "returnSecureToken": False},
            expect_user=False,
        )
        profile = UserProfile(
            uid=user.uid,
            email=user.email,
            display_name=display_name,
            created_at=datetime.now(timezone.utc),
        )
        await self._write_profile(user, profile)
        logger.info("Signed up user %s", user.uid)
        return user, profile

    async def sign_in(self, email: str, password: str) -> AuthUser:
        user = await self._identity_call(
            "accounts:signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        logger.info("Signed in user %s", user.uid)
        return user

    async def fetch_profile(self, user: AuthUser) -> UserProfile | None:
        """Read ``users/{uid}``; a missing document yields ``None``."""

        response = await self._send(
            "GET",
            f"{self._documents_url}/users/{user.uid}",
            headers=self._bearer(user),
        )
        if response.status_code == 404:
            return None
        self._raise_for_status(response)
        fields = _from_firestore_fields(response.json().get("fields", {}))
        return UserProfile.model_validate(fields)

    async def update_profile(
        self,
        user: AuthUser,
        profile: UserProfile,
        display_name: str,
        photo_url: str | None = None,
    ) -> UserProfile:
        body: dict[str, Any] = {"idToken": user.id_token, "displayName": display_name, "returnSecureToken": False}
        if photo_url is not None:
            body["photoUrl"] = photo_url
        await self._identity_call("accounts:update", body, expect_user=False)

        updated = profile.model_copy(update={"display_name": display_name, "photo_url": photo_url})
        await self._write_profile(user, updated, merge_fields=("displayName", "photoURL"))
        return updated

    async def _identity_call(self, action: str, body: dict[str, Any], *, expect_user: bool = True) -> Any:
        response = await self._send(
            "POST",
            f"{self._identity_url}/{action}",
            params={"key": self._api_key},
            json=body,
        )
        self._raise_for_status(response)
        data = response.json()
        if not expect_user:
            return data
        return AuthUser(
            uid=data["localId"],
            email=data.get("email", body.get("email", "")),
            id_token=data["idToken"],
            refresh_token=data.get("refreshToken"),
            expires_in=int(data["expiresIn"]) if data.get("expiresIn") else None,
        )

    async def _write_profile(
        self,
        user: AuthUser,
        profile: UserProfile,
        merge_fields: tuple[str, ...] | None = None,
    ) -> None:
        document = profile.model_dump(by_alias=True, exclude_none=merge_fields is None)
        params: list[tuple[str, str]] = []
        if merge_fields:
            document = {name: document.get(name) for name in merge_fields}
            params = [("updateMask.fieldPaths", name) for name in merge_fields]

        response = await self._send(
            "PATCH",
            f"{self._documents_url}/users/{user.uid}",
            params=params,
            json={"fields": _to_firestore_fields(document)},
            headers=self._bearer(user),
        )
        self._raise_for_status(response)

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                return await client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Auth service unreachable: %s %s (%s)", method, url, exc)
            raise NetworkFailure(f"Auth service unreachable: {exc}") from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        code = _error_code(response)
        if response.status_code in (400, 401, 403):
            reason = code.split(" : ")[0].strip() or "Authentication failed"
            logger.warning("Auth service rejected request: %s", reason)
            raise AuthFailure(FRIENDLY_MESSAGES.get(reason, reason.replace("_", " ").capitalize()))
        logger.warning("Auth service returned %s: %s", response.status_code, code)
        raise NetworkFailure(f"HTTP error! status: {response.status_code}", status_code=response.status_code)

    @staticmethod
    def _bearer(user: AuthUser) -> dict[str, str]:
        return {"Authorization": f"Bearer {user.id_token}"}


def _error_code(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return ""
    if not isinstance(payload, dict):
        return ""
    error = payload.get("error", {})
    if isinstance(error, dict):
        return str(error.get("message", ""))
    return str(error)


def _to_firestore_fields(document: dict[str, Any]) -> dict[str, dict[str, Any]]:
    fields: dict[str, dict[str, Any]] = {}
    for name, value in document.items():
        if value is None:
            fields[name] = {"nullValue": None}
        elif isinstance(value, bool):
            fields[name] = {"booleanValue": value}
        elif isinstance(value, datetime):
            fields[name] = {"timestampValue": value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")}
        elif isinstance(value, int):
            fields[name] = {"integerValue": str(value)}
        else:
            fields[name] = {"stringValue": str(value)}
    return fields


def _from_firestore_fields(fields: dict[str, dict[str, Any]]) -> dict[str, Any]:
    document: dict[str, Any] = {}
    for name, wrapped in fields.items():
        if "nullValue" in wrapped:
            document[name] = None
        elif "integerValue" in wrapped:
            document[name] = int(wrapped["integerValue"])
        else:
            kind = next(iter(wrapped), None)
            document[name] = wrapped[kind] if kind else None
    return document


@lru_cache
def get_auth_client() -> AuthClient:
    """FastAPI dependency returning the shared auth client."""

    return AuthClient(
        api_key=settings.firebase_api_key,
        project_id=settings.firebase_project_id,
        identity_url=settings.identity_toolkit_url,
        firestore_url=settings.firestore_url,
        timeout=settings.auth_timeout,
    )
