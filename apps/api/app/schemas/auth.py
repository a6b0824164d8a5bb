"""Schemas for the auth/profile service and the client session."""
from __future__ import annotations

import enum
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SessionStatus(str, enum.Enum):
    SIGNED_OUT = "signed_out"
    AUTHENTICATING = "authenticating"
    SIGNED_IN = "signed_in"


class AuthUser(BaseModel):
    """Credentials returned by the identity service."""

    uid: str
    email: str
    id_token: str
    refresh_token: str | None = None
    expires_in: int | None = None


class UserProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uid: str
    email: str
    display_name: str = Field(default="", alias="displayName")
    photo_url: str | None = Field(default=None, alias="photoURL")
    created_at: datetime | None = Field(default=None, alias="createdAt")


class Session(BaseModel):
    """Immutable snapshot of the client session."""

    model_config = ConfigDict(frozen=True)

    status: SessionStatus = SessionStatus.SIGNED_OUT
    user: AuthUser | None = None
    profile: UserProfile | None = None
    error: str | None = None


class SignInRequest(BaseModel):
    email: str
    password: str


class SignUpRequest(BaseModel):
    full_name: str
    email: str
    password: str
    confirm_password: str
    accepted_terms: bool = False


class UpdateProfileRequest(BaseModel):
    display_name: str
    photo_url: str | None = None


class SessionResponse(BaseModel):
    session_id: str
    status: SessionStatus
    uid: str | None = None
    email: str | None = None
    profile: UserProfile | None = None
    error: str | None = None
