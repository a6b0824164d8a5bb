"""Auth endpoints. Each client session is addressed by the ``X-Session-Id`` header."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Request, Response

from ..core.config import settings
from ..core.errors import AuthFailure, NotFound
from ..schemas import auth as schemas
from ..services import validation
from ..services.auth import AuthClient, get_auth_client
from ..services.session import SessionManager, SessionRegistry

router = APIRouter()


def get_session_registry(request: Request, auth: AuthClient = Depends(get_auth_client)) -> SessionRegistry:
    registry = getattr(request.app.state, "session_registry", None)
    if registry is None:
        registry = SessionRegistry(auth, ttl_seconds=settings.session_ttl_seconds)
        request.app.state.session_registry = registry
    return registry


def _resolve(registry: SessionRegistry, session_id: str | None) -> tuple[str, SessionManager]:
    if session_id:
        manager = registry.get(session_id)
        if manager is not None:
            return session_id, manager
    return registry.create()


def _respond(response: Response, session_id: str, manager: SessionManager) -> schemas.SessionResponse:
    response.headers["X-Session-Id"] = session_id
    session = manager.session
    return schemas.SessionResponse(
        session_id=session_id,
        status=session.status,
        uid=session.user.uid if session.user else None,
        email=session.user.email if session.user else None,
        profile=session.profile,
        error=session.error,
    )


@router.post("/signup", response_model=schemas.SessionResponse)
async def sign_up(
    payload: schemas.SignUpRequest,
    response: Response,
    x_session_id: str | None = Header(default=None),
    registry: SessionRegistry = Depends(get_session_registry),
) -> schemas.SessionResponse:
    """Create an account and sign the session in."""

    validation.ensure_valid(
        validation.registration_errors(
            payload.full_name,
            payload.email,
            payload.password,
            payload.confirm_password,
            payload.accepted_terms,
        )
    )
    session_id, manager = _resolve(registry, x_session_id)
    await manager.sign_up(payload.email, payload.password, payload.full_name)
    return _respond(response, session_id, manager)


@router.post("/signin", response_model=schemas.SessionResponse)
async def sign_in(
    payload: schemas.SignInRequest,
    response: Response,
    x_session_id: str | None = Header(default=None),
    registry: SessionRegistry = Depends(get_session_registry),
) -> schemas.SessionResponse:
    validation.ensure_valid(validation.login_errors(payload.email, payload.password))
    session_id, manager = _resolve(registry, x_session_id)
    await manager.sign_in(payload.email, payload.password)
    return _respond(response, session_id, manager)


@router.post("/signout", response_model=schemas.SessionResponse)
async def sign_out(
    response: Response,
    x_session_id: str | None = Header(default=None),
    registry: SessionRegistry = Depends(get_session_registry),
) -> schemas.SessionResponse:
    """Clear the session locally; always answers signed out."""

    session_id, manager = _resolve(registry, x_session_id)
    await manager.sign_out()
    result = _respond(response, session_id, manager)
    registry.discard(session_id)
    return result


@router.get("/session", response_model=schemas.SessionResponse)
async def current_session(
    response: Response,
    x_session_id: str | None = Header(default=None),
    registry: SessionRegistry = Depends(get_session_registry),
) -> schemas.SessionResponse:
    manager = registry.get(x_session_id) if x_session_id else None
    if manager is None:
        raise NotFound("Session not found")
    return _respond(response, x_session_id, manager)


@router.put("/profile", response_model=schemas.SessionResponse)
async def update_profile(
    payload: schemas.UpdateProfileRequest,
    response: Response,
    x_session_id: str | None = Header(default=None),
    registry: SessionRegistry = Depends(get_session_registry),
) -> schemas.SessionResponse:
    manager = registry.get(x_session_id) if x_session_id else None
    if manager is None:
        raise AuthFailure("Please sign in to update your profile")
    await manager.update_profile(payload.display_name, payload.photo_url)
    return _respond(response, x_session_id, manager)
