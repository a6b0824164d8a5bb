"""FastAPI backend for the property listing app."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .core.config import settings
from .core.errors import AuthFailure, ListingError, NetworkFailure, NotFound, RateLimited, ValidationFailure
from .routers import auth, discovery, properties

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Estate Finder API", version="0.1.0")

if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(properties.router, prefix="/api", tags=["properties"])
app.include_router(discovery.router, prefix="/api/discovery", tags=["discovery"])
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])

# Most specific class first.
ERROR_STATUS: tuple[tuple[type[ListingError], int], ...] = (
    (ValidationFailure, 422),
    (AuthFailure, 401),
    (NotFound, 404),
    (RateLimited, 503),
    (NetworkFailure, 502),
)


@app.exception_handler(ListingError)
async def listing_error_handler(request: Request, exc: ListingError) -> JSONResponse:
    status_code = next((code for kind, code in ERROR_STATUS if isinstance(exc, kind)), 500)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    body: dict[str, object] = {"detail": exc.message, "retryable": exc.retryable}
    if isinstance(exc, ValidationFailure):
        body["errors"] = exc.errors
    return JSONResponse(status_code=status_code, content=body)


@app.get("/api/health", tags=["meta"])
async def health() -> dict[str, str]:
    """Simple liveness probe."""

    return {"status": "ok", "environment": settings.app_env}


@app.head("/api/health", tags=["meta"])
async def health_head() -> Response:
    """Allow HEAD for uptime monitors that only need the status code."""

    return Response(status_code=200)

