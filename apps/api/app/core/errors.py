"""Error taxonomy shared by the engine, the upstream clients and the HTTP layer."""
from __future__ import annotations


class ListingError(Exception):
    """Base class for failures surfaced to the mobile client."""

    retryable: bool = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NetworkFailure(ListingError):
    """An upstream call raised or answered with a non-success status."""

    retryable = True

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimited(NetworkFailure):
    """The secondary listings provider throttled the request."""

    def __init__(self, message: str = "Rate limit exceeded") -> None:
        super().__init__(message, status_code=429)


class ValidationFailure(ListingError):
    """User input failed client-side validation; nothing was sent upstream."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("; ".join(errors.values()) or "Invalid input")
        self.errors = dict(errors)


class AuthFailure(ListingError):
    """Credentials were rejected or the caller is not signed in."""

    retryable = True


class NotFound(ListingError):
    """The requested property does not exist upstream."""
