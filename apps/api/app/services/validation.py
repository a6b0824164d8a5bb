"""Client-side form validation run before any auth request is issued."""
from __future__ import annotations

import re

from ..core.errors import ValidationFailure

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
MIN_PASSWORD_LENGTH = 6
MIN_NAME_LENGTH = 2


def _email_error(email: str) -> str | None:
    if not email.strip():
        return "Email is required"
    if not EMAIL_PATTERN.search(email):
        return "Please enter a valid email"
    return None


def _password_error(password: str) -> str | None:
    if not password.strip():
        return "Password is required"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    return None


def login_errors(email: str, password: str) -> dict[str, str]:
    errors: dict[str, str] = {}
    if message := _email_error(email):
        errors["email"] = message
    if message := _password_error(password):
        errors["password"] = message
    return errors


def registration_errors(
    full_name: str,
    email: str,
    password: str,
    confirm_password: str,
    accepted_terms: bool,
) -> dict[str, str]:
    errors: dict[str, str] = {}

    if not full_name.strip():
        errors["full_name"] = "Full name is required"
    elif len(full_name.strip()) < MIN_NAME_LENGTH:
        errors["full_name"] = f"Full name must be at least {MIN_NAME_LENGTH} characters"

    errors.update(login_errors(email, password))

    if not confirm_password.strip():
        errors["confirm_password"] = "Please confirm your password"
    elif password != confirm_password:
        errors["confirm_password"] = "Passwords do not match"

    if not accepted_terms:
        errors["terms"] = "Please accept the terms and conditions"

    return errors


def display_name_errors(display_name: str) -> dict[str, str]:
    if not display_name.strip():
        return {"display_name": "Display name cannot be empty"}
    return {}


def ensure_valid(errors: dict[str, str]) -> None:
    """Raise ``ValidationFailure`` when any field reported an error."""

    if errors:
        raise ValidationFailure(errors)
