"""Tests for auth form validation rules."""
from __future__ import annotations

import pytest

from app.core.errors import ValidationFailure
from app.services import validation


def test_login_requires_email_and_password():
    assert validation.login_errors("", "") == {
        "email": "Email is required",
        "password": "Password is required",
    }


def test_login_rejects_malformed_email_and_short_password():
    errors = validation.login_errors("not-an-email", "12345")

    assert errors["email"] == "Please enter a valid email"
    assert errors["password"] == "Password must be at least 6 characters"


def test_valid_login_has_no_errors():
    assert validation.login_errors("jane@example.com", "secret1") == {}


def test_registration_checks_every_field():
    errors = validation.registration_errors("J", "jane@example", "secret1", "secret2", accepted_terms=False)

    assert set(errors) == {"full_name", "email", "confirm_password", "terms"}
    assert errors["confirm_password"] == "Passwords do not match"


def test_registration_requires_confirmation():
    errors = validation.registration_errors("Jane Doe", "jane@example.com", "secret1", "  ", accepted_terms=True)

    assert errors == {"confirm_password": "Please confirm your password"}


def test_display_name_cannot_be_blank():
    assert validation.display_name_errors("   ") == {"display_name": "Display name cannot be empty"}
    assert validation.display_name_errors("Jane") == {}


def test_ensure_valid_raises_with_field_errors():
    with pytest.raises(ValidationFailure) as excinfo:
        validation.ensure_valid({"email": "Email is required"})

    assert excinfo.value.errors == {"email": "Email is required"}
    assert not excinfo.value.retryable

    validation.ensure_valid({})
