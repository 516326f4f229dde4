"""
Input whitelists for login and registration.

Inputs are checked here before the credential store or token service is
touched. There is one password policy for every entry point.
"""

import re
from typing import Optional

from shared.exceptions import ValidationError

from .models import LoginRequest, RegisterRequest

PATTERNS: dict[str, re.Pattern] = {
    "name": re.compile(r"^[A-Za-z \-]{2,60}$"),
    "id_number": re.compile(r"^[0-9]{1,13}$"),
    "username": re.compile(r"^[A-Za-z0-9_]{3,20}$"),
    "account_number": re.compile(r"^[0-9]{8,20}$"),
    "password": re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[^\w\s]).{8,72}$"),
}

MESSAGES: dict[str, str] = {
    "name": "Name must contain only letters, spaces, and hyphens (2-60 characters)",
    "id_number": "ID number must contain only digits (1-13 characters)",
    "username": "Username must be 3-20 characters (letters, numbers, underscore only)",
    "account_number": "Account number must be 8-20 digits",
    "password": (
        "Password must be 8-72 characters with at least one lowercase, "
        "uppercase, digit, and special character"
    ),
}


def matches(field: str, value: Optional[str]) -> bool:
    """Check a value against the whitelist for a field."""
    return value is not None and PATTERNS[field].fullmatch(value) is not None


def _check(field: str, value: Optional[str]) -> None:
    if not matches(field, value):
        raise ValidationError(MESSAGES[field], details={"field": field})


def validate_login(request: LoginRequest) -> tuple[str, str]:
    """
    Validate a login request.

    Exactly one of username / account number must be given.

    Returns:
        (field, value) naming the identity to look up

    Raises:
        ValidationError: On missing fields or a whitelist violation
    """
    if not request.password or bool(request.username) == bool(request.account_number):
        raise ValidationError("Provide username or account number, and password")

    if request.username:
        if not matches("username", request.username):
            raise ValidationError("Invalid username format", details={"field": "username"})
        identity = ("username", request.username)
    else:
        if not matches("account_number", request.account_number):
            raise ValidationError(
                "Invalid account number format", details={"field": "account_number"}
            )
        identity = ("account_number", request.account_number)

    if not matches("password", request.password):
        raise ValidationError("Invalid password format", details={"field": "password"})

    return identity


def validate_registration(request: RegisterRequest) -> None:
    """
    Validate a registration request.

    Raises:
        ValidationError: On a missing field, a whitelist violation, or a
            password / confirmation mismatch
    """
    fields = {
        "name": request.name,
        "id_number": request.id_number,
        "username": request.username,
        "password": request.password,
        "confirm_password": request.confirm_password,
    }
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise ValidationError("All fields are required", details={"missing": missing})

    _check("name", request.name)
    _check("id_number", request.id_number)
    _check("username", request.username)
    _check("password", request.password)

    if request.password != request.confirm_password:
        raise ValidationError("Passwords do not match", details={"field": "confirm_password"})
