"""Field-level checks applied before any user record is written.

Every function here is pure: it either returns the cleaned value or raises
``ValidationError``. Uniqueness needs the repository and lives in
``AccountService``.
"""

import re
from typing import Any

from src.exceptions import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
USER_ID_PATTERN = re.compile(r"^[0-9]+$")
MIN_PASSWORD_LENGTH = 8
# Largest id a 64-bit INTEGER column can hold
MAX_USER_ID = 2**63 - 1

# Wire names, as clients send them
NAME_FIELD = "nombre"
SURNAME_FIELD = "apellido"
EMAIL_FIELD = "email"
PASSWORD_FIELD = "contrasena"

# Fields that may not be blanked out by an update
TRIMMED_UPDATE_FIELDS = {
    "name": NAME_FIELD,
    "surname": SURNAME_FIELD,
    "email": EMAIL_FIELD,
}


def _is_blank(value: Any) -> bool:
    return value is None or not isinstance(value, str) or value.strip() == ""


def is_valid_email(email: str) -> bool:
    """Check for a basic ``local@domain.tld`` shape."""
    return bool(EMAIL_PATTERN.fullmatch(email))


def validate_email(email: str) -> str:
    if not is_valid_email(email):
        raise ValidationError("Email address is not valid")
    return email


def validate_required_fields(name: str | None, email: str | None, password: str | None) -> None:
    """Registration and creation need a name, an email and a password."""
    if _is_blank(name) or _is_blank(email) or not password:
        raise ValidationError("All fields are required")


def validate_login_fields(email: str | None, password: str | None) -> None:
    if _is_blank(email):
        raise ValidationError(f"The '{EMAIL_FIELD}' field is required and cannot be empty")
    if _is_blank(password):
        raise ValidationError(f"The '{PASSWORD_FIELD}' field is required and cannot be empty")
    validate_email(email)


def ensure_update_not_empty(changes: dict[str, Any]) -> None:
    if not changes:
        raise ValidationError("No data provided for update")


def validate_update_payload(changes: dict[str, Any]) -> dict[str, Any]:
    """Check a partial update and return it with text fields trimmed.

    ``changes`` holds only the fields the client actually sent, keyed by
    attribute name.
    """
    ensure_update_not_empty(changes)

    cleaned = dict(changes)
    for attribute, wire_name in TRIMMED_UPDATE_FIELDS.items():
        if attribute not in cleaned:
            continue
        value = cleaned[attribute]
        if _is_blank(value):
            raise ValidationError(f"The '{wire_name}' field cannot be empty")
        cleaned[attribute] = value.strip()

    if "password" in cleaned:
        validate_password_length(cleaned["password"])

    return cleaned


def validate_password_length(password: str | None) -> str:
    if password is None or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    return password


def parse_user_id(raw_id: str | int) -> int:
    """Parse a path id that must be a positive integer."""
    if isinstance(raw_id, int) and not isinstance(raw_id, bool):
        user_id = raw_id
    elif isinstance(raw_id, str) and USER_ID_PATTERN.fullmatch(raw_id.strip()):
        user_id = int(raw_id.strip())
    else:
        raise ValidationError("Invalid user id")

    if user_id <= 0:
        raise ValidationError("Invalid user id")
    return user_id
