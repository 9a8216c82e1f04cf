from __future__ import annotations

import re

from ..core.constants import PASSWORD_MIN_LENGTH
from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: str) -> str:
    value = require_non_empty(value, "Email").lower()
    if not _EMAIL_RE.match(value):
        raise ValidationError("Email is not valid")
    return value


def password_requirements(password: str) -> list[tuple[str, bool]]:
    """Checklist shown next to the new-password field."""
    password = password or ""
    return [
        (f"At least {PASSWORD_MIN_LENGTH} characters", len(password) >= PASSWORD_MIN_LENGTH),
        ("Contains uppercase letter", bool(re.search(r"[A-Z]", password))),
        ("Contains lowercase letter", bool(re.search(r"[a-z]", password))),
        ("Contains number", bool(re.search(r"\d", password))),
    ]


def validate_new_password(new_password: str, confirm_password: str) -> str:
    if new_password != confirm_password:
        raise ValidationError("New passwords do not match")
    if not all(met for _, met in password_requirements(new_password)):
        raise ValidationError("Please meet all password requirements")
    return new_password
