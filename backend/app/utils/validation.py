"""
Validation utilities for input validation and error handling.
"""
import re
from typing import Any

from ..models.application import STATUSES
from ..models.user import ROLES
from .error_handlers import ValidationError

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
PASSWORD_MIN_LENGTH = 6
# bcrypt only looks at the first 72 bytes.
PASSWORD_MAX_BYTES = 72
# Largest primary key SQLite and MySQL BIGINT can hold.
MAX_ROW_ID = 2**63 - 1


def validate_email(email: Any) -> str:
    """Validate email format. Case is preserved: emails are unique as stored."""
    if not email or not isinstance(email, str):
        raise ValidationError("Email is required")

    email = email.strip()
    if len(email) > 255:
        raise ValidationError("Email too long (max 255 characters)")

    if not re.match(EMAIL_PATTERN, email):
        raise ValidationError("Invalid email format")

    return email


def validate_password(password: Any) -> None:
    """Validate password strength."""
    if not password or not isinstance(password, str):
        raise ValidationError("Password is required")

    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")

    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValidationError(f"Password too long (max {PASSWORD_MAX_BYTES} bytes)")


def validate_string_field(
    value: Any,
    field_name: str,
    min_length: int = 1,
    max_length: int = 1000,
    required: bool = True,
) -> str | None:
    """Validate a string field with common rules."""
    if value is None:
        if required:
            raise ValidationError(f"{field_name} is required")
        return None

    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")

    value = value.strip()

    if required and not value:
        raise ValidationError(f"{field_name} cannot be empty")

    if len(value) < min_length:
        raise ValidationError(f"{field_name} must be at least {min_length} characters")

    if len(value) > max_length:
        raise ValidationError(f"{field_name} must not exceed {max_length} characters")

    return value


def validate_integer_field(
    value: Any,
    field_name: str,
    min_value: int | None = None,
    max_value: int | None = None,
    required: bool = True,
) -> int | None:
    """Validate an integer field."""
    if value is None:
        if required:
            raise ValidationError(f"{field_name} is required")
        return None

    if isinstance(value, bool) or not isinstance(value, int):
        try:
            value = int(value)
        except (ValueError, TypeError):
            raise ValidationError(f"{field_name} must be a valid integer")

    if min_value is not None and value < min_value:
        raise ValidationError(f"{field_name} must be at least {min_value}")

    if max_value is not None and value > max_value:
        raise ValidationError(f"{field_name} must not exceed {max_value}")

    return value


def parse_salary(value: Any) -> int | None:
    """
    Salary is optional: anything that does not parse to an integer is stored as absent.

    Accepts ints, integral floats and numeric strings ("85000", " 85000 ").
    A value that parses but is negative is rejected.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    elif isinstance(value, str):
        s = value.strip()
        if not re.fullmatch(r"[+-]?\d+", s):
            return None
        value = int(s)
    elif not isinstance(value, int):
        return None

    return validate_integer_field(value, "Salary", min_value=0, max_value=10**9)


def validate_role(role: Any) -> str:
    """Validate user role (JOB_SEEKER / EMPLOYER)."""
    if not role or not isinstance(role, str):
        raise ValidationError("Role is required")

    role = role.strip().upper()
    if role not in ROLES:
        raise ValidationError(f"Invalid role. Must be one of: {', '.join(ROLES)}")

    return role


def validate_application_status(status: Any) -> str:
    """Validate application status."""
    if not status or not isinstance(status, str):
        raise ValidationError("Status is required")

    status = status.strip().upper()
    if status not in STATUSES:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(STATUSES)}")

    return status
