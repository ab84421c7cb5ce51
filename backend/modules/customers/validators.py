"""
Input validation for customer fields.

Each validator returns the normalized value or raises InvalidInputError.
"""

import re

from .exceptions import InvalidInputError

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 25
EMAIL_MIN_LENGTH = 5
EMAIL_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 20

PASSWORD_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")


def validate_name(name: str) -> str:
    name = name.strip()
    if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        raise InvalidInputError(
            "name",
            f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters",
            code="INVALID_NAME_LENGTH",
        )
    return name


def normalize_email(email: str) -> str:
    """Lowercase an address and enforce the stored length bounds.

    The format itself is checked by EmailStr on the request models.
    """
    email = email.strip().lower()
    if not EMAIL_MIN_LENGTH <= len(email) <= EMAIL_MAX_LENGTH:
        raise InvalidInputError("email", "Invalid email address", code="INVALID_EMAIL")
    return email


def validate_password(password: str, field: str = "password") -> str:
    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        raise InvalidInputError(
            field,
            f"Password must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH} characters",
            code="INVALID_PASSWORD_LENGTH",
        )
    has_letter = any(c.isalpha() for c in password)
    has_digit = any(c.isdigit() for c in password)
    if not PASSWORD_PATTERN.match(password) or not (has_letter and has_digit):
        raise InvalidInputError(
            field,
            "Password may only contain letters, digits and underscores, "
            "and must have at least one letter and one number",
            code="INVALID_PASSWORD_FORMAT",
        )
    return password
