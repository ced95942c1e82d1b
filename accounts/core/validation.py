"""Field rules for account input.

Each check returns the message key of the first rule the value breaks, or None
when the value is acceptable. Keys are resolved to text by the translation
catalogs at the HTTP boundary.
"""

import re

from email_validator import EmailNotValidError, validate_email

USERNAME_MIN_LENGTH = 4
USERNAME_MAX_LENGTH = 32
PASSWORD_MIN_LENGTH = 6

_PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).*$")


def check_username(username: str | None) -> str | None:
    if username is None:
        return "username_null"
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        return "username_size"
    return None


def check_email(email: str | None) -> str | None:
    if email is None:
        return "email_null"
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return "email_invalid"
    return None


def check_password(password: str | None) -> str | None:
    """
    Validate password meets requirements:
    - Present
    - Minimum 6 characters
    - At least one uppercase letter, one lowercase letter and one number
    """
    if password is None:
        return "password_null"
    if len(password) < PASSWORD_MIN_LENGTH:
        return "password_size"
    if not _PASSWORD_PATTERN.match(password):
        return "password_pattern"
    return None


def collect_errors(**checks: str | None) -> dict[str, str]:
    """Drop the fields that passed, keeping field -> message key for the rest."""
    return {field: key for field, key in checks.items() if key is not None}
