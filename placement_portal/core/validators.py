"""
core/validators.py

Shared field validators

- Password rules (ASCII-only, length bounds)
- Institutional email domain restriction
- URL normalisation for profile / website links
"""

from typing import Final

from pydantic import HttpUrl, TypeAdapter, ValidationError

from placement_portal.core.config import settings

# -------------------------------
# Constants
# -------------------------------
MIN_PASSWORD_LENGTH: Final[int] = 6
MAX_PASSWORD_LENGTH: Final[int] = 128

_http_url_adapter: Final = TypeAdapter(HttpUrl)


# -------------------------------
# Validator Functions
# -------------------------------
def password_validator(password: str) -> str:
    """
    Validates password rules.

    Rules:
    - Must contain only ASCII characters
    - Length must be between MIN_PASSWORD_LENGTH and MAX_PASSWORD_LENGTH

    Raises:
        ValueError: If any rule is violated
    """
    if not password.isascii():
        raise ValueError("Password must contain only ASCII characters.")

    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")

    if len(password) > MAX_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_LENGTH} characters long.")

    return password


def institutional_email_validator(email: str) -> str:
    """Lower-cases the address and requires the configured institutional domain."""
    normalized = email.strip().lower()
    domain = settings.ALLOWED_EMAIL_DOMAIN.lower()
    if normalized.rpartition("@")[2] != domain:
        raise ValueError(f"Only @{domain} email addresses are allowed")
    return normalized


def url_validator(value: str | None) -> str | None:
    """Validates an http(s) URL and returns it as a plain string. Blank means unset."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        return str(_http_url_adapter.validate_python(value))
    except ValidationError as e:
        raise ValueError("Must be a valid http(s) URL") from e
