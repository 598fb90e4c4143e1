"""
core/security.py

Password hashing and JWT access tokens:
- bcrypt password hashing via passlib
- Access token creation with expiration and a unique JTI
- Access token decoding
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, cast

from jose import jwt
from passlib.context import CryptContext

from placement_portal.core.config import settings

logger = logging.getLogger(__name__)

# Password hashing configuration
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    """Hashes a plain text password."""
    return cast(str, pwd_context.hash(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifies a plain text password against a hash."""
    return cast(bool, pwd_context.verify(plain_password, hashed_password))


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token with expiration and unique JTI.

    Args:
        data (dict[str, Any]): Payload data to include in the token (must contain 'sub' and 'role').
        expires_delta (timedelta | None): Optional custom expiration time. Defaults to settings.

    Returns:
        str: Encoded JWT access token.
    """
    if "sub" not in data or "role" not in data:
        logger.error("Access token creation attempt missing 'sub' or 'role' in data.")
        raise ValueError("Access token payload must include 'sub' and 'role'.")

    expire: datetime = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    jti: str = str(uuid.uuid4())
    payload: dict[str, Any] = {**data, "exp": expire, "jti": jti}

    logger.info(f"Issuing access token for sub={data.get('sub')} exp={expire} jti={jti}")
    return str(jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM))


def decode_access_token(token: str) -> dict[str, Any]:
    """Decodes a JWT access token. Raises `jose.JWTError` when invalid or expired."""
    return cast(dict[str, Any], jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]))
