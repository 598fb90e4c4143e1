"""
placement_portal/core/blacklist.py

Revoked access tokens, kept in Redis.

A logged-out token's `jti` is stored under `revoked_jti:<jti>` until the token
would have expired anyway, so the key set never outgrows the live tokens.
Without REDIS_URL there is nothing to store into: logout still clears the
cookie, but the token itself stays usable until `exp`.
"""

import logging

import redis.asyncio as redis

from placement_portal.core.config import settings

logger = logging.getLogger(__name__)

REVOKED_KEY_PREFIX = "revoked_jti:"


def _connect() -> redis.Redis | None:  # type: ignore[type-arg]
    if not settings.REDIS_URL:
        logger.info("[REDIS] REDIS_URL not configured, logout revocation disabled")
        return None
    try:
        client = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)
    except (redis.RedisError, ValueError) as e:
        logger.error(f"[REDIS] Could not create client for {settings.REDIS_URL}: {e}")
        return None
    logger.info(f"[REDIS] Revocation store at {settings.REDIS_URL}")
    return client


redis_client = _connect()


def _revoked_key(jti: str) -> str:
    return f"{REVOKED_KEY_PREFIX}{jti}"


async def blacklist_token(jti: str, expires_in: int) -> None:
    """
    Mark a token id as revoked for `expires_in` seconds.

    Redis failures are logged, not raised.
    """
    if redis_client is None:
        logger.warning(f"[REDIS] Revocation store unavailable, jti={jti} not revoked")
        return
    if expires_in <= 0:
        return

    try:
        await redis_client.setex(_revoked_key(jti), expires_in, "1")
    except redis.RedisError as e:
        logger.error(f"[REDIS] Failed to revoke jti={jti}: {e}")
        return
    logger.debug(f"[REDIS] Revoked jti={jti} for {expires_in}s")


async def is_token_blacklisted(jti: str) -> bool:
    """True when the token id was revoked. An unreachable store counts as not revoked."""
    if redis_client is None:
        return False

    try:
        return bool(await redis_client.exists(_revoked_key(jti)))
    except redis.RedisError as e:
        logger.error(f"[REDIS] Revocation lookup failed for jti={jti}: {e}")
        return False
