"""
auth/services.py

Handles authentication-related business logic:
- Registration and login (JSON)
- JWT token issuance and logout (blacklisting)
- Profile update and post-registration onboarding
- Password change
"""

import logging
from datetime import datetime, timezone

from fastapi import status
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.auth.schemas import (
    AuthSuccessResponse,
    AuthUserResponse,
    ChangePasswordRequest,
    LoginRequest,
    OnboardingRequest,
    ProfileUpdateRequest,
    RegisterRequest,
)
from placement_portal.core.blacklist import blacklist_token
from placement_portal.core.config import settings
from placement_portal.core.exceptions import APIError
from placement_portal.core.schemas import MessageResponse
from placement_portal.core.security import create_access_token, get_password_hash, verify_password
from placement_portal.database.enums import UserRole
from placement_portal.database.models import User

logger = logging.getLogger(__name__)


def _issue_token(user: User) -> AuthSuccessResponse:
    access_token = create_access_token({"sub": str(user.id), "role": user.role.value})
    return AuthSuccessResponse(access_token=access_token, user=AuthUserResponse.model_validate(user))


# ------------------------------------------------
# Registration
# ------------------------------------------------
async def register_user(payload: RegisterRequest, db: AsyncSession) -> AuthSuccessResponse:
    """Creates a student account and returns an access token for it."""
    existing = await db.execute(select(User.id).filter(User.email == payload.email))
    if existing.first() is not None:
        logger.warning(f"[AUTH] Registration attempt with existing email: {payload.email}")
        raise APIError(status.HTTP_400_BAD_REQUEST, "User already exists with this email")

    user = User(
        name=payload.name,
        email=payload.email,
        hashed_password=get_password_hash(payload.password),
        role=UserRole.STUDENT,
        graduation_year=payload.graduation_year,
        branch=payload.branch,
        linkedin_profile=payload.linkedin_profile,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning(f"[AUTH] Concurrent registration for email: {payload.email}")
        raise APIError(status.HTTP_400_BAD_REQUEST, "User already exists with this email")

    await db.refresh(user)
    logger.info(f"[AUTH] New user registered: {user.email} (id={user.id})")
    return _issue_token(user)


# ------------------------------------------------
# Login
# ------------------------------------------------
async def login_user(payload: LoginRequest, db: AsyncSession, client_ip: str) -> AuthSuccessResponse:
    """Authenticates a user via JSON email/password."""
    email = payload.email.lower()
    user = (await db.execute(select(User).filter(User.email == email))).scalar_one_or_none()

    if not user or not verify_password(payload.password, user.hashed_password):
        logger.warning(f"[AUTH] Failed login for {email} from IP: {client_ip}")
        raise APIError(status.HTTP_400_BAD_REQUEST, "Invalid credentials")

    if not user.is_active:
        logger.warning(f"[AUTH] Login attempt by deactivated user: {user.id}")
        raise APIError(status.HTTP_400_BAD_REQUEST, "Account is deactivated")

    logger.info(f"[AUTH] User logged in successfully: {user.email} from IP: {client_ip}")
    return _issue_token(user)


# ------------------------------------------------
# Logout
# ------------------------------------------------
async def logout_user_token(token: str) -> MessageResponse:
    """Blacklists the provided JWT access token for the rest of its lifetime."""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"verify_exp": False},
        )
    except JWTError as e:
        logger.warning(f"[AUTH] Logout with undecodable token: {e}")
        raise APIError(status.HTTP_401_UNAUTHORIZED, "Invalid token")

    jti = payload.get("jti")
    exp = payload.get("exp")
    if jti and exp:
        ttl = max(0, int(exp - datetime.now(timezone.utc).timestamp()))
        if ttl > 0:
            await blacklist_token(jti, ttl)
            logger.info(f"[AUTH] Access token blacklisted (JTI: {jti}) for {ttl} seconds.")
        else:
            logger.info(f"[AUTH] Access token already expired (JTI: {jti}). No blacklist needed.")
    else:
        logger.warning("[AUTH] Logout with token missing 'jti' or 'exp'.")

    return MessageResponse(detail="Logged out successfully")


# ------------------------------------------------
# Profile and Onboarding
# ------------------------------------------------
async def update_profile(user: User, payload: ProfileUpdateRequest, db: AsyncSession) -> User:
    """Applies supplied non-empty profile fields; blanks leave the stored value alone."""
    changed = []
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value:
            setattr(user, field, value)
            changed.append(field)

    if changed:
        await db.commit()
        await db.refresh(user)
    logger.info(f"[PROFILE] User {user.id} updated profile: fields={sorted(changed)}")
    return user


async def complete_onboarding(user: User, payload: OnboardingRequest, db: AsyncSession) -> User:
    """Records the role and reader/writer choice made after registration."""
    if user.role == UserRole.ADMIN and payload.role is not None:
        raise APIError(status.HTTP_400_BAD_REQUEST, "Admin role cannot be changed here")

    if payload.role is not None:
        user.role = payload.role
    if payload.user_type is not None:
        user.user_type = payload.user_type

    await db.commit()
    await db.refresh(user)
    logger.info(f"[ONBOARDING] User {user.id} now role={user.role.value} type={user.user_type.value}")
    return user


async def change_password(
    user: User, payload: ChangePasswordRequest, db: AsyncSession
) -> MessageResponse:
    if not verify_password(payload.current_password, user.hashed_password):
        logger.warning(f"[AUTH] Wrong current password on change attempt: user={user.id}")
        raise APIError(status.HTTP_400_BAD_REQUEST, "Current password is incorrect")

    user.hashed_password = get_password_hash(payload.new_password)
    await db.commit()
    logger.info(f"[AUTH] Password changed for user {user.id}")
    return MessageResponse(detail="Password changed successfully")
