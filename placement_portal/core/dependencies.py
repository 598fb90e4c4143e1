"""
placement_portal/core/dependencies.py

Request-scoped dependencies shared by the routers:
- `get_current_user`: JWT from the Bearer header or the `access_token` cookie,
  checked against the revocation store and resolved to an active `User`
- `require_roles` / `require_review_author`: role guards raising 403
- `PaginationParams`: `skip` / `limit` query parameters, capped at 50
- `Annotated` aliases used in route signatures
"""

import logging
from collections.abc import Callable, Coroutine
from typing import Annotated, Any

from fastapi import Cookie, Depends, HTTPException, Query, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.auth.schemas import TokenPayload
from placement_portal.core.blacklist import is_token_blacklisted
from placement_portal.core.exceptions import AuthorizationError
from placement_portal.core.security import decode_access_token
from placement_portal.database.enums import UserRole, UserType
from placement_portal.database.models import User
from placement_portal.database.session import get_db

# ---------------------------------------------------
# Logger Configuration
# ---------------------------------------------------
logger = logging.getLogger(__name__)

# ---------------------------------------------------
# OAuth2 Configuration
# ---------------------------------------------------
# auto_error=False so a missing header falls through to the cookie check
oauth2_scheme: OAuth2PasswordBearer = OAuth2PasswordBearer(
    tokenUrl="/api/auth/login", auto_error=False
)

MAX_PAGE_SIZE = 50


# ---------------------------------------------------
# Pagination Dependency
# ---------------------------------------------------
class PaginationParams:
    """
    Dependency that provides pagination parameters from query parameters.
    """

    def __init__(
        self,
        skip: int = Query(0, ge=0, description="Number of records to skip for pagination"),
        limit: int = Query(
            10, ge=1, le=MAX_PAGE_SIZE, description="Maximum number of records to return"
        ),
    ):
        self.skip = skip
        self.limit = limit


# ---------------------------------------------------
# Authentication Functions
# ---------------------------------------------------
def extract_token(token_header: str | None, token_cookie: str | None) -> str | None:
    """Bearer header wins over the `access_token` cookie."""
    return token_header or token_cookie


def _unauthorized(challenge: bool = False) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"} if challenge else None,
    )


async def get_current_user(
    token_header: Annotated[str | None, Depends(oauth2_scheme)] = None,
    token_cookie: Annotated[str | None, Cookie(alias="access_token")] = None,
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the request's principal from its access token.

    The token is read from the Bearer header, falling back to the
    `access_token` cookie. Missing, malformed, expired or revoked tokens, and
    tokens whose user is gone or deactivated, all yield the same 401.
    """
    token = extract_token(token_header, token_cookie)
    if token is None:
        logger.debug("[AUTH] Request carries neither a Bearer header nor an access_token cookie")
        raise _unauthorized(challenge=True)

    try:
        claims = TokenPayload(**decode_access_token(token))
    except (JWTError, ValueError) as e:
        logger.warning(f"[AUTH] Rejected access token: {e}")
        raise _unauthorized()

    if await is_token_blacklisted(claims.jti):
        logger.warning(f"[AUTH] Revoked token presented: jti={claims.jti} sub={claims.sub}")
        raise _unauthorized()

    user = await db.get(User, claims.sub)
    if user is None or not user.is_active:
        state = "missing" if user is None else "deactivated"
        logger.warning(f"[AUTH] Token subject {claims.sub} is {state}")
        raise _unauthorized()

    logger.debug(
        f"[AUTH] Authenticated {user.id} ({user.role.value}) from {'header' if token_header else 'cookie'}"
    )
    return user


# ---------------------------------------------------
# Authorization Functions (Role-Based)
# ---------------------------------------------------
def require_roles(*roles: UserRole) -> Callable[..., Coroutine[Any, Any, User]]:
    """Builds a guard admitting only the given roles; others get 403."""
    allowed = {role.value for role in roles}

    async def role_guard(user: User = Depends(get_current_user)) -> User:
        if user.role.value in allowed:
            return user
        logger.warning(f"[RBAC] {user.id} ({user.role.value}) denied, requires one of {sorted(allowed)}")
        raise AuthorizationError(f"Access denied for role: {user.role.value}")

    return role_guard


async def require_review_author(user: User = Depends(get_current_user)) -> User:
    """
    Admits alumni, admins, and users who chose to write reviews during
    onboarding. Guards the onboarding review entry point.
    """
    if user.role in (UserRole.ALUMNI, UserRole.ADMIN) or user.user_type == UserType.WRITER:
        return user
    logger.warning(
        f"[RBAC] Review authoring denied: User {user.id} role={user.role} type={user.user_type}"
    )
    raise AuthorizationError("Only alumni or writers can submit reviews")


# ---------------------------------------------------
# Annotated Shortcuts
# ---------------------------------------------------
DBDep = Annotated[AsyncSession, Depends(get_db)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]
AlumniOrAdminDep = Annotated[User, Depends(require_roles(UserRole.ALUMNI, UserRole.ADMIN))]
AdminDep = Annotated[User, Depends(require_roles(UserRole.ADMIN))]
ReviewAuthorDep = Annotated[User, Depends(require_review_author)]
