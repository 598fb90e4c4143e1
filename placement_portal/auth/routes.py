"""
auth/routes.py

Handles authentication routes including:
- User registration and login (token in body and HttpOnly cookie)
- Logout (token blacklisting)
- Current user, profile update, onboarding and password change
- Onboarding review submission for writers
"""

import logging

from fastapi import APIRouter, HTTPException, Request, Response, status

from placement_portal.auth import schemas
from placement_portal.auth.services import (
    change_password,
    complete_onboarding,
    login_user,
    logout_user_token,
    register_user,
    update_profile,
)
from placement_portal.core.config import settings
from placement_portal.core.dependencies import CurrentUserDep, DBDep, ReviewAuthorDep
from placement_portal.core.limiter import limiter
from placement_portal.core.schemas import MessageResponse
from placement_portal.review.schemas import InitialReviewCreate, ReviewRead
from placement_portal.review.services import ReviewService

# ---------------------------------------------------
# Router Configuration
# ---------------------------------------------------
router = APIRouter(prefix="/api/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


def _set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key="access_token",
        value=token,
        httponly=True,
        samesite="lax",
        secure=not settings.DEBUG,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
    )


# ---------------------------------------------------
# Registration / Login / Logout
# ---------------------------------------------------
@router.post(
    "/register",
    response_model=schemas.AuthSuccessResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register New User",
    description="Registers a student account with an institutional email and returns an access token.",
)
@limiter.limit("5/minute")
async def register(
    request: Request,
    payload: schemas.RegisterRequest,
    response: Response,
    db: DBDep,
) -> schemas.AuthSuccessResponse:
    result = await register_user(payload, db)
    _set_auth_cookie(response, result.access_token)
    return result


@router.post(
    "/login",
    response_model=schemas.AuthSuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Login",
    description="Authenticates via JSON. Returns the token in the body and sets it in an HttpOnly cookie.",
)
@limiter.limit("10/minute")
async def login(
    request: Request,
    payload: schemas.LoginRequest,
    response: Response,
    db: DBDep,
) -> schemas.AuthSuccessResponse:
    client_ip = request.client.host if request.client else "unknown"
    result = await login_user(payload, db, client_ip)
    _set_auth_cookie(response, result.access_token)
    return result


@router.post(
    "/logout",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Logout User",
    description="Blacklists the current JWT access token and clears the auth cookie.",
)
@limiter.limit("20/minute")
async def logout(request: Request, response: Response) -> MessageResponse:
    auth_header = request.headers.get("Authorization")
    token = None
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header.removeprefix("Bearer ")
    else:
        token = request.cookies.get("access_token")

    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    result = await logout_user_token(token)
    response.delete_cookie("access_token", path="/")
    return result


# ---------------------------------------------------
# Current User
# ---------------------------------------------------
@router.get(
    "/me",
    response_model=schemas.AuthUserResponse,
    status_code=status.HTTP_200_OK,
    summary="Current User",
)
async def me(current_user: CurrentUserDep) -> schemas.AuthUserResponse:
    return schemas.AuthUserResponse.model_validate(current_user)


@router.put(
    "/profile",
    response_model=schemas.AuthUserResponse,
    status_code=status.HTTP_200_OK,
    summary="Update Profile",
    description="Updates the supplied non-empty profile fields of the current user.",
)
@limiter.limit("10/minute")
async def put_profile(
    request: Request,
    payload: schemas.ProfileUpdateRequest,
    db: DBDep,
    current_user: CurrentUserDep,
) -> schemas.AuthUserResponse:
    user = await update_profile(current_user, payload, db)
    return schemas.AuthUserResponse.model_validate(user)


@router.put(
    "/update-profile",
    response_model=schemas.AuthUserResponse,
    status_code=status.HTTP_200_OK,
    summary="Complete Onboarding",
    description="Sets the role (student or alumni) and reader/writer type chosen after registration.",
)
@limiter.limit("10/minute")
async def put_onboarding(
    request: Request,
    payload: schemas.OnboardingRequest,
    db: DBDep,
    current_user: CurrentUserDep,
) -> schemas.AuthUserResponse:
    user = await complete_onboarding(current_user, payload, db)
    return schemas.AuthUserResponse.model_validate(user)


@router.put(
    "/change-password",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Change Password",
)
@limiter.limit("5/minute")
async def put_change_password(
    request: Request,
    payload: schemas.ChangePasswordRequest,
    db: DBDep,
    current_user: CurrentUserDep,
) -> MessageResponse:
    return await change_password(current_user, payload, db)


# ---------------------------------------------------
# Onboarding Review
# ---------------------------------------------------
@router.post(
    "/create-initial-review",
    response_model=ReviewRead,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Onboarding Review",
    description=(
        "Submits a first review naming the company; the company is reused when an active one "
        "with the same name and location exists, otherwise it is created."
    ),
)
@limiter.limit("5/minute")
async def create_initial_review(
    request: Request,
    payload: InitialReviewCreate,
    db: DBDep,
    current_user: ReviewAuthorDep,
) -> ReviewRead:
    review = await ReviewService(db).create_initial_review(current_user.id, payload)
    return ReviewRead.model_validate(review, from_attributes=True)
