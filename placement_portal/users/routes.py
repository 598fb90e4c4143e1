"""
users/routes.py

User Routes
- Public user profile
- Admin: list users, statistics, verify / activate / deactivate accounts
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from placement_portal.core.dependencies import AdminDep, DBDep, PaginationParams
from placement_portal.core.limiter import limiter
from placement_portal.core.schemas import PaginatedResponse
from placement_portal.database.enums import Branch, UserRole
from placement_portal.users import schemas
from placement_portal.users.services import UserService

router = APIRouter(prefix="/api/users", tags=["Users"])


# ---------------------------------------------------
# Admin Endpoints
# ---------------------------------------------------
@router.get(
    "/",
    response_model=PaginatedResponse[schemas.UserAdminRead],
    status_code=status.HTTP_200_OK,
    summary="List Users (Admin)",
)
@limiter.limit("20/minute")
async def list_users(
    request: Request,
    db: DBDep,
    admin: AdminDep,
    role: UserRole | None = Query(None),
    branch: Branch | None = Query(None),
    graduation_year: int | None = Query(None, ge=2000),
    pagination: PaginationParams = Depends(),
) -> PaginatedResponse[schemas.UserAdminRead]:
    users, total_count = await UserService(db).list_users(
        role=role,
        branch=branch,
        graduation_year=graduation_year,
        skip=pagination.skip,
        limit=pagination.limit,
    )
    return PaginatedResponse(
        total_count=total_count,
        has_next_page=(pagination.skip + pagination.limit) < total_count,
        items=[schemas.UserAdminRead.model_validate(u) for u in users],
    )


@router.get(
    "/stats/overview",
    response_model=schemas.UserStats,
    status_code=status.HTTP_200_OK,
    summary="User Statistics (Admin)",
)
@limiter.limit("20/minute")
async def user_stats(request: Request, db: DBDep, admin: AdminDep) -> schemas.UserStats:
    return await UserService(db).get_stats()


@router.put(
    "/{user_id}/verify",
    response_model=schemas.UserAdminRead,
    status_code=status.HTTP_200_OK,
    summary="Verify User (Admin)",
)
@limiter.limit("20/minute")
async def verify_user(
    request: Request, user_id: UUID, db: DBDep, admin: AdminDep
) -> schemas.UserAdminRead:
    user = await UserService(db).verify_user(user_id, admin_id=admin.id)
    return schemas.UserAdminRead.model_validate(user)


@router.put(
    "/{user_id}/activate",
    response_model=schemas.UserAdminRead,
    status_code=status.HTTP_200_OK,
    summary="Activate User (Admin)",
)
@limiter.limit("20/minute")
async def activate_user(
    request: Request, user_id: UUID, db: DBDep, admin: AdminDep
) -> schemas.UserAdminRead:
    user = await UserService(db).activate_user(user_id, admin_id=admin.id)
    return schemas.UserAdminRead.model_validate(user)


@router.put(
    "/{user_id}/deactivate",
    response_model=schemas.UserAdminRead,
    status_code=status.HTTP_200_OK,
    summary="Deactivate User (Admin)",
)
@limiter.limit("20/minute")
async def deactivate_user(
    request: Request, user_id: UUID, db: DBDep, admin: AdminDep
) -> schemas.UserAdminRead:
    user = await UserService(db).deactivate_user(user_id, admin_id=admin.id)
    return schemas.UserAdminRead.model_validate(user)


# ---------------------------------------------------
# Public Endpoints
# ---------------------------------------------------
@router.get(
    "/{user_id}",
    response_model=schemas.UserPublic,
    status_code=status.HTTP_200_OK,
    summary="Get User Profile",
)
@limiter.limit("30/minute")
async def get_user(request: Request, user_id: UUID, db: DBDep) -> schemas.UserPublic:
    user = await UserService(db).get_user(user_id)
    return schemas.UserPublic.model_validate(user)
