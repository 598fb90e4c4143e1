"""
placement_portal/review/routes.py

Review Routes
Defines API endpoints related to company reviews:
- List active reviews with filters and sorting (Public)
- Fetch all active reviews of a company / a single review (Public)
- Submit a review (Alumni or Admin)
- Update or delete a review (Author or Admin)
- Toggle a helpful vote (Authenticated)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from placement_portal.core.dependencies import (
    AlumniOrAdminDep,
    CurrentUserDep,
    DBDep,
    PaginationParams,
)
from placement_portal.core.limiter import limiter
from placement_portal.core.schemas import MessageResponse, PaginatedResponse
from placement_portal.database.enums import ReviewSort
from placement_portal.review import schemas
from placement_portal.review.services import ReviewService

router = APIRouter(prefix="/api/reviews", tags=["Reviews"])


# ----------------------------------------------------
# Public Review Endpoints
# ----------------------------------------------------
@router.get(
    "/",
    response_model=PaginatedResponse[schemas.ReviewRead],
    status_code=status.HTTP_200_OK,
    summary="List Reviews",
    description="List active reviews, optionally filtered by company and/or author.",
)
@limiter.limit("30/minute")
async def list_reviews(
    request: Request,
    db: DBDep,
    company_id: UUID | None = Query(None, description="Only reviews of this company"),
    author_id: UUID | None = Query(None, description="Only reviews by this author"),
    sort: ReviewSort = Query(ReviewSort.NEWEST, description="Ordering of the results"),
    pagination: PaginationParams = Depends(),
) -> PaginatedResponse[schemas.ReviewRead]:
    reviews, total_count = await ReviewService(db).list_reviews(
        company_id=company_id,
        author_id=author_id,
        sort=sort,
        skip=pagination.skip,
        limit=pagination.limit,
    )
    return PaginatedResponse(
        total_count=total_count,
        has_next_page=(pagination.skip + pagination.limit) < total_count,
        items=[schemas.ReviewRead.model_validate(review, from_attributes=True) for review in reviews],
    )


@router.get(
    "/company/{company_id}",
    response_model=schemas.CompanyReviewList,
    status_code=status.HTTP_200_OK,
    summary="Company Reviews",
    description="All active reviews of one company, newest first.",
)
@limiter.limit("30/minute")
async def get_company_reviews(
    request: Request,
    company_id: UUID,
    db: DBDep,
) -> schemas.CompanyReviewList:
    reviews = await ReviewService(db).list_company_reviews(company_id)
    return schemas.CompanyReviewList(
        reviews=[schemas.ReviewRead.model_validate(review, from_attributes=True) for review in reviews],
        total=len(reviews),
    )


@router.get(
    "/{review_id}",
    response_model=schemas.ReviewRead,
    status_code=status.HTTP_200_OK,
    summary="Get Review",
)
@limiter.limit("30/minute")
async def get_review(
    request: Request,
    review_id: UUID,
    db: DBDep,
) -> schemas.ReviewRead:
    review = await ReviewService(db).get_review(review_id)
    return schemas.ReviewRead.model_validate(review, from_attributes=True)


# ----------------------------------------------------
# Authenticated Review Endpoints
# ----------------------------------------------------
@router.post(
    "/",
    response_model=schemas.ReviewRead,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Review",
    description="Submit a review of a company (alumni or admin only, one active review per company).",
)
@limiter.limit("5/minute")
async def submit_review(
    request: Request,
    payload: schemas.ReviewCreate,
    db: DBDep,
    current_user: AlumniOrAdminDep,
) -> schemas.ReviewRead:
    review = await ReviewService(db).create_review(author_id=current_user.id, data=payload)
    return schemas.ReviewRead.model_validate(review, from_attributes=True)


@router.put(
    "/{review_id}",
    response_model=schemas.ReviewRead,
    status_code=status.HTTP_200_OK,
    summary="Update Review",
    description="Partially update a review (author or admin). Only supplied fields change.",
)
@limiter.limit("10/minute")
async def update_review(
    request: Request,
    review_id: UUID,
    payload: schemas.ReviewUpdate,
    db: DBDep,
    current_user: CurrentUserDep,
) -> schemas.ReviewRead:
    review = await ReviewService(db).update_review(
        review_id=review_id,
        caller_id=current_user.id,
        caller_role=current_user.role,
        data=payload,
    )
    return schemas.ReviewRead.model_validate(review, from_attributes=True)


@router.delete(
    "/{review_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete Review",
    description="Soft-delete a review (author or admin).",
)
@limiter.limit("10/minute")
async def delete_review(
    request: Request,
    review_id: UUID,
    db: DBDep,
    current_user: CurrentUserDep,
) -> MessageResponse:
    await ReviewService(db).soft_delete_review(
        review_id=review_id, caller_id=current_user.id, caller_role=current_user.role
    )
    return MessageResponse(detail="Review deleted successfully")


@router.post(
    "/{review_id}/helpful",
    response_model=schemas.HelpfulToggleResponse,
    status_code=status.HTTP_200_OK,
    summary="Toggle Helpful Vote",
    description="Mark a review as helpful, or remove the caller's existing vote.",
)
@limiter.limit("20/minute")
async def toggle_helpful(
    request: Request,
    review_id: UUID,
    db: DBDep,
    current_user: CurrentUserDep,
) -> schemas.HelpfulToggleResponse:
    return await ReviewService(db).toggle_helpful(review_id=review_id, user_id=current_user.id)
