"""
placement_portal/review/services.py

Review Services
Business logic for company reviews:
- Submit a review (one active review per author and company) (Alumni)
- Partially update or soft-delete a review (Author or Admin)
- Toggle a helpful vote (Authenticated)
- List / fetch active reviews (Public)
- Onboarding review that finds or creates the company by name and location

Every mutation that can change a company's set of active reviews
re-runs the rating aggregation for that company after the review write
is committed. A failed aggregation is logged and does not undo the review.
"""

import logging
from collections.abc import Sequence
from uuid import UUID

from fastapi import status
from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.elements import ColumnElement

from placement_portal.core.config import settings
from placement_portal.core.exceptions import (
    APIError,
    AuthorizationError,
    DuplicateReviewError,
    FieldValidationError,
    NotFoundError,
)
from placement_portal.database.enums import Recommendation, ReviewSort, UserRole
from placement_portal.database.models import Company, Review, ReviewHelpfulVote
from placement_portal.review import schemas
from placement_portal.review.aggregation import mean_rating, refresh_company_rating

logger = logging.getLogger(__name__)

REVIEW_SORT_ORDER: dict[ReviewSort, tuple[ColumnElement, ...]] = {
    ReviewSort.NEWEST: (Review.created_at.desc(),),
    ReviewSort.OLDEST: (Review.created_at.asc(),),
    ReviewSort.RATING: (Review.overall_rating.desc(), Review.created_at.desc()),
    ReviewSort.HELPFUL: (Review.helpful_count.desc(), Review.created_at.desc()),
}


# ---------------------------------------------------
# Review Service
# ---------------------------------------------------
class ReviewService:
    """Service layer for the review lifecycle and company rating upkeep."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ---------------------------------------------------
    # Internal Helpers
    # ---------------------------------------------------
    async def _get_active_review(self, review_id: UUID, populated: bool = False) -> Review:
        """Fetch an active review or raise NotFoundError."""
        stmt = select(Review).filter(Review.id == review_id, Review.is_active.is_(True))
        if populated:
            stmt = stmt.options(
                selectinload(Review.author), selectinload(Review.company)
            ).execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        review = result.scalars().first()
        if not review:
            logger.warning(f"[REVIEW] Active review not found: review_id={review_id}")
            raise NotFoundError("Review not found")
        return review

    async def _get_populated(self, review_id: UUID) -> Review:
        """Reload a review with author and company resolved for display."""
        stmt = (
            select(Review)
            .options(selectinload(Review.author), selectinload(Review.company))
            .filter(Review.id == review_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().one()

    async def _reaggregate(self, company_id: UUID) -> None:
        """Refresh the company's rating; failures are logged, never raised."""
        try:
            await refresh_company_rating(self.db, company_id)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"[AGGREGATE] Failed to refresh rating for company {company_id}: {e}",
                exc_info=True,
            )

    @staticmethod
    def _ensure_can_modify(review: Review, caller_id: UUID, caller_role: UserRole) -> None:
        if review.author_id != caller_id and caller_role != UserRole.ADMIN:
            logger.warning(
                f"[REVIEW] User {caller_id} ({caller_role}) denied access to review {review.id}"
            )
            raise AuthorizationError("Not authorized to modify this review")

    async def _has_active_review(self, author_id: UUID, company_id: UUID) -> bool:
        result = await self.db.execute(
            select(Review.id).filter(
                Review.author_id == author_id,
                Review.company_id == company_id,
                Review.is_active.is_(True),
            )
        )
        return result.first() is not None

    # ---------------------------------------------------
    # Review Submission
    # ---------------------------------------------------
    async def create_review(self, author_id: UUID, data: schemas.ReviewCreate) -> Review:
        """
        Submit a review for a company.
        Rejects a second active review by the same author for the same company,
        then re-aggregates the company's rating.
        """
        logger.info(f"[SUBMIT] User {author_id} submitting review for company {data.company_id}")

        company = await self.db.get(Company, data.company_id)
        if not company or not company.is_active:
            logger.warning(f"[SUBMIT] Company not found or inactive: {data.company_id}")
            raise NotFoundError("Company not found")

        # Existence check, not a constraint: two concurrent submissions can both pass.
        if await self._has_active_review(author_id, data.company_id):
            logger.warning(
                f"[SUBMIT] Duplicate review attempt: author={author_id} company={data.company_id}"
            )
            raise DuplicateReviewError()

        review = Review(author_id=author_id, **data.model_dump())
        self.db.add(review)
        await self.db.commit()
        review_id = review.id
        logger.info(f"[SUBMIT] Review created successfully: review_id={review_id}")

        await self._reaggregate(data.company_id)
        return await self._get_populated(review_id)

    # ---------------------------------------------------
    # Review Update / Soft Delete
    # ---------------------------------------------------
    async def update_review(
        self,
        review_id: UUID,
        caller_id: UUID,
        caller_role: UserRole,
        data: schemas.ReviewUpdate,
    ) -> Review:
        """
        Apply a partial update. Fields absent from the payload keep their values.
        Re-aggregates the company since ratings may have changed.
        """
        review = await self._get_active_review(review_id)
        self._ensure_can_modify(review, caller_id, caller_role)

        changes = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(review, field, value)

        company_id = review.company_id
        await self.db.commit()
        logger.info(f"[UPDATE] Review {review_id} updated by {caller_id}: fields={sorted(changes)}")

        await self._reaggregate(company_id)
        return await self._get_populated(review_id)

    async def soft_delete_review(
        self, review_id: UUID, caller_id: UUID, caller_role: UserRole
    ) -> None:
        """Deactivate a review and re-aggregate the company without it."""
        review = await self._get_active_review(review_id)
        self._ensure_can_modify(review, caller_id, caller_role)

        company_id = review.company_id
        review.is_active = False
        await self.db.commit()
        logger.info(f"[DELETE] Review {review_id} deactivated by {caller_id}")

        await self._reaggregate(company_id)

    # ---------------------------------------------------
    # Helpful Votes
    # ---------------------------------------------------
    async def toggle_helpful(self, review_id: UUID, user_id: UUID) -> schemas.HelpfulToggleResponse:
        """Add the caller's helpful vote, or remove it if already present."""
        review = await self._get_active_review(review_id)

        vote = await self.db.get(ReviewHelpfulVote, (review_id, user_id))
        if vote:
            await self.db.delete(vote)
            review.helpful_count = max(0, review.helpful_count - 1)
            has_voted = False
            detail = "Helpful vote removed"
        else:
            self.db.add(ReviewHelpfulVote(review_id=review_id, user_id=user_id))
            review.helpful_count += 1
            has_voted = True
            detail = "Review marked as helpful"

        await self.db.commit()
        logger.info(
            f"[HELPFUL] User {user_id} toggled vote on review {review_id}: "
            f"has_voted={has_voted} helpful_count={review.helpful_count}"
        )
        return schemas.HelpfulToggleResponse(
            detail=detail, helpful_count=review.helpful_count, has_voted=has_voted
        )

    # ---------------------------------------------------
    # Review Retrieval
    # ---------------------------------------------------
    async def get_review(self, review_id: UUID) -> Review:
        """Fetch one active review with author and company resolved."""
        return await self._get_active_review(review_id, populated=True)

    async def list_reviews(
        self,
        company_id: UUID | None = None,
        author_id: UUID | None = None,
        sort: ReviewSort = ReviewSort.NEWEST,
        skip: int = 0,
        limit: int = 10,
    ) -> tuple[list[Review], int]:
        """List active reviews, optionally filtered by company and/or author."""
        filters = [Review.is_active.is_(True)]
        if company_id:
            filters.append(Review.company_id == company_id)
        if author_id:
            filters.append(Review.author_id == author_id)

        count_stmt = select(func.count()).select_from(Review).filter(*filters)
        total_count = (await self.db.execute(count_stmt)).scalar_one()

        stmt = (
            select(Review)
            .options(selectinload(Review.author), selectinload(Review.company))
            .filter(*filters)
            .order_by(*REVIEW_SORT_ORDER[sort])
            .offset(skip)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        reviews = list(result.scalars().all())
        logger.debug(
            f"[LIST] Reviews company={company_id} author={author_id} sort={sort.value}: "
            f"{len(reviews)}/{total_count}"
        )
        return reviews, total_count

    async def list_company_reviews(self, company_id: UUID) -> Sequence[Review]:
        """All active reviews for a company, newest first, without pagination."""
        stmt = (
            select(Review)
            .options(selectinload(Review.author), selectinload(Review.company))
            .filter(Review.company_id == company_id, Review.is_active.is_(True))
            .order_by(Review.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    # ---------------------------------------------------
    # Onboarding (Initial) Review
    # ---------------------------------------------------
    async def find_or_create_company(self, name: str, location: str) -> Company:
        """
        Resolve an active company by case-insensitive name and location.

        - one match: reused
        - several matches: the oldest is reused and the ambiguity is logged
        - no match: a company is created with the placeholder industry, unless
          the name is already taken by a company that did not match (409)
        """
        stmt = (
            select(Company)
            .filter(
                func.lower(Company.name) == name.lower(),
                func.lower(Company.location) == location.lower(),
                Company.is_active.is_(True),
            )
            .order_by(Company.created_at.asc(), Company.id.asc())
        )
        matches = list((await self.db.execute(stmt)).scalars().all())

        if len(matches) > 1:
            logger.warning(
                f"[BOOTSTRAP] {len(matches)} companies match name={name!r} location={location!r}: "
                f"{[str(c.id) for c in matches]}; using oldest {matches[0].id}"
            )
        if matches:
            logger.info(f"[BOOTSTRAP] Reusing company {matches[0].id} for {name!r}/{location!r}")
            return matches[0]

        name_taken = await self.db.execute(
            select(Company.id).filter(func.lower(Company.name) == name.lower())
        )
        if name_taken.first() is not None:
            logger.warning(f"[BOOTSTRAP] Company name {name!r} exists with a different location")
            raise APIError(
                status.HTTP_409_CONFLICT,
                "A company with this name already exists in a different location",
            )

        company = Company(
            name=name,
            industry=settings.DEFAULT_COMPANY_INDUSTRY,
            location=location,
            description="",
            website="",
            logo="",
            is_active=True,
        )
        self.db.add(company)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"[BOOTSTRAP] Concurrent creation of company {name!r}: {e}")
            raise APIError(status.HTTP_409_CONFLICT, "Company was created concurrently, please retry")

        logger.info(f"[BOOTSTRAP] Created company {company.id} for {name!r}/{location!r}")
        return company

    async def create_initial_review(
        self, author_id: UUID, data: schemas.InitialReviewCreate
    ) -> Review:
        """
        Create the onboarding review: resolve the company, derive the overall
        rating from the five sub-ratings and delegate to `create_review`.
        """
        company = await self.find_or_create_company(data.company_name, data.location)
        logger.info(
            f"[BOOTSTRAP] Initial review by {author_id} for company {company.id} "
            f"(join_year={data.join_year}, salary={data.salary})"
        )

        try:
            payload = schemas.ReviewCreate(
                company_id=company.id,
                overall_rating=mean_rating(data.sub_ratings),
                work_culture=data.work_culture,
                work_life_balance=data.work_life_balance,
                career_growth=data.career_growth,
                compensation=data.compensation,
                management=data.management,
                title=f"Review of {data.company_name}",
                content=data.review,
                pros=[],
                cons=[],
                recommendations=Recommendation.YES,
                is_anonymous=False,
            )
        except ValidationError as e:
            raise FieldValidationError.from_pydantic(e)

        return await self.create_review(author_id, payload)
