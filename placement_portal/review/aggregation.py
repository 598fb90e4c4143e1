"""
review/aggregation.py

Company rating aggregation.

`compute_rating_summary` is the pure part: it turns the overall ratings of a
company's active reviews into `(average_rating, total_reviews)`.
`refresh_company_rating` reads the active set and persists the summary with a
single UPDATE keyed by company id. There is no lock around the
read-then-write; concurrent mutations resolve as last-write-wins.

An empty active set leaves the company's stored values untouched.
"""

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.database.models import Company, Review

logger = logging.getLogger(__name__)

_ONE_DECIMAL = Decimal("0.1")
_WHOLE = Decimal("1")


class RatingSummary(NamedTuple):
    average_rating: float
    total_reviews: int


def round_half_up(value: Decimal | float | int, places: int = 0) -> Decimal:
    """Rounds .5 away from zero (4.25 -> 4.3 at one place), unlike builtin round()."""
    quantum = _WHOLE if places == 0 else Decimal(1).scaleb(-places)
    return Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)


def mean_rating(ratings: Iterable[int]) -> int:
    """Rounded mean of sub-ratings, used as a derived overall rating."""
    values = list(ratings)
    if not values:
        raise ValueError("mean_rating requires at least one rating")
    return int(round_half_up(Decimal(sum(values)) / len(values)))


def compute_rating_summary(ratings: Iterable[int]) -> RatingSummary | None:
    """
    Computes the company aggregate from the overall ratings of its active reviews.

    Returns None for an empty set: the caller must then leave the stored
    values as they are.
    """
    values = list(ratings)
    if not values:
        return None
    average = (Decimal(sum(values)) / len(values)).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)
    return RatingSummary(average_rating=float(average), total_reviews=len(values))


async def refresh_company_rating(db: AsyncSession, company_id: UUID) -> RatingSummary | None:
    """
    Recomputes and persists `average_rating` / `total_reviews` for one company.

    Returns the summary written, or None when the update was skipped because
    the company has no active reviews.
    """
    result = await db.execute(
        select(Review.overall_rating).filter(
            Review.company_id == company_id, Review.is_active.is_(True)
        )
    )
    summary = compute_rating_summary(result.scalars().all())

    if summary is None:
        logger.warning(
            f"[AGGREGATE] No active reviews for company {company_id}, rating fields left unchanged"
        )
        return None

    await db.execute(
        update(Company)
        .where(Company.id == company_id)
        .values(average_rating=summary.average_rating, total_reviews=summary.total_reviews)
    )
    await db.commit()
    logger.info(
        f"[AGGREGATE] Company {company_id}: average_rating={summary.average_rating} "
        f"total_reviews={summary.total_reviews}"
    )
    return summary
