"""
review/models.py

Defines the Review model for storing an alumna's evaluation of a company.
- Five sub-ratings plus an overall rating, each 1-5.
- Free-text title/content, ordered pros and cons, a recommendation verdict.
- Soft deletion through `is_active`; at most one active review per
  (author, company) is enforced by the service layer, not by a constraint.
- Helpful votes are tracked in ReviewHelpfulVote (one row per voter).
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.schema import CheckConstraint

from placement_portal.database.base import Base, utcnow
from placement_portal.database.enums import Recommendation

if TYPE_CHECKING:
    from placement_portal.company.models import Company
    from placement_portal.database.models import User

RATING_FIELDS = (
    "overall_rating",
    "work_culture",
    "work_life_balance",
    "career_growth",
    "compensation",
    "management",
)


class Review(Base):
    """
    Review submitted by an alumna about a company.
    """

    __tablename__ = "reviews"
    __table_args__ = (
        *(
            CheckConstraint(f"{field} >= 1 AND {field} <= 5", name=f"review_{field}_range")
            for field in RATING_FIELDS
        ),
        CheckConstraint("helpful_count >= 0", name="review_helpful_count_non_negative"),
        Index("ix_reviews_company_created", "company_id", "created_at"),
        Index("ix_reviews_author_created", "author_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier for the review",
    )

    # Foreign Keys (immutable after creation)
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", name="fk_reviews_author_id"),
        nullable=False,
        comment="User ID of the review author",
    )
    company_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("companies.id", name="fk_reviews_company_id"),
        nullable=False,
        comment="ID of the reviewed company",
    )

    # Ratings
    overall_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    work_culture: Mapped[int] = mapped_column(Integer, nullable=False)
    work_life_balance: Mapped[int] = mapped_column(Integer, nullable=False)
    career_growth: Mapped[int] = mapped_column(Integer, nullable=False)
    compensation: Mapped[int] = mapped_column(Integer, nullable=False)
    management: Mapped[int] = mapped_column(Integer, nullable=False)

    # Review content
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    pros: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    cons: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    recommendations: Mapped[Recommendation] = mapped_column(
        Enum(Recommendation, name="recommendation"), nullable=False
    )
    is_anonymous: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, comment="Hide author identity in responses"
    )
    linkedin_profile: Mapped[str | None] = mapped_column(String, nullable=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Helpful votes
    helpful_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Soft delete
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        comment="Timestamp when the review was created",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    # -------------------------------------
    # Relationships
    # -------------------------------------
    # Many-to-One: Many Reviews can be written by one User
    author: Mapped["User"] = relationship("User", back_populates="reviews", foreign_keys=[author_id])
    # Many-to-One: Many Reviews can target one Company
    company: Mapped["Company"] = relationship("Company", back_populates="reviews")
    # One-to-Many: one vote row per user who marked the review helpful
    helpful_votes: Mapped[list["ReviewHelpfulVote"]] = relationship(
        "ReviewHelpfulVote",
        back_populates="review",
        cascade="all, delete-orphan",
    )


class ReviewHelpfulVote(Base):
    """Membership row of a review's helpful-voter set."""

    __tablename__ = "review_helpful_votes"

    review_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("reviews.id", name="fk_helpful_votes_review_id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", name="fk_helpful_votes_user_id"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    review: Mapped["Review"] = relationship("Review", back_populates="helpful_votes")
