"""
company/models.py

Defines the Company model: an employer profile reviewed by alumni.
- `average_rating` and `total_reviews` are derived from the company's
  active reviews and are only written by the review aggregation step.
- Companies are never hard-deleted; `is_active` is the soft-delete flag.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, DateTime, Enum, Float, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.schema import CheckConstraint

from placement_portal.database.base import Base, utcnow
from placement_portal.database.enums import CompanySize, Industry

if TYPE_CHECKING:
    from placement_portal.review.models import Review


class Company(Base):
    """Employer profile with denormalized rating aggregates."""

    __tablename__ = "companies"
    __table_args__ = (
        CheckConstraint(
            "average_rating >= 0 AND average_rating <= 5", name="company_average_rating_range"
        ),
        CheckConstraint("total_reviews >= 0", name="company_total_reviews_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier for the company",
    )
    name: Mapped[str] = mapped_column(
        String(200), unique=True, nullable=False, comment="Unique company name"
    )
    industry: Mapped[Industry] = mapped_column(Enum(Industry, name="industry"), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    website: Mapped[str | None] = mapped_column(String, nullable=True)
    logo: Mapped[str | None] = mapped_column(String, nullable=True, comment="Logo URL or path")
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    company_size: Mapped[CompanySize | None] = mapped_column(
        Enum(CompanySize, name="company_size"), nullable=True
    )
    founded_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    # Derived fields, maintained by review aggregation
    average_rating: Mapped[float] = mapped_column(
        Float, default=0.0, nullable=False, comment="Mean overall rating of active reviews (1 dp)"
    )
    total_reviews: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False, comment="Number of active reviews"
    )

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    # -------------------------------------
    # Relationships
    # -------------------------------------
    # One-to-Many: A company receives many reviews (active and inactive)
    reviews: Mapped[list["Review"]] = relationship("Review", back_populates="company")
