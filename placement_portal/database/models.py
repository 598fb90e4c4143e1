"""
placement_portal/database/models.py

Core SQLAlchemy ORM Models

Defines:
- User: Authenticated platform accounts (students, alumni, admins)

Includes relationships with:
- Review (authored reviews)

Importing this module also registers Company, Review and
ReviewHelpfulVote on the shared metadata.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from placement_portal.company.models import Company
from placement_portal.database.base import Base, utcnow
from placement_portal.database.enums import Branch, UserRole, UserType
from placement_portal.review.models import Review, ReviewHelpfulVote

__all__ = ["Company", "Review", "ReviewHelpfulVote", "User"]


# ---------------------------------------------------
# User Model: Authenticated Platform User
# ---------------------------------------------------


class User(Base):
    __tablename__ = "users"

    # -------------------------------------
    # Fields
    # -------------------------------------
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier for the user",
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, comment="Display name")
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False, comment="Lower-cased institutional email"
    )
    hashed_password: Mapped[str] = mapped_column(
        String, nullable=False, comment="Hashed password for authentication"
    )
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role"),
        default=UserRole.STUDENT,
        nullable=False,
        comment="User role (student, alumni, admin)",
    )
    user_type: Mapped[UserType] = mapped_column(
        Enum(UserType, name="user_type"),
        default=UserType.READER,
        nullable=False,
        comment="Onboarding choice (reader, writer)",
    )
    graduation_year: Mapped[int] = mapped_column(Integer, nullable=False)
    branch: Mapped[Branch] = mapped_column(Enum(Branch, name="branch"), nullable=False)

    # Optional profile fields
    current_company: Mapped[str | None] = mapped_column(String(200), nullable=True)
    designation: Mapped[str | None] = mapped_column(String(200), nullable=True)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    linkedin_profile: Mapped[str | None] = mapped_column(String, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    profile_picture: Mapped[str | None] = mapped_column(String, nullable=True)

    is_verified: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, comment="Whether an admin verified the user"
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False, comment="Soft-disable flag; users are never deleted"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        comment="Timestamp when the user was created",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        comment="Timestamp when the user was last updated",
    )

    # -------------------------------------
    # Relationships
    # -------------------------------------

    # One-to-Many: An alumna can author many reviews (one active per company)
    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="author",
        foreign_keys="Review.author_id",
    )
