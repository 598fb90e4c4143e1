"""
placement_portal/review/schemas.py

Review Schemas
Defines Pydantic schemas for company reviews:
- ReviewCreate / ReviewUpdate: author-submitted payloads with field constraints
- InitialReviewCreate: onboarding payload that may name a new company
- ReviewRead: populated review returned to clients (author hidden when anonymous)
- HelpfulToggleResponse: result of a helpful-vote toggle
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)

from placement_portal.core.validators import url_validator
from placement_portal.database.enums import Branch, Industry, Recommendation

# ---------------------------------------------------
# Constrained Field Types
# ---------------------------------------------------
RatingInt = Annotated[int, Field(ge=1, le=5, description="Rating from 1 (lowest) to 5 (highest)")]
TitleStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=5, max_length=100)]
ContentStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=50, max_length=2000)]
PointStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=200)]
LinkStr = Annotated[str | None, AfterValidator(url_validator)]


# ---------------------------------------------------
# Partial Schemas for Embedding in Review Responses
# ---------------------------------------------------
class ReviewAuthorInfo(BaseModel):
    """Partial author information for embedding in review responses."""

    id: UUID
    name: str
    email: str
    graduation_year: int
    branch: Branch
    current_company: str | None = None
    designation: str | None = None
    linkedin_profile: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ReviewCompanyInfo(BaseModel):
    """Partial company information for embedding in review responses."""

    id: UUID
    name: str
    industry: Industry
    logo: str | None = None

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------
# Schema for Creating a Review
# ---------------------------------------------------
class ReviewCreate(BaseModel):
    """Payload schema used when an alumna submits a review of a company."""

    company_id: UUID = Field(..., description="Company being reviewed")
    overall_rating: RatingInt
    work_culture: RatingInt
    work_life_balance: RatingInt
    career_growth: RatingInt
    compensation: RatingInt
    management: RatingInt
    title: TitleStr
    content: ContentStr
    pros: list[PointStr] = Field(default_factory=list)
    cons: list[PointStr] = Field(default_factory=list)
    recommendations: Recommendation
    is_anonymous: bool = False
    linkedin_profile: LinkStr = None


# ---------------------------------------------------
# Schema for Updating a Review (Author or Admin)
# ---------------------------------------------------
class ReviewUpdate(BaseModel):
    """
    Partial update payload. Only fields present in the request are applied;
    the author and company of a review cannot be changed.
    """

    model_config = ConfigDict(extra="forbid")

    overall_rating: RatingInt | None = None
    work_culture: RatingInt | None = None
    work_life_balance: RatingInt | None = None
    career_growth: RatingInt | None = None
    compensation: RatingInt | None = None
    management: RatingInt | None = None
    title: TitleStr | None = None
    content: ContentStr | None = None
    pros: list[PointStr] | None = None
    cons: list[PointStr] | None = None
    recommendations: Recommendation | None = None
    is_anonymous: bool | None = None
    linkedin_profile: LinkStr = None

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> "ReviewUpdate":
        """A field sent as null would blank a required column; only the link may be cleared."""
        nulls = [
            name
            for name in self.model_fields_set
            if getattr(self, name) is None and name != "linkedin_profile"
        ]
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(sorted(nulls))}")
        return self


# ---------------------------------------------------
# Schema for the Onboarding (Initial) Review
# ---------------------------------------------------
class InitialReviewCreate(BaseModel):
    """
    Payload submitted right after a writer completes onboarding. The company is
    named rather than referenced and is created when no match exists.
    """

    company_name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=90)]
    location: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=200)]
    join_year: int = Field(..., ge=2000, description="Year the author joined the company")
    salary: float = Field(..., ge=0, description="Annual package")
    review: ContentStr
    work_culture: RatingInt
    work_life_balance: RatingInt
    career_growth: RatingInt
    compensation: RatingInt
    management: RatingInt

    @field_validator("join_year")
    @classmethod
    def validate_join_year(cls, value: int) -> int:
        if value > datetime.now().year:
            raise ValueError("Invalid join year")
        return value

    @property
    def sub_ratings(self) -> list[int]:
        return [
            self.work_culture,
            self.work_life_balance,
            self.career_growth,
            self.compensation,
            self.management,
        ]


# ---------------------------------------------------
# Schema for Reading a Review
# ---------------------------------------------------
class ReviewRead(BaseModel):
    """Populated review. `author` is null when the review is anonymous."""

    id: UUID
    author: ReviewAuthorInfo | None = None
    company: ReviewCompanyInfo

    overall_rating: int
    work_culture: int
    work_life_balance: int
    career_growth: int
    compensation: int
    management: int

    title: str
    content: str
    pros: list[str]
    cons: list[str]
    recommendations: Recommendation
    is_anonymous: bool
    linkedin_profile: str | None = None
    is_verified: bool
    helpful_count: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @model_validator(mode="after")
    def hide_anonymous_author(self) -> "ReviewRead":
        if self.is_anonymous:
            self.author = None
            self.linkedin_profile = None
        return self


class CompanyReviewList(BaseModel):
    """All active reviews of one company (unpaginated)."""

    reviews: list[ReviewRead]
    total: int


# ---------------------------------------------------
# Helpful Vote Response
# ---------------------------------------------------
class HelpfulToggleResponse(BaseModel):
    detail: str = Field(..., description="What the toggle did")
    helpful_count: int = Field(..., description="Helpful votes after the toggle")
    has_voted: bool = Field(..., description="Whether the caller's vote is now recorded")
