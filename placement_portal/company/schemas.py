"""
placement_portal/company/schemas.py

Company Schemas
- CompanyCreate / CompanyUpdate: editable company fields only; the derived
  rating fields are deliberately absent so no payload can set them
- CompanyRead: full company view including the derived rating fields
- CompanyStats: overview statistics
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints, model_validator

from placement_portal.core.validators import url_validator
from placement_portal.database.enums import CompanySize, Industry

CompanyNameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=200)]
TagStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
OptionalText = Annotated[str, StringConstraints(strip_whitespace=True)] | None


def _validate_founded_year(value: int | None) -> int | None:
    if value is not None and not 1800 <= value <= datetime.now().year:
        raise ValueError("Invalid founded year")
    return value


FoundedYear = Annotated[int | None, AfterValidator(_validate_founded_year)]


# ---------------------------------------------------
# Write Schemas
# ---------------------------------------------------
class CompanyCreate(BaseModel):
    """Payload for registering a company (Alumni or Admin)."""

    model_config = ConfigDict(extra="forbid")

    name: CompanyNameStr
    industry: Industry
    description: OptionalText = None
    website: Annotated[str | None, AfterValidator(url_validator)] = None
    logo: str | None = None
    location: OptionalText = None
    company_size: CompanySize | None = None
    founded_year: FoundedYear = None
    tags: list[TagStr] = Field(default_factory=list)


class CompanyUpdate(BaseModel):
    """Partial update (Admin). Unknown keys, including rating fields, are rejected."""

    model_config = ConfigDict(extra="forbid")

    name: CompanyNameStr | None = None
    industry: Industry | None = None
    description: OptionalText = None
    website: Annotated[str | None, AfterValidator(url_validator)] = None
    logo: str | None = None
    location: OptionalText = None
    company_size: CompanySize | None = None
    founded_year: FoundedYear = None
    tags: list[TagStr] | None = None

    @model_validator(mode="after")
    def reject_required_nulls(self) -> "CompanyUpdate":
        nulls = [
            name
            for name in ("name", "industry", "tags")
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return self


# ---------------------------------------------------
# Read Schemas
# ---------------------------------------------------
class CompanyRead(BaseModel):
    id: UUID
    name: str
    industry: Industry
    description: str | None = None
    website: str | None = None
    logo: str | None = None
    location: str | None = None
    company_size: CompanySize | None = None
    founded_year: int | None = None
    tags: list[str]
    average_rating: float = Field(..., description="Server-computed mean of active review ratings")
    total_reviews: int = Field(..., description="Server-computed count of active reviews")
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TopCompany(BaseModel):
    id: UUID
    name: str
    average_rating: float
    total_reviews: int

    model_config = ConfigDict(from_attributes=True)


class IndustryCount(BaseModel):
    industry: Industry
    count: int


class CompanyStats(BaseModel):
    total_companies: int
    top_companies: list[TopCompany]
    industry_stats: list[IndustryCount]
