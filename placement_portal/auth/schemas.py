"""
auth/schemas.py

Defines Pydantic models for authentication flows:
- Registration & login request payloads
- JWT token payload and response structure
- Authenticated user response schema
- Profile update, onboarding and password change payloads
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    field_validator,
)

from placement_portal.core.validators import (
    institutional_email_validator,
    password_validator,
    url_validator,
)
from placement_portal.database.enums import Branch, UserRole, UserType

# --------------------------------------------------
# Custom Types
# --------------------------------------------------

PasswordStr = Annotated[str, AfterValidator(password_validator)]
InstitutionalEmail = Annotated[EmailStr, AfterValidator(institutional_email_validator)]
NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
ProfileText = Annotated[str, StringConstraints(strip_whitespace=True, max_length=200)] | None
LinkStr = Annotated[str | None, AfterValidator(url_validator)]


# --------------------------------------------------
# AUTH REQUEST SCHEMAS
# --------------------------------------------------


class RegisterRequest(BaseModel):
    """
    Request schema for new user registration. New accounts start as students.
    """

    name: NameStr = Field(..., description="Display name")
    email: InstitutionalEmail = Field(..., description="Institutional email address")
    password: PasswordStr = Field(..., description="ASCII password, 6 to 128 characters")
    graduation_year: int = Field(..., ge=2000, description="Year of graduation")
    branch: Branch
    linkedin_profile: LinkStr = None

    @field_validator("graduation_year")
    @classmethod
    def validate_graduation_year(cls, value: int) -> int:
        if value > datetime.now().year + 5:
            raise ValueError("Invalid graduation year")
        return value


class LoginRequest(BaseModel):
    """
    Request schema for user login using JSON payload.
    """

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="Account password")


class ProfileUpdateRequest(BaseModel):
    """Editable profile fields. Empty values are ignored."""

    model_config = ConfigDict(extra="forbid")

    name: NameStr | None = None
    current_company: ProfileText = None
    designation: ProfileText = None
    location: ProfileText = None
    linkedin_profile: LinkStr = None


class OnboardingRequest(BaseModel):
    """Post-registration choice of role and reader/writer type."""

    model_config = ConfigDict(extra="forbid")

    role: UserRole | None = None
    user_type: UserType | None = None

    @field_validator("role")
    @classmethod
    def reject_admin_role(cls, value: UserRole | None) -> UserRole | None:
        if value == UserRole.ADMIN:
            raise ValueError("Role must be student or alumni")
        return value


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: PasswordStr


# --------------------------------------------------
# AUTH TOKEN SCHEMAS
# --------------------------------------------------


class TokenPayload(BaseModel):
    """
    Decoded JWT payload structure.
    """

    sub: UUID = Field(..., description="Subject (user ID)")
    role: UserRole = Field(..., description="User role encoded in the token")
    exp: int = Field(..., description="Expiration timestamp of the token")
    jti: str = Field(..., description="JWT ID (used for token blacklist)")


# --------------------------------------------------
# AUTH RESPONSE SCHEMAS
# --------------------------------------------------


class AuthUserResponse(BaseModel):
    """
    Response schema representing authenticated user data.
    """

    id: UUID = Field(..., description="Unique identifier for the user")
    name: str
    email: str = Field(..., description="User's email address")
    role: UserRole = Field(..., description="User's role in the system")
    user_type: UserType
    graduation_year: int
    branch: Branch
    current_company: str | None = None
    designation: str | None = None
    location: str | None = None
    linkedin_profile: str | None = None
    profile_picture: str | None = None
    is_verified: bool
    created_at: datetime = Field(..., description="Timestamp when the user was created")
    updated_at: datetime = Field(..., description="Timestamp when the user was last updated")

    model_config = ConfigDict(from_attributes=True)


class AuthSuccessResponse(BaseModel):
    """
    Response schema after successful login or registration.
    """

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Type of the token (default: bearer)")
    user: AuthUserResponse = Field(..., description="Details of the authenticated user")
