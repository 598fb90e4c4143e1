"""
users/schemas.py

Schemas for user directory and administration:
- UserPublic: profile visible to anyone
- UserAdminRead: full account view for admins
- UserStats: platform-wide user statistics
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from placement_portal.database.enums import Branch, UserRole, UserType


class UserPublic(BaseModel):
    id: UUID
    name: str
    role: UserRole
    graduation_year: int
    branch: Branch
    current_company: str | None = None
    designation: str | None = None
    location: str | None = None
    linkedin_profile: str | None = None
    profile_picture: str | None = None
    is_verified: bool

    model_config = ConfigDict(from_attributes=True)


class UserAdminRead(UserPublic):
    email: str
    user_type: UserType
    phone: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class RoleCount(BaseModel):
    role: UserRole
    count: int


class BranchCount(BaseModel):
    branch: Branch
    count: int


class GraduationYearCount(BaseModel):
    graduation_year: int
    count: int


class RecentAlumnus(BaseModel):
    id: UUID
    name: str
    graduation_year: int
    current_company: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserStats(BaseModel):
    total_users: int
    verified_users: int
    verification_rate: int = Field(..., description="Verified share of active users, in percent")
    role_stats: list[RoleCount]
    branch_stats: list[BranchCount]
    graduation_year_stats: list[GraduationYearCount]
    recent_alumni: list[RecentAlumnus]
