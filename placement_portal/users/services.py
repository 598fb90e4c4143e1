"""
users/services.py

User directory and account administration:
- Public profile lookup
- Admin listing with filters
- Verify / activate / deactivate accounts
- Platform statistics
"""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.core.exceptions import NotFoundError
from placement_portal.database.enums import Branch, UserRole
from placement_portal.database.models import User
from placement_portal.review.aggregation import round_half_up
from placement_portal.users import schemas

logger = logging.getLogger(__name__)

STATS_TOP_N = 5


class UserService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get_user_or_404(self, user_id: UUID, active_only: bool = True) -> User:
        user = await self.db.get(User, user_id)
        if not user or (active_only and not user.is_active):
            logger.warning(f"[USERS] User not found: {user_id}")
            raise NotFoundError("User not found")
        return user

    # ---------------------------------------------------
    # Retrieval
    # ---------------------------------------------------
    async def get_user(self, user_id: UUID) -> User:
        return await self._get_user_or_404(user_id)

    async def list_users(
        self,
        role: UserRole | None = None,
        branch: Branch | None = None,
        graduation_year: int | None = None,
        skip: int = 0,
        limit: int = 10,
    ) -> tuple[list[User], int]:
        """Active users, newest first."""
        filters = [User.is_active.is_(True)]
        if role:
            filters.append(User.role == role)
        if branch:
            filters.append(User.branch == branch)
        if graduation_year:
            filters.append(User.graduation_year == graduation_year)

        total_count = (
            await self.db.execute(select(func.count()).select_from(User).filter(*filters))
        ).scalar_one()
        stmt = (
            select(User)
            .filter(*filters)
            .order_by(User.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        users = list((await self.db.execute(stmt)).scalars().all())
        return users, total_count

    # ---------------------------------------------------
    # Account Administration
    # ---------------------------------------------------
    async def _set_flag(self, user_id: UUID, field: str, value: bool, admin_id: UUID) -> User:
        user = await self._get_user_or_404(user_id, active_only=False)
        setattr(user, field, value)
        await self.db.commit()
        logger.info(f"[ADMIN] {admin_id} set {field}={value} on user {user_id}")
        return user

    async def verify_user(self, user_id: UUID, admin_id: UUID) -> User:
        return await self._set_flag(user_id, "is_verified", True, admin_id)

    async def activate_user(self, user_id: UUID, admin_id: UUID) -> User:
        return await self._set_flag(user_id, "is_active", True, admin_id)

    async def deactivate_user(self, user_id: UUID, admin_id: UUID) -> User:
        return await self._set_flag(user_id, "is_active", False, admin_id)

    # ---------------------------------------------------
    # Statistics
    # ---------------------------------------------------
    async def get_stats(self) -> schemas.UserStats:
        active = User.is_active.is_(True)

        total = (
            await self.db.execute(select(func.count()).select_from(User).filter(active))
        ).scalar_one()
        verified = (
            await self.db.execute(
                select(func.count()).select_from(User).filter(active, User.is_verified.is_(True))
            )
        ).scalar_one()
        rate = int(round_half_up(verified * 100 / total)) if total else 0

        role_rows = (
            await self.db.execute(
                select(User.role, func.count(User.id).label("count")).filter(active).group_by(User.role)
            )
        ).all()
        branch_rows = (
            await self.db.execute(
                select(User.branch, func.count(User.id).label("count"))
                .filter(active)
                .group_by(User.branch)
                .order_by(func.count(User.id).desc())
            )
        ).all()
        year_rows = (
            await self.db.execute(
                select(User.graduation_year, func.count(User.id).label("count"))
                .filter(active)
                .group_by(User.graduation_year)
                .order_by(User.graduation_year.desc())
                .limit(STATS_TOP_N)
            )
        ).all()
        recent_alumni = (
            await self.db.execute(
                select(User)
                .filter(active, User.role == UserRole.ALUMNI)
                .order_by(User.created_at.desc())
                .limit(STATS_TOP_N)
            )
        ).scalars().all()

        return schemas.UserStats(
            total_users=total,
            verified_users=verified,
            verification_rate=rate,
            role_stats=[schemas.RoleCount(role=r.role, count=r.count) for r in role_rows],
            branch_stats=[schemas.BranchCount(branch=r.branch, count=r.count) for r in branch_rows],
            graduation_year_stats=[
                schemas.GraduationYearCount(graduation_year=r.graduation_year, count=r.count)
                for r in year_rows
            ],
            recent_alumni=[schemas.RecentAlumnus.model_validate(u) for u in recent_alumni],
        )
