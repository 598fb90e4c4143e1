"""
placement_portal/company/services.py

Company Services
Business logic for employer profiles:
- Search and list active companies, best rated first (Public)
- Fetch a single company and overview statistics (Public)
- Register a company (Alumni or Admin)
- Update or soft-delete a company (Admin)

The rating fields are never written here; they belong to review aggregation.
"""

import logging
from uuid import UUID

from fastapi import status
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.company import schemas
from placement_portal.core.exceptions import APIError, NotFoundError
from placement_portal.database.enums import Industry
from placement_portal.database.models import Company

logger = logging.getLogger(__name__)

TOP_COMPANIES_LIMIT = 5


class CompanyService:
    """Service layer for company profiles."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ---------------------------------------------------
    # Internal Helpers
    # ---------------------------------------------------
    async def _get_company_or_404(self, company_id: UUID, active_only: bool = True) -> Company:
        company = await self.db.get(Company, company_id)
        if not company or (active_only and not company.is_active):
            logger.warning(f"[COMPANY] Company not found: {company_id}")
            raise NotFoundError("Company not found")
        return company

    async def _name_taken(self, name: str, exclude_id: UUID | None = None) -> bool:
        stmt = select(Company.id).filter(func.lower(Company.name) == name.lower())
        if exclude_id:
            stmt = stmt.filter(Company.id != exclude_id)
        return (await self.db.execute(stmt)).first() is not None

    async def _commit_or_conflict(self) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"[COMPANY] Integrity error on commit: {e}")
            raise APIError(status.HTTP_400_BAD_REQUEST, "Company already exists")

    # ---------------------------------------------------
    # Retrieval
    # ---------------------------------------------------
    async def list_companies(
        self,
        search: str | None = None,
        industry: Industry | None = None,
        skip: int = 0,
        limit: int = 10,
    ) -> tuple[list[Company], int]:
        """List active companies, best rated first, with optional text search."""
        filters = [Company.is_active.is_(True)]
        if industry:
            filters.append(Company.industry == industry)
        if search and search.strip():
            term = f"%{search.strip().lower()}%"
            filters.append(
                or_(
                    func.lower(Company.name).like(term),
                    func.lower(Company.description).like(term),
                )
            )

        count_stmt = select(func.count()).select_from(Company).filter(*filters)
        total_count = (await self.db.execute(count_stmt)).scalar_one()

        stmt = (
            select(Company)
            .filter(*filters)
            .order_by(Company.average_rating.desc(), Company.total_reviews.desc(), Company.name)
            .offset(skip)
            .limit(limit)
        )
        companies = list((await self.db.execute(stmt)).scalars().all())
        logger.debug(f"[COMPANY] Listed {len(companies)}/{total_count} (search={search!r})")
        return companies, total_count

    async def get_company(self, company_id: UUID) -> Company:
        return await self._get_company_or_404(company_id)

    async def get_stats(self) -> schemas.CompanyStats:
        """Active company count, the best rated companies and per-industry counts."""
        active = Company.is_active.is_(True)

        total = (
            await self.db.execute(select(func.count()).select_from(Company).filter(active))
        ).scalar_one()

        top_stmt = (
            select(Company)
            .filter(active)
            .order_by(Company.average_rating.desc(), Company.total_reviews.desc())
            .limit(TOP_COMPANIES_LIMIT)
        )
        top = (await self.db.execute(top_stmt)).scalars().all()

        industry_stmt = (
            select(Company.industry, func.count(Company.id).label("count"))
            .filter(active)
            .group_by(Company.industry)
            .order_by(func.count(Company.id).desc())
        )
        industry_rows = (await self.db.execute(industry_stmt)).all()

        return schemas.CompanyStats(
            total_companies=total,
            top_companies=[schemas.TopCompany.model_validate(c) for c in top],
            industry_stats=[
                schemas.IndustryCount(industry=row.industry, count=row.count)
                for row in industry_rows
            ],
        )

    # ---------------------------------------------------
    # Mutations
    # ---------------------------------------------------
    async def create_company(self, data: schemas.CompanyCreate, creator_id: UUID) -> Company:
        """Register a company; names are unique ignoring case."""
        if await self._name_taken(data.name):
            logger.warning(f"[COMPANY] Duplicate company name attempt: {data.name!r}")
            raise APIError(status.HTTP_400_BAD_REQUEST, "Company already exists")

        company = Company(**data.model_dump())
        self.db.add(company)
        await self._commit_or_conflict()
        logger.info(f"[COMPANY] Company {company.id} ({company.name!r}) created by {creator_id}")
        return company

    async def update_company(self, company_id: UUID, data: schemas.CompanyUpdate) -> Company:
        """Apply a partial update to editable fields."""
        company = await self._get_company_or_404(company_id, active_only=False)

        changes = data.model_dump(exclude_unset=True)
        if "name" in changes and await self._name_taken(changes["name"], exclude_id=company_id):
            raise APIError(status.HTTP_400_BAD_REQUEST, "Company already exists")

        for field, value in changes.items():
            setattr(company, field, value)

        await self._commit_or_conflict()
        logger.info(f"[COMPANY] Company {company_id} updated: fields={sorted(changes)}")
        return company

    async def deactivate_company(self, company_id: UUID) -> None:
        """Soft-delete a company; its reviews and rating fields are kept."""
        company = await self._get_company_or_404(company_id, active_only=False)
        company.is_active = False
        await self.db.commit()
        logger.info(f"[COMPANY] Company {company_id} deactivated")
