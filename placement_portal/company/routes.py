"""
placement_portal/company/routes.py

Company Routes
- Search and list companies, overview statistics, company detail (Public)
- Register a company (Alumni or Admin)
- Update and deactivate a company (Admin)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from placement_portal.company import schemas
from placement_portal.company.services import CompanyService
from placement_portal.core.dependencies import AdminDep, AlumniOrAdminDep, DBDep, PaginationParams
from placement_portal.core.limiter import limiter
from placement_portal.core.schemas import MessageResponse, PaginatedResponse
from placement_portal.database.enums import Industry

router = APIRouter(prefix="/api/companies", tags=["Companies"])


# ---------------------------------------------------
# Public Endpoints
# ---------------------------------------------------
@router.get(
    "/",
    response_model=PaginatedResponse[schemas.CompanyRead],
    status_code=status.HTTP_200_OK,
    summary="List Companies",
    description="Active companies, best rated first. `search` matches name or description.",
)
@limiter.limit("30/minute")
async def list_companies(
    request: Request,
    db: DBDep,
    search: str | None = Query(None, max_length=100),
    industry: Industry | None = Query(None),
    pagination: PaginationParams = Depends(),
) -> PaginatedResponse[schemas.CompanyRead]:
    companies, total_count = await CompanyService(db).list_companies(
        search=search, industry=industry, skip=pagination.skip, limit=pagination.limit
    )
    return PaginatedResponse(
        total_count=total_count,
        has_next_page=(pagination.skip + pagination.limit) < total_count,
        items=[schemas.CompanyRead.model_validate(c, from_attributes=True) for c in companies],
    )


@router.get(
    "/stats/overview",
    response_model=schemas.CompanyStats,
    status_code=status.HTTP_200_OK,
    summary="Company Statistics",
)
@limiter.limit("30/minute")
async def company_stats(request: Request, db: DBDep) -> schemas.CompanyStats:
    return await CompanyService(db).get_stats()


@router.get(
    "/{company_id}",
    response_model=schemas.CompanyRead,
    status_code=status.HTTP_200_OK,
    summary="Get Company",
)
@limiter.limit("30/minute")
async def get_company(request: Request, company_id: UUID, db: DBDep) -> schemas.CompanyRead:
    company = await CompanyService(db).get_company(company_id)
    return schemas.CompanyRead.model_validate(company, from_attributes=True)


# ---------------------------------------------------
# Restricted Endpoints
# ---------------------------------------------------
@router.post(
    "/",
    response_model=schemas.CompanyRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Company",
    description="Register a company (alumni or admin). Names are unique ignoring case.",
)
@limiter.limit("5/minute")
async def create_company(
    request: Request,
    payload: schemas.CompanyCreate,
    db: DBDep,
    current_user: AlumniOrAdminDep,
) -> schemas.CompanyRead:
    company = await CompanyService(db).create_company(payload, creator_id=current_user.id)
    return schemas.CompanyRead.model_validate(company, from_attributes=True)


@router.put(
    "/{company_id}",
    response_model=schemas.CompanyRead,
    status_code=status.HTTP_200_OK,
    summary="Update Company",
    description="Partially update a company (admin). Rating fields are not accepted.",
)
@limiter.limit("10/minute")
async def update_company(
    request: Request,
    company_id: UUID,
    payload: schemas.CompanyUpdate,
    db: DBDep,
    current_user: AdminDep,
) -> schemas.CompanyRead:
    company = await CompanyService(db).update_company(company_id, payload)
    return schemas.CompanyRead.model_validate(company, from_attributes=True)


@router.delete(
    "/{company_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Deactivate Company",
)
@limiter.limit("10/minute")
async def deactivate_company(
    request: Request,
    company_id: UUID,
    db: DBDep,
    current_user: AdminDep,
) -> MessageResponse:
    await CompanyService(db).deactivate_company(company_id)
    return MessageResponse(detail="Company deactivated successfully")
