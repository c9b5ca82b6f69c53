"""Company API routes — tenant settings."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from staffpicks.application.services.company_service import get_company, update_company
from staffpicks.domain.repositories.tenant_repository import CompanyRepository
from staffpicks.domain.schemas.auth import SessionUser
from staffpicks.domain.schemas.company import CompanyRead, CompanyUpdate
from staffpicks.interfaces.api.deps import get_current_session
from staffpicks.interfaces.deps import get_company_repository

router = APIRouter(prefix="/api/company", tags=["Company"])


@router.get("", response_model=CompanyRead)
def get_company_route(
    company_id: Optional[str] = Query(None, alias="companyId"),
    companies: CompanyRepository = Depends(get_company_repository),
    session: SessionUser = Depends(get_current_session),
):
    return get_company(companies, session, company_id)


@router.put("")
def update_company_route(
    body: CompanyUpdate,
    company_id: Optional[str] = Query(None, alias="companyId"),
    companies: CompanyRepository = Depends(get_company_repository),
    session: SessionUser = Depends(get_current_session),
):
    company = update_company(companies, session, body, company_id)
    return {"message": "Company updated successfully", "company": company}
