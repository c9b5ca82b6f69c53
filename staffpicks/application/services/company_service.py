"""Company service — the tenant settings screen."""

from typing import Optional

import structlog

from staffpicks.application.services.access_policy import require_company_id
from staffpicks.application.services.slugs import generate_slug, unique_slug
from staffpicks.core.exceptions import EntityNotFoundException, ForbiddenException, ValidationException
from staffpicks.domain.repositories.tenant_repository import CompanyRepository
from staffpicks.domain.roles import TENANT_ADMIN_ROLES, UserRole
from staffpicks.domain.schemas.auth import SessionUser
from staffpicks.domain.schemas.company import CompanyRead, CompanyUpdate

logger = structlog.get_logger(__name__)


def _get_company(companies: CompanyRepository, session: SessionUser, company_id: Optional[str]) -> dict:
    company = companies.get_by_id(require_company_id(session, company_id))
    if company is None:
        raise EntityNotFoundException("Company not found")
    return company


def get_company(companies: CompanyRepository, session: SessionUser, company_id: Optional[str] = None) -> CompanyRead:
    return CompanyRead.from_document(_get_company(companies, session, company_id))


def update_company(
    companies: CompanyRepository,
    session: SessionUser,
    body: CompanyUpdate,
    company_id: Optional[str] = None,
) -> CompanyRead:
    if UserRole(session.role) not in TENANT_ADMIN_ROLES:
        raise ForbiddenException("Only company administrators can edit company settings")
    company = _get_company(companies, session, company_id)

    provided = body.model_fields_set
    changes: dict = {}

    if "name" in provided:
        name = (body.name or "").strip()
        if not name:
            raise ValidationException("Company name cannot be empty")
        if name != company["name"]:
            changes["name"] = name
            changes["slug"] = unique_slug(
                generate_slug(name) or "company",
                lambda candidate: companies.slug_taken(candidate, exclude_id=company["_id"]),
            )

    for field, key in (
        ("description", "description"),
        ("logo_url", "logoUrl"),
        ("contact_email", "contactEmail"),
        ("contact_phone", "contactPhone"),
        ("billing_email", "billingEmail"),
    ):
        if field in provided:
            changes[key] = getattr(body, field)

    # Partial objects: merged into what is stored
    if body.address is not None:
        changes["address"] = {
            **(company.get("address") or {}),
            **body.address.model_dump(by_alias=True, exclude_unset=True),
        }
    if body.settings is not None:
        changes["settings"] = {**(company.get("settings") or {}), **body.settings}

    doc = companies.update(company["_id"], changes)
    logger.info("Company updated", company_id=str(company["_id"]), fields=sorted(changes))
    return CompanyRead.from_document(doc)
