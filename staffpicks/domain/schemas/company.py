"""Pydantic schemas for the tenant (company) settings screen."""

from datetime import datetime
from typing import Any, Optional

from staffpicks.domain.models.base import Address
from staffpicks.domain.models.company import CompanyPlan, CompanyStatus
from staffpicks.domain.schemas.base import CamelModel


class CompanyUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    billing_email: Optional[str] = None
    address: Optional[Address] = None
    settings: Optional[dict[str, Any]] = None


class CompanyRead(CamelModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    status: CompanyStatus
    plan: CompanyPlan
    trial_ends_at: Optional[datetime] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    billing_email: Optional[str] = None
    address: Optional[Address] = None
    settings: dict[str, Any] = {}
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: dict) -> "CompanyRead":
        return cls(
            id=str(doc["_id"]),
            name=doc["name"],
            slug=doc["slug"],
            description=doc.get("description"),
            logo_url=doc.get("logoUrl"),
            status=doc["status"],
            plan=doc["plan"],
            trial_ends_at=doc.get("trialEndsAt"),
            contact_email=doc.get("contactEmail"),
            contact_phone=doc.get("contactPhone"),
            billing_email=doc.get("billingEmail"),
            address=doc.get("address"),
            settings=doc.get("settings") or {},
            created_at=doc.get("createdAt"),
            updated_at=doc.get("updatedAt"),
        )
