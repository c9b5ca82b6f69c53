"""Company domain model — maps to the 'companies' collection (tenant root)."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import Field

from staffpicks.domain.models.base import Address, Document

COLLECTION = "companies"


class CompanyStatus(str, Enum):
    TRIAL = "trial"
    ACTIVE = "active"
    SUSPENDED = "suspended"


class CompanyPlan(str, Enum):
    STARTER = "starter"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"


class Company(Document):
    name: str
    slug: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    status: CompanyStatus = CompanyStatus.TRIAL
    plan: CompanyPlan = CompanyPlan.STARTER
    trial_ends_at: Optional[datetime] = None
    billing_email: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[Address] = None
    # Feature flags: allowPublicLists, requireBookApproval, maxUsersPerCompany, ...
    settings: dict[str, Any] = Field(default_factory=dict)
