"""Pydantic schemas for stores."""

from datetime import datetime
from typing import Any, Optional

from staffpicks.domain.models.base import Address, ref
from staffpicks.domain.models.store import StoreStatus
from staffpicks.domain.schemas.base import CamelModel


class StoreBase(CamelModel):
    name: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None
    status: Optional[StoreStatus] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[Address] = None
    settings: Optional[dict[str, Any]] = None
    operating_hours: Optional[dict[str, dict[str, str]]] = None


class StoreCreate(StoreBase):
    company_id: Optional[str] = None


class StoreUpdate(StoreBase):
    pass


class AssignedUser(CamelModel):
    id: str
    first_name: str
    last_name: str
    email: str
    role: str


class StoreRead(CamelModel):
    id: str
    company_id: str
    code: str
    name: str
    description: Optional[str] = None
    status: StoreStatus
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[Address] = None
    settings: dict[str, Any] = {}
    operating_hours: Optional[dict[str, dict[str, str]]] = None
    librarian_count: Optional[int] = None
    assigned_users: Optional[list[AssignedUser]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: dict, **extra) -> "StoreRead":
        return cls(
            id=str(doc["_id"]),
            company_id=ref(doc["companyId"]),
            code=doc["code"],
            name=doc["name"],
            description=doc.get("description"),
            status=doc.get("status", StoreStatus.ACTIVE),
            contact_email=doc.get("contactEmail"),
            contact_phone=doc.get("contactPhone"),
            address=doc.get("address"),
            settings=doc.get("settings") or {},
            operating_hours=doc.get("operatingHours"),
            created_at=doc.get("createdAt"),
            updated_at=doc.get("updatedAt"),
            **extra,
        )
