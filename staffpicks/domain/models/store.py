"""Store domain model — maps to the 'stores' collection (sub-tenant)."""

from enum import Enum
from typing import Any, Optional

from bson import ObjectId
from pydantic import Field

from staffpicks.domain.models.base import Address, Document

COLLECTION = "stores"


class StoreStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"


class Store(Document):
    company_id: ObjectId
    # Unique within the company, stored upper-case (e.g. 'GENEVE_BALEXERT')
    code: str
    name: str
    description: Optional[str] = None
    status: StoreStatus = StoreStatus.ACTIVE
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[Address] = None
    settings: dict[str, Any] = Field(default_factory=dict)
    # {"monday": {"open": "09:00", "close": "19:00"}, ...}
    operating_hours: Optional[dict[str, dict[str, str]]] = None
