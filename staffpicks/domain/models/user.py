"""User domain model — maps to the 'users' collection."""

from datetime import datetime
from enum import Enum
from typing import Optional

from bson import ObjectId
from pydantic import Field, model_validator

from staffpicks.domain.models.base import Document
from staffpicks.domain.roles import UserRole

COLLECTION = "users"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class User(Document):
    company_id: Optional[ObjectId] = None
    store_id: Optional[ObjectId] = None
    first_name: str
    last_name: str
    email: str
    password_hash: str
    role: UserRole = UserRole.LIBRARIAN
    status: UserStatus = UserStatus.ACTIVE
    sections: list[str] = Field(default_factory=list)
    avatar_url: Optional[str] = None
    failed_login_attempts: int = 0
    locked_until: Optional[datetime] = None
    last_login_at: Optional[datetime] = None
    last_login_ip: Optional[str] = None
    deleted_at: Optional[datetime] = None

    @model_validator(mode="after")
    def check_role_scope(self):
        role = UserRole(self.role)
        if role.requires_store and self.store_id is None:
            raise ValueError(f"role '{role.value}' requires a store")
        if role is UserRole.ADMIN and (self.store_id is not None or self.company_id is not None):
            raise ValueError("platform admins cannot belong to a company or store")
        if role.requires_company and self.company_id is None:
            raise ValueError(f"role '{role.value}' requires a company")
        return self

    def to_document(self) -> dict:
        doc = super().to_document()
        doc["email"] = self.email.strip().lower()
        return doc


def full_name(doc: dict) -> str:
    return f"{doc.get('firstName', '')} {doc.get('lastName', '')}".strip()


def is_locked(doc: dict, now: datetime) -> bool:
    locked_until = doc.get("lockedUntil")
    return locked_until is not None and locked_until > now
