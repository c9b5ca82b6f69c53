"""Pydantic schemas for users, status transitions and the self profile."""

from datetime import datetime
from enum import Enum
from typing import Optional

from staffpicks.domain.models.base import ref
from staffpicks.domain.models.user import UserStatus
from staffpicks.domain.roles import UserRole
from staffpicks.domain.schemas.base import CamelModel


class UserCreate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[UserRole] = None
    company_id: Optional[str] = None
    store_id: Optional[str] = None
    sections: Optional[list[str]] = None
    avatar_url: Optional[str] = None


class UserUpdate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[UserRole] = None
    # Explicit null unassigns the store
    store_id: Optional[str] = None
    sections: Optional[list[str]] = None
    avatar_url: Optional[str] = None


class UserFilter(CamelModel):
    company_id: Optional[str] = None
    store_id: Optional[str] = None
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None


class StatusAction(str, Enum):
    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"
    SUSPEND = "suspend"


class StatusChange(CamelModel):
    action: StatusAction


class ProfileUpdate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = None
    confirm_password: Optional[str] = None


class UserRead(CamelModel):
    id: str
    first_name: str
    last_name: str
    email: str
    role: UserRole
    status: UserStatus
    company_id: Optional[str] = None
    store_id: Optional[str] = None
    store_name: Optional[str] = None
    store_code: Optional[str] = None
    sections: list[str] = []
    avatar_url: Optional[str] = None
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: dict, store: Optional[dict] = None) -> "UserRead":
        store = store or {}
        return cls(
            id=str(doc["_id"]),
            first_name=doc.get("firstName", ""),
            last_name=doc.get("lastName", ""),
            email=doc["email"],
            role=doc["role"],
            status=doc.get("status", UserStatus.ACTIVE),
            company_id=ref(doc.get("companyId")),
            store_id=ref(doc.get("storeId")),
            store_name=store.get("name"),
            store_code=store.get("code"),
            sections=doc.get("sections", []),
            avatar_url=doc.get("avatarUrl"),
            last_login_at=doc.get("lastLoginAt"),
            created_at=doc.get("createdAt"),
        )
