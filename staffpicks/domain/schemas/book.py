"""Pydantic schemas for Book domain."""

from datetime import datetime
from typing import Optional

from staffpicks.domain.models.base import ref
from staffpicks.domain.schemas.base import CamelModel


class BookBase(CamelModel):
    title: Optional[str] = None
    authors: Optional[list[str]] = None
    cover: Optional[str] = None
    description: Optional[str] = None
    publisher: Optional[str] = None
    page_count: Optional[int] = None
    publish_date: Optional[datetime] = None
    genre: Optional[str] = None
    tone: Optional[str] = None
    age_group: Optional[str] = None
    purchase_link: Optional[str] = None
    recommendation: Optional[str] = None
    assigned_to: Optional[list[str]] = None
    sections: Optional[list[str]] = None


class BookCreate(BookBase):
    isbn: Optional[str] = None


class BookUpdate(BookBase):
    pass


class BookFilter(CamelModel):
    genre: Optional[str] = None
    tone: Optional[str] = None
    age_group: Optional[str] = None
    search: Optional[str] = None
    company_id: Optional[str] = None
    limit: int = 50
    skip: int = 0


class BookRead(CamelModel):
    id: str
    isbn: str
    title: str
    authors: list[str]
    cover: Optional[str] = None
    description: Optional[str] = None
    publisher: Optional[str] = None
    page_count: Optional[int] = None
    publish_date: Optional[datetime] = None
    genre: Optional[str] = None
    tone: Optional[str] = None
    age_group: Optional[str] = None
    purchase_link: Optional[str] = None
    recommendation: Optional[str] = None
    company_id: Optional[str] = None
    store_id: Optional[str] = None
    owner_user_id: Optional[str] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    assigned_to: list[str] = []
    sections: list[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: dict) -> "BookRead":
        data = doc.get("bookData", {})
        return cls(
            id=str(doc["_id"]),
            isbn=doc["isbn"],
            title=data.get("title", ""),
            authors=data.get("authors", []),
            cover=data.get("cover"),
            description=data.get("description"),
            publisher=data.get("publisher"),
            page_count=data.get("pageCount"),
            publish_date=data.get("publishDate"),
            genre=doc.get("genre"),
            tone=doc.get("tone"),
            age_group=doc.get("ageGroup"),
            purchase_link=doc.get("purchaseLink"),
            recommendation=doc.get("recommendation"),
            company_id=ref(doc.get("companyId")),
            store_id=ref(doc.get("storeId")),
            owner_user_id=ref(doc.get("ownerUserId")),
            created_by=ref(doc.get("createdBy")),
            updated_by=ref(doc.get("updatedBy")),
            assigned_to=[str(user_id) for user_id in doc.get("assignedTo", [])],
            sections=doc.get("sections", []),
            created_at=doc.get("createdAt"),
            updated_at=doc.get("updatedAt"),
        )
