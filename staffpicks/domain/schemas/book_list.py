"""Pydantic schemas for curated lists."""

from datetime import datetime
from typing import Optional

from staffpicks.domain.models.base import ref
from staffpicks.domain.models.book_list import ListVisibility
from staffpicks.domain.schemas.base import CamelModel


class ListItemIn(CamelModel):
    book_id: str
    position: Optional[int] = None


class ListBase(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    cover_image: Optional[str] = None
    publish_at: Optional[datetime] = None
    unpublish_at: Optional[datetime] = None
    items: Optional[list[ListItemIn]] = None
    assigned_to: Optional[list[str]] = None
    sections: Optional[list[str]] = None


class ListCreate(ListBase):
    visibility: ListVisibility = ListVisibility.DRAFT


class ListUpdate(ListBase):
    visibility: Optional[ListVisibility] = None


class ListFilter(CamelModel):
    visibility: Optional[ListVisibility] = None
    owner_user_id: Optional[str] = None
    company_id: Optional[str] = None
    page: int = 1
    limit: int = 20


class ListItemRead(CamelModel):
    book_id: str
    position: int
    added_at: Optional[datetime] = None
    isbn: Optional[str] = None
    title: Optional[str] = None
    authors: list[str] = []
    cover: Optional[str] = None
    genre: Optional[str] = None
    tone: Optional[str] = None
    age_group: Optional[str] = None


class ListRead(CamelModel):
    id: str
    title: str
    slug: str
    description: Optional[str] = None
    cover_image: Optional[str] = None
    visibility: ListVisibility
    publish_at: Optional[datetime] = None
    unpublish_at: Optional[datetime] = None
    item_count: int = 0
    items: list[ListItemRead] = []
    company_id: Optional[str] = None
    store_id: Optional[str] = None
    owner_user_id: Optional[str] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    assigned_to: list[str] = []
    sections: list[str] = []
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: dict, books: Optional[dict] = None) -> "ListRead":
        """Build the API view; `books` maps book ObjectId -> book document."""
        books = books or {}
        items = []
        for item in doc.get("items", []):
            book = books.get(item["bookId"], {})
            data = book.get("bookData", {})
            items.append(
                ListItemRead(
                    book_id=str(item["bookId"]),
                    position=item["position"],
                    added_at=item.get("addedAt"),
                    isbn=book.get("isbn"),
                    title=data.get("title"),
                    authors=data.get("authors", []),
                    cover=data.get("cover"),
                    genre=book.get("genre"),
                    tone=book.get("tone"),
                    age_group=book.get("ageGroup"),
                )
            )
        return cls(
            id=str(doc["_id"]),
            title=doc["title"],
            slug=doc["slug"],
            description=doc.get("description"),
            cover_image=doc.get("coverImage"),
            visibility=doc.get("visibility", ListVisibility.DRAFT),
            publish_at=doc.get("publishAt"),
            unpublish_at=doc.get("unpublishAt"),
            item_count=len(items),
            items=items,
            company_id=ref(doc.get("companyId")),
            store_id=ref(doc.get("storeId")),
            owner_user_id=ref(doc.get("ownerUserId")),
            created_by=ref(doc.get("createdBy")),
            updated_by=ref(doc.get("updatedBy")),
            assigned_to=[str(user_id) for user_id in doc.get("assignedTo", [])],
            sections=doc.get("sections", []),
            deleted_at=doc.get("deletedAt"),
            created_at=doc.get("createdAt"),
            updated_at=doc.get("updatedAt"),
        )
