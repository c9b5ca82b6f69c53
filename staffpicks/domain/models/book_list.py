"""Curated list domain model — maps to the 'lists' collection."""

from datetime import datetime
from enum import Enum
from typing import Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from staffpicks.domain.models.base import Document, utcnow

COLLECTION = "lists"


class ListVisibility(str, Enum):
    DRAFT = "draft"
    UNLISTED = "unlisted"
    PUBLIC = "public"


class ListItem(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, arbitrary_types_allowed=True)

    book_id: ObjectId
    position: int
    added_at: datetime = Field(default_factory=utcnow)


class BookList(Document):
    company_id: ObjectId
    store_id: ObjectId
    owner_user_id: ObjectId
    created_by: ObjectId
    updated_by: Optional[ObjectId] = None
    title: str
    # Unique per (company, owner) among lists that are not soft-deleted
    slug: str
    description: Optional[str] = None
    cover_image: Optional[str] = None
    visibility: ListVisibility = ListVisibility.DRAFT
    publish_at: Optional[datetime] = None
    unpublish_at: Optional[datetime] = None
    items: list[ListItem] = Field(default_factory=list)
    assigned_to: list[ObjectId] = Field(default_factory=list)
    sections: list[str] = Field(default_factory=list)
    deleted_at: Optional[datetime] = None


def densify(items: list[dict]) -> list[dict]:
    """Order items by position and renumber them 0..n-1."""
    ordered = sorted(items, key=lambda item: item["position"])
    return [{**item, "position": index} for index, item in enumerate(ordered)]
