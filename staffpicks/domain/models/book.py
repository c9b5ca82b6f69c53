"""Book domain model — maps to the 'books' collection."""

from datetime import datetime
from typing import Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from staffpicks.domain.models.base import Document

COLLECTION = "books"


class BookData(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    authors: list[str]
    cover: Optional[str] = None
    description: Optional[str] = None
    publisher: Optional[str] = None
    page_count: Optional[int] = None
    publish_date: Optional[datetime] = None


class Book(Document):
    company_id: ObjectId
    store_id: ObjectId
    # The library owner; ISBN is unique per (company, owner)
    owner_user_id: ObjectId
    created_by: ObjectId
    updated_by: Optional[ObjectId] = None
    isbn: str
    book_data: BookData
    genre: Optional[str] = None
    tone: Optional[str] = None
    age_group: Optional[str] = None
    purchase_link: Optional[str] = None
    recommendation: Optional[str] = None
    assigned_to: list[ObjectId] = Field(default_factory=list)
    sections: list[str] = Field(default_factory=list)
