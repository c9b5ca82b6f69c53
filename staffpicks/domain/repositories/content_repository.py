"""
Book and List Repository Interfaces.
"""

from datetime import datetime
from typing import Optional

from bson import ObjectId

from staffpicks.domain.repositories.base import BaseRepository


class BookRepository(BaseRepository):
    """Interface for Book-specific operations."""

    def find_by_ids(self, ids: list[ObjectId]) -> dict[ObjectId, dict]:
        """Map book ids to documents, for embedding list items."""
        ...

    def isbn_taken(self, company_id: ObjectId, owner_user_id: ObjectId, isbn: str) -> bool:
        ...


class ListRepository(BaseRepository):
    """Interface for curated-list operations; soft-deleted lists are hidden."""

    def active_filter(self, query: Optional[dict] = None) -> dict:
        ...

    def get_active(self, id: ObjectId, extra: Optional[dict] = None) -> Optional[dict]:
        ...

    def slug_taken(self, company_id: ObjectId, owner_user_id: ObjectId, slug: str, exclude_id: Optional[ObjectId] = None) -> bool:
        ...

    def soft_delete(self, id: ObjectId, by: ObjectId, at: datetime) -> None:
        ...
