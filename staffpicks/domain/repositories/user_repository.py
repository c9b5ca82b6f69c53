"""
User Repository Interface.
Soft-deleted users are hidden behind `active_filter()`.
"""

from datetime import datetime
from typing import Optional

from bson import ObjectId

from staffpicks.domain.repositories.base import BaseRepository


class UserRepository(BaseRepository):
    """Interface for User-specific operations."""

    def active_filter(self, query: Optional[dict] = None) -> dict:
        """Add the not-soft-deleted predicate to a query."""
        ...

    def get_active(self, id: ObjectId, extra: Optional[dict] = None) -> Optional[dict]:
        ...

    def find_active(self, query: dict, sort: Optional[list[tuple[str, int]]] = None) -> list[dict]:
        ...

    def get_by_email(self, email: str) -> Optional[dict]:
        """Case-insensitive email lookup, including soft-deleted users."""
        ...

    def deleted_user_ids(self, company_id: Optional[ObjectId] = None) -> list[ObjectId]:
        """Materialise the ids of soft-deleted users, optionally per company."""
        ...

    def record_failed_login(self, id: ObjectId, attempts: int, locked_until: Optional[datetime]) -> None:
        ...

    def record_successful_login(self, id: ObjectId, ip: Optional[str], at: datetime) -> None:
        ...

    def soft_delete(self, id: ObjectId, at: datetime) -> None:
        ...
