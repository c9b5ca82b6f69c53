"""
Company, Store and rate-limit Repository Interfaces.
"""

from datetime import datetime
from typing import Optional

from bson import ObjectId

from staffpicks.domain.repositories.base import BaseRepository


class CompanyRepository(BaseRepository):
    """Interface for Company-specific operations."""

    def slug_taken(self, slug: str, exclude_id: Optional[ObjectId] = None) -> bool:
        ...


class StoreRepository(BaseRepository):
    """Interface for Store-specific operations."""

    def code_taken(self, company_id: ObjectId, code: str, exclude_id: Optional[ObjectId] = None) -> bool:
        ...


class RateLimitRepository(BaseRepository):
    """Shared fixed-window counters."""

    def hit(self, key: str, expires_at: datetime) -> int:
        """Atomically count one hit against `key` and return the new total."""
        ...
