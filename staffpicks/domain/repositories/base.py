"""
Base Repository Interface.
Defines the standard contract for document access operations.
"""

from typing import Any, Iterable, Optional, Protocol

from bson import ObjectId


class BaseRepository(Protocol):
    """Interface for generic CRUD operations over one collection."""

    def get_by_id(self, id: ObjectId, extra: Optional[dict] = None) -> Optional[dict]:
        """Get a single document by ID, optionally narrowed by an extra filter."""
        ...

    def find_one(self, query: dict) -> Optional[dict]:
        ...

    def find(
        self,
        query: dict,
        sort: Optional[list[tuple[str, int]]] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> list[dict]:
        """List documents matching a query, with optional ordering and pagination."""
        ...

    def count(self, query: dict) -> int:
        ...

    def create(self, obj_in: Any) -> dict:
        """Insert a document (dict or domain model) and return it with its `_id`."""
        ...

    def update(self, id: ObjectId, changes: dict, extra: Optional[dict] = None) -> Optional[dict]:
        """`$set` the given fields, touch `updatedAt` and return the new document."""
        ...

    def delete(self, id: ObjectId) -> bool:
        """Physically remove a document."""
        ...

    def delete_many(self, ids: Iterable[ObjectId]) -> int:
        ...
