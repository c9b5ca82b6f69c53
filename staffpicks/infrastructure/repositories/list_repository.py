"""
PyMongo Implementation of List Repository.
"""

from datetime import datetime
from typing import Optional

from bson import ObjectId
from pymongo.database import Database

from staffpicks.domain.models.book_list import COLLECTION
from staffpicks.domain.repositories.content_repository import ListRepository
from staffpicks.infrastructure.repositories.base_repository import MongoRepository, by_id

NOT_DELETED = {"deletedAt": {"$exists": False}}


class MongoListRepository(MongoRepository, ListRepository):
    """Curated-list repository implementation using PyMongo."""

    def __init__(self, db: Database):
        super().__init__(db, COLLECTION)

    def active_filter(self, query: Optional[dict] = None) -> dict:
        return {**(query or {}), **NOT_DELETED}

    def get_active(self, id: ObjectId, extra: Optional[dict] = None) -> Optional[dict]:
        return self.collection.find_one(self.active_filter(by_id(id, extra)))

    def slug_taken(
        self,
        company_id: ObjectId,
        owner_user_id: ObjectId,
        slug: str,
        exclude_id: Optional[ObjectId] = None,
    ) -> bool:
        query = self.active_filter({"companyId": company_id, "ownerUserId": owner_user_id, "slug": slug})
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        return self.collection.find_one(query, {"_id": 1}) is not None

    def soft_delete(self, id: ObjectId, by: ObjectId, at: datetime) -> None:
        self.update(id, {"deletedAt": at, "updatedBy": by})
