"""
PyMongo Implementations of the Company, Store and rate-limit Repositories.
"""

from datetime import datetime
from typing import Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.database import Database

from staffpicks.domain.models import company, store
from staffpicks.domain.repositories.tenant_repository import (
    CompanyRepository,
    RateLimitRepository,
    StoreRepository,
)
from staffpicks.infrastructure.repositories.base_repository import MongoRepository


class MongoCompanyRepository(MongoRepository, CompanyRepository):
    def __init__(self, db: Database):
        super().__init__(db, company.COLLECTION)

    def slug_taken(self, slug: str, exclude_id: Optional[ObjectId] = None) -> bool:
        query: dict = {"slug": slug}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        return self.collection.find_one(query, {"_id": 1}) is not None


class MongoStoreRepository(MongoRepository, StoreRepository):
    def __init__(self, db: Database):
        super().__init__(db, store.COLLECTION)

    def code_taken(self, company_id: ObjectId, code: str, exclude_id: Optional[ObjectId] = None) -> bool:
        query: dict = {"companyId": company_id, "code": code}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        return self.collection.find_one(query, {"_id": 1}) is not None


class MongoRateLimitRepository(MongoRepository, RateLimitRepository):
    """Fixed-window counters shared by every instance on the same database."""

    def __init__(self, db: Database):
        super().__init__(db, "rate_limits")

    def hit(self, key: str, expires_at: datetime) -> int:
        doc = self.collection.find_one_and_update(
            {"_id": key},
            {"$inc": {"count": 1}, "$setOnInsert": {"expiresAt": expires_at}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return doc["count"]
