"""
PyMongo Implementation of User Repository.
"""

from datetime import datetime
from typing import Optional

from bson import ObjectId
from pymongo.database import Database

from staffpicks.domain.models.user import COLLECTION
from staffpicks.domain.repositories.user_repository import UserRepository
from staffpicks.infrastructure.repositories.base_repository import MongoRepository, by_id

NOT_DELETED = {"deletedAt": {"$exists": False}}


class MongoUserRepository(MongoRepository, UserRepository):
    """User repository implementation using PyMongo."""

    def __init__(self, db: Database):
        super().__init__(db, COLLECTION)

    def active_filter(self, query: Optional[dict] = None) -> dict:
        return {**(query or {}), **NOT_DELETED}

    def get_active(self, id: ObjectId, extra: Optional[dict] = None) -> Optional[dict]:
        return self.collection.find_one(self.active_filter(by_id(id, extra)))

    def find_active(self, query: dict, sort: Optional[list[tuple[str, int]]] = None) -> list[dict]:
        return self.find(self.active_filter(query), sort=sort)

    def get_by_email(self, email: str) -> Optional[dict]:
        return self.collection.find_one({"email": email.strip().lower()})

    def deleted_user_ids(self, company_id: Optional[ObjectId] = None) -> list[ObjectId]:
        query: dict = {"deletedAt": {"$exists": True}}
        if company_id is not None:
            query["companyId"] = company_id
        return [doc["_id"] for doc in self.collection.find(query, {"_id": 1})]

    def record_failed_login(self, id: ObjectId, attempts: int, locked_until: Optional[datetime]) -> None:
        self.update(id, {"failedLoginAttempts": attempts, "lockedUntil": locked_until})

    def record_successful_login(self, id: ObjectId, ip: Optional[str], at: datetime) -> None:
        self.update(
            id,
            {
                "failedLoginAttempts": 0,
                "lockedUntil": None,
                "lastLoginAt": at,
                "lastLoginIp": ip,
            },
        )

    def soft_delete(self, id: ObjectId, at: datetime) -> None:
        self.update(id, {"deletedAt": at})
