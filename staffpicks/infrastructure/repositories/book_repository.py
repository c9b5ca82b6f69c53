"""
PyMongo Implementation of Book Repository.
"""

from bson import ObjectId
from pymongo.database import Database

from staffpicks.domain.models.book import COLLECTION
from staffpicks.domain.repositories.content_repository import BookRepository
from staffpicks.infrastructure.repositories.base_repository import MongoRepository


class MongoBookRepository(MongoRepository, BookRepository):
    """Book repository implementation using PyMongo."""

    def __init__(self, db: Database):
        super().__init__(db, COLLECTION)

    def find_by_ids(self, ids: list[ObjectId]) -> dict[ObjectId, dict]:
        if not ids:
            return {}
        return {doc["_id"]: doc for doc in self.collection.find({"_id": {"$in": list(ids)}})}

    def isbn_taken(self, company_id: ObjectId, owner_user_id: ObjectId, isbn: str) -> bool:
        query = {"companyId": company_id, "ownerUserId": owner_user_id, "isbn": isbn}
        return self.collection.find_one(query, {"_id": 1}) is not None
