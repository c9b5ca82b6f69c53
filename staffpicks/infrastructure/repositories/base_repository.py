"""
PyMongo implementation of the Base Repository.
"""

from typing import Any, Iterable, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.database import Database

from staffpicks.domain.models.base import Document, utcnow
from staffpicks.domain.repositories.base import BaseRepository


def by_id(id: ObjectId, extra: Optional[dict] = None) -> dict:
    """Match one id inside an optional scope filter, which may itself constrain `_id`."""
    return {"$and": [{"_id": id}, extra]} if extra else {"_id": id}


class MongoRepository(BaseRepository):
    """Generic repository implementation over one MongoDB collection."""

    def __init__(self, db: Database, collection: str):
        self.db = db
        self.collection = db[collection]

    def get_by_id(self, id: ObjectId, extra: Optional[dict] = None) -> Optional[dict]:
        return self.collection.find_one(by_id(id, extra))

    def find_one(self, query: dict) -> Optional[dict]:
        return self.collection.find_one(query)

    def find(
        self,
        query: dict,
        sort: Optional[list[tuple[str, int]]] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> list[dict]:
        cursor = self.collection.find(query)
        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return list(cursor)

    def count(self, query: dict) -> int:
        return self.collection.count_documents(query)

    def create(self, obj_in: Any) -> dict:
        doc = obj_in.to_document() if isinstance(obj_in, Document) else dict(obj_in)
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def update(self, id: ObjectId, changes: dict, extra: Optional[dict] = None) -> Optional[dict]:
        update: dict = {"$set": {**changes, "updatedAt": utcnow()}}
        # A None value removes the field rather than storing null
        unset = {key: "" for key, value in changes.items() if value is None}
        if unset:
            update["$set"] = {k: v for k, v in update["$set"].items() if k not in unset}
            update["$unset"] = unset
        return self.collection.find_one_and_update(
            by_id(id, extra),
            update,
            return_document=ReturnDocument.AFTER,
        )

    def delete(self, id: ObjectId) -> bool:
        return self.collection.delete_one({"_id": id}).deleted_count == 1

    def delete_many(self, ids: Iterable[ObjectId]) -> int:
        return self.collection.delete_many({"_id": {"$in": list(ids)}}).deleted_count
