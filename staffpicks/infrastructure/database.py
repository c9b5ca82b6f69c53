"""MongoDB connection, request dependency and index bootstrap."""

from typing import Generator, Optional

import structlog
from bson import ObjectId
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from staffpicks.config import get_settings
from staffpicks.core.exceptions import ValidationException

settings = get_settings()
logger = structlog.get_logger(__name__)

_client: Optional[MongoClient] = None


def get_client() -> MongoClient:
    """Process-wide client; pymongo pools connections internally."""
    global _client
    if _client is None:
        _client = MongoClient(settings.MONGODB_URI, tz_aware=False)
    return _client


def get_database() -> Database:
    return get_client()[settings.MONGODB_DB]


def get_db() -> Generator[Database, None, None]:
    """FastAPI dependency. Overridden in tests with an in-memory database."""
    yield get_database()


def close_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None


def to_object_id(value, label: str = "") -> ObjectId:
    """Parse a path/body id, raising 400 on a malformed value."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        name = f"{label} " if label else ""
        raise ValidationException(f"Invalid {name}ID format")
    return ObjectId(value)


def ensure_indexes(db: Database) -> None:
    """Create the indexes the uniqueness rules rely on. Idempotent."""
    db.users.create_index([("email", ASCENDING)], unique=True, name="email_unique")
    db.users.create_index([("companyId", ASCENDING), ("storeId", ASCENDING)], name="company_store")

    db.companies.create_index([("slug", ASCENDING)], unique=True, name="slug_unique")

    db.stores.create_index(
        [("companyId", ASCENDING), ("code", ASCENDING)], unique=True, name="company_code_unique"
    )

    db.books.create_index(
        [("companyId", ASCENDING), ("ownerUserId", ASCENDING), ("isbn", ASCENDING)],
        unique=True,
        name="company_owner_isbn_unique",
    )
    db.books.create_index([("assignedTo", ASCENDING)], name="assigned_to")

    # Partial indexes cannot express "$exists: false", so slug uniqueness among
    # live lists is enforced when the slug is generated
    db.lists.create_index(
        [("companyId", ASCENDING), ("ownerUserId", ASCENDING), ("slug", ASCENDING)],
        name="company_owner_slug",
    )
    db.lists.create_index([("assignedTo", ASCENDING)], name="assigned_to")

    db.rate_limits.create_index([("expiresAt", ASCENDING)], expireAfterSeconds=0, name="expires_at_ttl")

    logger.info("Database indexes ensured", database=db.name)
