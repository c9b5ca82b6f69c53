"""
API Dependencies.
"""

from fastapi import Depends
from pymongo.database import Database

from staffpicks.domain.repositories.content_repository import BookRepository, ListRepository
from staffpicks.domain.repositories.tenant_repository import (
    CompanyRepository,
    RateLimitRepository,
    StoreRepository,
)
from staffpicks.domain.repositories.user_repository import UserRepository
from staffpicks.infrastructure.cloudinary_api import CloudinaryClient
from staffpicks.infrastructure.database import get_db
from staffpicks.infrastructure.isbndb_api import ISBNdbClient
from staffpicks.infrastructure.repositories.book_repository import MongoBookRepository
from staffpicks.infrastructure.repositories.list_repository import MongoListRepository
from staffpicks.infrastructure.repositories.tenant_repository import (
    MongoCompanyRepository,
    MongoRateLimitRepository,
    MongoStoreRepository,
)
from staffpicks.infrastructure.repositories.user_repository import MongoUserRepository


def get_user_repository(db: Database = Depends(get_db)) -> UserRepository:
    """Get user repository instance."""
    return MongoUserRepository(db)


def get_company_repository(db: Database = Depends(get_db)) -> CompanyRepository:
    return MongoCompanyRepository(db)


def get_store_repository(db: Database = Depends(get_db)) -> StoreRepository:
    return MongoStoreRepository(db)


def get_book_repository(db: Database = Depends(get_db)) -> BookRepository:
    return MongoBookRepository(db)


def get_list_repository(db: Database = Depends(get_db)) -> ListRepository:
    return MongoListRepository(db)


def get_rate_limit_repository(db: Database = Depends(get_db)) -> RateLimitRepository:
    return MongoRateLimitRepository(db)


def get_cloudinary_client() -> CloudinaryClient:
    return CloudinaryClient()


def get_isbndb_client() -> ISBNdbClient:
    return ISBNdbClient()
