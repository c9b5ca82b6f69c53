"""Book service — role-scoped catalog queries and edits."""

import re
from typing import Optional

import structlog
from bson import ObjectId

from staffpicks.application.services.access_policy import (
    require_content_editor,
    require_store_id,
    resolve_company_id,
    session_company_id,
    session_user_id,
    visibility_query,
    write_scope,
)
from staffpicks.core.exceptions import ConflictException, EntityNotFoundException, ValidationException
from staffpicks.domain.models.book import Book, BookData
from staffpicks.domain.repositories.content_repository import BookRepository
from staffpicks.domain.repositories.user_repository import UserRepository
from staffpicks.domain.roles import UserRole
from staffpicks.domain.schemas.auth import SessionUser
from staffpicks.domain.schemas.book import BookCreate, BookFilter, BookRead, BookUpdate
from staffpicks.infrastructure.database import to_object_id

logger = structlog.get_logger(__name__)

NOT_FOUND = "Book not found or insufficient permission"


def resolve_assignees(
    users: UserRepository,
    company_id: ObjectId,
    store_id: ObjectId,
    user_ids: Optional[list[str]],
) -> list[ObjectId]:
    """Parse assignee ids and check they are live librarians of the store."""
    ids: list[ObjectId] = []
    for value in user_ids or []:
        user_id = to_object_id(value, "user")
        if user_id not in ids:
            ids.append(user_id)
    if ids:
        query = {
            "_id": {"$in": ids},
            "companyId": company_id,
            "storeId": store_id,
            "role": UserRole.LIBRARIAN.value,
        }
        found = users.count(users.active_filter(query))
        if found != len(ids):
            raise ValidationException("Assigned users must be librarians of this store")
    return ids


def get_books(books: BookRepository, users: UserRepository, session: SessionUser, filters: BookFilter) -> dict:
    """Get the caller's visible books with facet filtering and skip/limit pagination."""
    base: dict = {}
    if filters.genre:
        base["genre"] = filters.genre
    if filters.tone:
        base["tone"] = filters.tone
    if filters.age_group:
        base["ageGroup"] = filters.age_group
    if filters.search:
        pattern = {"$regex": re.escape(filters.search.strip()), "$options": "i"}
        base["$or"] = [
            {"bookData.title": pattern},
            {"bookData.authors": pattern},
            {"isbn": pattern},
        ]

    company_id = resolve_company_id(session, filters.company_id)
    query = visibility_query(session, users, base, company_id)

    total = books.count(query)
    items = books.find(query, sort=[("createdAt", -1)], skip=filters.skip, limit=filters.limit)

    return {
        "books": [BookRead.from_document(doc) for doc in items],
        "pagination": {
            "total": total,
            "limit": filters.limit,
            "skip": filters.skip,
            "hasMore": filters.skip + len(items) < total,
        },
    }


def get_book(books: BookRepository, users: UserRepository, session: SessionUser, book_id: str) -> BookRead:
    doc = books.find_one(visibility_query(session, users, {"_id": to_object_id(book_id, "book")}))
    if doc is None:
        raise EntityNotFoundException("Book not found")
    return BookRead.from_document(doc)


def create_book(books: BookRepository, users: UserRepository, session: SessionUser, body: BookCreate) -> BookRead:
    require_content_editor(session, "books")

    isbn = (body.isbn or "").strip()
    title = (body.title or "").strip()
    authors = [author.strip() for author in body.authors or [] if author and author.strip()]
    if not isbn or not title or not authors:
        raise ValidationException("Missing required fields: isbn, title, and authors are required")
    if not body.publisher or not body.description:
        raise ValidationException("Missing required fields: publisher and description are required")
    if not body.genre or not body.tone:
        raise ValidationException("Missing required fields: genre and tone are required")

    company_id = session_company_id(session)
    store_id = require_store_id(session)
    user_id = session_user_id(session)

    assigned = resolve_assignees(users, company_id, store_id, body.assigned_to)
    if session.is_store_admin and not assigned:
        raise ValidationException("StoreAdmin must assign the book to at least one librarian")
    if session.is_librarian and user_id not in assigned:
        assigned.append(user_id)

    # Each owner keeps their own copy of an ISBN with their own metadata
    if books.isbn_taken(company_id, user_id, isbn):
        raise ConflictException("You have already added a book with this ISBN to your library.")

    doc = books.create(
        Book(
            company_id=company_id,
            store_id=store_id,
            owner_user_id=user_id,
            created_by=user_id,
            isbn=isbn,
            book_data=BookData(
                title=title,
                authors=authors,
                cover=body.cover,
                description=body.description,
                publisher=body.publisher,
                page_count=body.page_count,
                publish_date=body.publish_date,
            ),
            genre=body.genre,
            tone=body.tone,
            age_group=body.age_group,
            purchase_link=body.purchase_link,
            recommendation=body.recommendation,
            assigned_to=assigned,
            sections=body.sections or [],
        )
    )
    logger.info("Book created", book_id=str(doc["_id"]), isbn=isbn, user_id=session.user_id)
    return BookRead.from_document(doc)


BOOK_DATA_FIELDS = {
    "title": "bookData.title",
    "authors": "bookData.authors",
    "cover": "bookData.cover",
    "description": "bookData.description",
    "publisher": "bookData.publisher",
    "page_count": "bookData.pageCount",
    "publish_date": "bookData.publishDate",
}
FACET_FIELDS = {
    "genre": "genre",
    "tone": "tone",
    "age_group": "ageGroup",
    "purchase_link": "purchaseLink",
    "recommendation": "recommendation",
}


def update_book(
    books: BookRepository,
    users: UserRepository,
    session: SessionUser,
    book_id: str,
    body: BookUpdate,
) -> BookRead:
    require_content_editor(session, "books")
    oid = to_object_id(book_id, "book")

    existing = books.get_by_id(oid, write_scope(session))
    if existing is None:
        raise EntityNotFoundException(NOT_FOUND)

    provided = body.model_fields_set
    changes: dict = {}
    for field, key in {**BOOK_DATA_FIELDS, **FACET_FIELDS}.items():
        if field in provided:
            changes[key] = getattr(body, field)

    if "title" in provided:
        title = (body.title or "").strip()
        if not title:
            raise ValidationException("Title is required")
        changes["bookData.title"] = title
    if "authors" in provided:
        authors = [author.strip() for author in body.authors or [] if author and author.strip()]
        if not authors:
            raise ValidationException("At least one author is required")
        changes["bookData.authors"] = authors

    # Assignment is a store admin decision; librarians' attempts are ignored
    if session.is_store_admin:
        if "assigned_to" in provided:
            assigned = resolve_assignees(users, existing["companyId"], existing["storeId"], body.assigned_to)
            if not assigned:
                raise ValidationException("StoreAdmin must assign the book to at least one librarian")
            changes["assignedTo"] = assigned
        if "sections" in provided:
            changes["sections"] = body.sections or []

    changes["updatedBy"] = session_user_id(session)
    doc = books.update(oid, changes)
    logger.info("Book updated", book_id=book_id, user_id=session.user_id)
    return BookRead.from_document(doc)


def delete_book(books: BookRepository, session: SessionUser, book_id: str) -> None:
    require_content_editor(session, "books")
    oid = to_object_id(book_id, "book")

    if books.get_by_id(oid, write_scope(session)) is None:
        raise EntityNotFoundException(NOT_FOUND)

    books.delete(oid)
    logger.info("Book deleted", book_id=book_id, user_id=session.user_id)
