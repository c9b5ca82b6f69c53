"""List service — curated lists, their items and slugs."""

import math
from typing import Optional

import structlog

from staffpicks.application.services.access_policy import (
    require_content_editor,
    require_store_id,
    resolve_company_id,
    session_company_id,
    session_user_id,
    visibility_query,
    write_scope,
)
from staffpicks.application.services.book_service import resolve_assignees
from staffpicks.application.services.slugs import generate_slug, unique_slug
from staffpicks.core.exceptions import EntityNotFoundException, ValidationException
from staffpicks.domain.models.base import utcnow
from staffpicks.domain.models.book_list import BookList, densify
from staffpicks.domain.repositories.content_repository import BookRepository, ListRepository
from staffpicks.domain.repositories.user_repository import UserRepository
from staffpicks.domain.schemas.auth import SessionUser
from staffpicks.domain.schemas.book_list import ListCreate, ListFilter, ListItemIn, ListRead, ListUpdate
from staffpicks.infrastructure.database import to_object_id

logger = structlog.get_logger(__name__)

NOT_FOUND = "List not found or insufficient permission"


def to_read(books: BookRepository, doc: dict) -> ListRead:
    """Embed book summaries into the list's items."""
    book_ids = [item["bookId"] for item in doc.get("items", [])]
    return ListRead.from_document(doc, books.find_by_ids(book_ids))


def build_items(
    books: BookRepository,
    session: SessionUser,
    items: list[ListItemIn],
    existing: Optional[list[dict]] = None,
) -> list[dict]:
    """Validate requested items and return them densely ordered.

    Books must belong to the caller's company and store. An item keeps its
    original `addedAt` when the book was already on the list.
    """
    if not items:
        return []

    book_ids = [to_object_id(item.book_id, "book") for item in items]
    unique_ids = set(book_ids)
    found = books.count(
        {
            "_id": {"$in": list(unique_ids)},
            "companyId": session_company_id(session),
            "storeId": require_store_id(session),
        }
    )
    if found != len(unique_ids):
        raise ValidationException("One or more books not found or do not belong to your company")

    added_at = {item["bookId"]: item.get("addedAt") for item in existing or []}
    now = utcnow()
    processed = [
        {
            "bookId": book_id,
            "position": item.position if item.position is not None else index,
            "addedAt": added_at.get(book_id) or now,
        }
        for index, (book_id, item) in enumerate(zip(book_ids, items))
    ]
    return densify(processed)


def get_lists(
    lists: ListRepository,
    books: BookRepository,
    users: UserRepository,
    session: SessionUser,
    filters: ListFilter,
) -> dict:
    base = lists.active_filter()
    if filters.visibility:
        base["visibility"] = filters.visibility.value
    if filters.owner_user_id:
        base["ownerUserId"] = to_object_id(filters.owner_user_id, "owner")

    company_id = resolve_company_id(session, filters.company_id)
    query = visibility_query(session, users, base, company_id)

    total = lists.count(query)
    skip = (filters.page - 1) * filters.limit
    docs = lists.find(query, sort=[("updatedAt", -1)], skip=skip, limit=filters.limit)

    return {
        "lists": [to_read(books, doc) for doc in docs],
        "pagination": {
            "page": filters.page,
            "limit": filters.limit,
            "total": total,
            "totalPages": math.ceil(total / filters.limit) if filters.limit else 0,
        },
    }


def get_list(
    lists: ListRepository,
    books: BookRepository,
    users: UserRepository,
    session: SessionUser,
    list_id: str,
) -> ListRead:
    query = visibility_query(session, users, lists.active_filter({"_id": to_object_id(list_id, "list")}))
    doc = lists.find_one(query)
    if doc is None:
        raise EntityNotFoundException("List not found")
    return to_read(books, doc)


def create_list(
    lists: ListRepository,
    books: BookRepository,
    users: UserRepository,
    session: SessionUser,
    body: ListCreate,
) -> ListRead:
    require_content_editor(session, "lists")

    title = (body.title or "").strip()
    if not title:
        raise ValidationException("Title is required")

    company_id = session_company_id(session)
    store_id = require_store_id(session)
    user_id = session_user_id(session)

    slug = unique_slug(
        generate_slug(title) or "list",
        lambda candidate: lists.slug_taken(company_id, user_id, candidate),
    )
    items = build_items(books, session, body.items or [])

    assigned = resolve_assignees(users, company_id, store_id, body.assigned_to)
    if session.is_librarian and user_id not in assigned:
        assigned.append(user_id)

    doc = lists.create(
        BookList(
            company_id=company_id,
            store_id=store_id,
            owner_user_id=user_id,
            created_by=user_id,
            title=title,
            slug=slug,
            description=body.description,
            cover_image=body.cover_image,
            visibility=body.visibility,
            publish_at=body.publish_at,
            unpublish_at=body.unpublish_at,
            items=items,
            assigned_to=assigned,
            sections=body.sections or [],
        )
    )
    logger.info("List created", list_id=str(doc["_id"]), slug=slug, user_id=session.user_id)
    return to_read(books, doc)


def _get_writable(lists: ListRepository, session: SessionUser, list_id: str) -> dict:
    doc = lists.get_active(to_object_id(list_id, "list"), write_scope(session))
    if doc is None:
        raise EntityNotFoundException(NOT_FOUND)
    return doc


def update_list(
    lists: ListRepository,
    books: BookRepository,
    users: UserRepository,
    session: SessionUser,
    list_id: str,
    body: ListUpdate,
) -> ListRead:
    require_content_editor(session, "lists")
    existing = _get_writable(lists, session, list_id)

    title = (body.title or "").strip()
    if not title:
        raise ValidationException("Title is required")

    provided = body.model_fields_set
    changes: dict = {"title": title, "updatedBy": session_user_id(session)}
    for field, key in (
        ("description", "description"),
        ("cover_image", "coverImage"),
        ("publish_at", "publishAt"),
        ("unpublish_at", "unpublishAt"),
    ):
        if field in provided:
            changes[key] = getattr(body, field)
    if body.visibility is not None:
        changes["visibility"] = body.visibility.value
    if "items" in provided:
        changes["items"] = build_items(books, session, body.items or [], existing.get("items"))

    # Only a store admin reassigns or re-sections; librarians' attempts are ignored
    if session.is_store_admin:
        if "assigned_to" in provided:
            changes["assignedTo"] = resolve_assignees(
                users, existing["companyId"], existing["storeId"], body.assigned_to
            )
        if "sections" in provided:
            changes["sections"] = body.sections or []

    doc = lists.update(existing["_id"], changes)
    logger.info("List updated", list_id=list_id, user_id=session.user_id)
    return to_read(books, doc)


def delete_list(lists: ListRepository, session: SessionUser, list_id: str) -> None:
    """Soft delete: the list disappears from every query but stays stored."""
    require_content_editor(session, "lists")
    existing = _get_writable(lists, session, list_id)

    lists.soft_delete(existing["_id"], session_user_id(session), utcnow())
    logger.info("List soft-deleted", list_id=list_id, user_id=session.user_id)


def remove_item(
    lists: ListRepository,
    books: BookRepository,
    session: SessionUser,
    list_id: str,
    book_id: str,
) -> ListRead:
    require_content_editor(session, "lists")
    existing = _get_writable(lists, session, list_id)
    target = to_object_id(book_id, "book")

    items = existing.get("items", [])
    remaining = [item for item in items if item["bookId"] != target]
    if len(remaining) == len(items):
        raise EntityNotFoundException("Book is not on this list")

    doc = lists.update(
        existing["_id"],
        {"items": densify(remaining), "updatedBy": session_user_id(session)},
    )
    logger.info("List item removed", list_id=list_id, book_id=book_id)
    return to_read(books, doc)
