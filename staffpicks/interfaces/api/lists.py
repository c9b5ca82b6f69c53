"""Lists API routes — curated lists and their items."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from staffpicks.application.services.list_service import (
    create_list,
    delete_list,
    get_list,
    get_lists,
    remove_item,
    update_list,
)
from staffpicks.domain.models.book_list import ListVisibility
from staffpicks.domain.repositories.content_repository import BookRepository, ListRepository
from staffpicks.domain.repositories.user_repository import UserRepository
from staffpicks.domain.schemas.auth import SessionUser
from staffpicks.domain.schemas.book_list import ListCreate, ListFilter, ListUpdate
from staffpicks.interfaces.api.deps import get_current_session
from staffpicks.interfaces.deps import get_book_repository, get_list_repository, get_user_repository

router = APIRouter(prefix="/api/lists", tags=["Lists"])


@router.get("")
def list_lists(
    visibility: Optional[ListVisibility] = None,
    owner_user_id: Optional[str] = Query(None, alias="ownerUserId"),
    company_id: Optional[str] = Query(None, alias="companyId"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    lists: ListRepository = Depends(get_list_repository),
    books: BookRepository = Depends(get_book_repository),
    users: UserRepository = Depends(get_user_repository),
    session: SessionUser = Depends(get_current_session),
):
    filters = ListFilter(
        visibility=visibility,
        owner_user_id=owner_user_id,
        company_id=company_id,
        page=page,
        limit=limit,
    )
    return get_lists(lists, books, users, session, filters)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_list_route(
    body: ListCreate,
    lists: ListRepository = Depends(get_list_repository),
    books: BookRepository = Depends(get_book_repository),
    users: UserRepository = Depends(get_user_repository),
    session: SessionUser = Depends(get_current_session),
):
    created = create_list(lists, books, users, session, body)
    return {"message": "List created successfully", "list": created}


@router.get("/{list_id}")
def get_list_route(
    list_id: str,
    lists: ListRepository = Depends(get_list_repository),
    books: BookRepository = Depends(get_book_repository),
    users: UserRepository = Depends(get_user_repository),
    session: SessionUser = Depends(get_current_session),
):
    return {"list": get_list(lists, books, users, session, list_id)}


@router.put("/{list_id}")
def update_list_route(
    list_id: str,
    body: ListUpdate,
    lists: ListRepository = Depends(get_list_repository),
    books: BookRepository = Depends(get_book_repository),
    users: UserRepository = Depends(get_user_repository),
    session: SessionUser = Depends(get_current_session),
):
    updated = update_list(lists, books, users, session, list_id, body)
    return {"message": "List updated successfully", "list": updated}


@router.delete("/{list_id}")
def delete_list_route(
    list_id: str,
    lists: ListRepository = Depends(get_list_repository),
    session: SessionUser = Depends(get_current_session),
):
    delete_list(lists, session, list_id)
    return {"message": "List deleted successfully"}


@router.delete("/{list_id}/items/{book_id}")
def remove_list_item(
    list_id: str,
    book_id: str,
    lists: ListRepository = Depends(get_list_repository),
    books: BookRepository = Depends(get_book_repository),
    session: SessionUser = Depends(get_current_session),
):
    return {"list": remove_item(lists, books, session, list_id, book_id)}
