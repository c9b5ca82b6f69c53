"""Books API routes — role-scoped catalog CRUD."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from staffpicks.application.services.book_service import (
    create_book,
    delete_book,
    get_book,
    get_books,
    update_book,
)
from staffpicks.domain.repositories.content_repository import BookRepository
from staffpicks.domain.repositories.user_repository import UserRepository
from staffpicks.domain.schemas.auth import SessionUser
from staffpicks.domain.schemas.book import BookCreate, BookFilter, BookUpdate
from staffpicks.interfaces.api.deps import get_current_session
from staffpicks.interfaces.deps import get_book_repository, get_user_repository

router = APIRouter(prefix="/api/books", tags=["Books"])


@router.get("")
def list_books(
    genre: Optional[str] = None,
    tone: Optional[str] = None,
    age_group: Optional[str] = Query(None, alias="ageGroup"),
    search: Optional[str] = None,
    company_id: Optional[str] = Query(None, alias="companyId"),
    limit: int = Query(50, ge=1, le=200),
    skip: int = Query(0, ge=0),
    books: BookRepository = Depends(get_book_repository),
    users: UserRepository = Depends(get_user_repository),
    session: SessionUser = Depends(get_current_session),
):
    filters = BookFilter(
        genre=genre,
        tone=tone,
        age_group=age_group,
        search=search,
        company_id=company_id,
        limit=limit,
        skip=skip,
    )
    return get_books(books, users, session, filters)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_book_route(
    body: BookCreate,
    books: BookRepository = Depends(get_book_repository),
    users: UserRepository = Depends(get_user_repository),
    session: SessionUser = Depends(get_current_session),
):
    book = create_book(books, users, session, body)
    return {"message": "Book created successfully", "book": book}


@router.get("/{book_id}")
def get_book_route(
    book_id: str,
    books: BookRepository = Depends(get_book_repository),
    users: UserRepository = Depends(get_user_repository),
    session: SessionUser = Depends(get_current_session),
):
    return {"book": get_book(books, users, session, book_id)}


@router.put("/{book_id}")
def update_book_route(
    book_id: str,
    body: BookUpdate,
    books: BookRepository = Depends(get_book_repository),
    users: UserRepository = Depends(get_user_repository),
    session: SessionUser = Depends(get_current_session),
):
    book = update_book(books, users, session, book_id, body)
    return {"message": "Book updated successfully", "book": book}


@router.delete("/{book_id}")
def delete_book_route(
    book_id: str,
    books: BookRepository = Depends(get_book_repository),
    session: SessionUser = Depends(get_current_session),
):
    delete_book(books, session, book_id)
    return {"message": "Book deleted successfully"}
