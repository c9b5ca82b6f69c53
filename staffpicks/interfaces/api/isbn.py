"""ISBN lookup proxy — keeps the provider key on the server."""

import re

from fastapi import APIRouter, Depends

from staffpicks.core.exceptions import ValidationException
from staffpicks.infrastructure.isbndb_api import ISBNdbClient
from staffpicks.interfaces.deps import get_isbndb_client

router = APIRouter(prefix="/api/isbn", tags=["ISBN"])

ISBN_PATTERN = re.compile(r"^(\d{9}[\dXx]|\d{13})$")


def normalize_isbn(raw: str) -> str:
    """Strip hyphens and spaces, then check the ISBN-10/ISBN-13 shape."""
    isbn = re.sub(r"[-\s]", "", raw)
    if not ISBN_PATTERN.match(isbn):
        raise ValidationException("Invalid ISBN format. Must be 10 or 13 digits.")
    return isbn.upper()


@router.get("/{isbn}")
async def lookup_isbn(isbn: str, client: ISBNdbClient = Depends(get_isbndb_client)):
    return await client.get_book(normalize_isbn(isbn))
