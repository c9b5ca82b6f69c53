"""ISBNdb HTTP client used by the book form's lookup button."""

from typing import Optional

import httpx
import structlog

from staffpicks.config import get_settings
from staffpicks.core.exceptions import AppError, EntityNotFoundException, ExternalServiceException

settings = get_settings()
logger = structlog.get_logger(__name__)


class ISBNdbClient:
    """Client for the ISBNdb v2 book endpoint."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = settings.ISBN_DB_URL.rstrip("/")
        self.api_key = settings.NEXT_ISBN_DB_KEY
        self.transport = transport
        self.timeout = 15

    async def get_book(self, isbn: str) -> dict:
        """Fetch the provider record for a normalised ISBN."""
        if not self.api_key:
            raise AppError("API key not configured")

        headers = {
            "Authorization": self.api_key,
            "Content-Type": "application/json",
        }
        url = f"{self.base_url}/book/{isbn}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("ISBNdb connection error", isbn=isbn, error=str(e))
            raise ExternalServiceException("Failed to fetch book data") from e

        if response.status_code == 404:
            raise EntityNotFoundException("Book not found")
        if response.is_error:
            logger.warning("ISBNdb request failed", isbn=isbn, status_code=response.status_code)
            raise ExternalServiceException("Failed to fetch book data")

        return response.json()
