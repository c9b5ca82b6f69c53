"""Cloudinary signed-upload HTTP client.

Images are pushed to the upload API directly over httpx. The request is
signed with the account secret, so the secret never leaves the server.
"""

import base64
import hashlib
import time
from typing import Optional

import httpx
import structlog

from staffpicks.config import get_settings
from staffpicks.core.exceptions import AppError, ExternalServiceException

settings = get_settings()
logger = structlog.get_logger(__name__)

# Fit inside 500x700 without upscaling, then let Cloudinary pick format/quality
COVER_TRANSFORMATION = "c_limit,h_700,w_500/f_auto,q_auto"


class CloudinaryClient:
    """Client for the Cloudinary image upload API."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.cloud_name = settings.CLOUDINARY_CLOUD_NAME
        self.api_key = settings.CLOUDINARY_API_KEY
        self.api_secret = settings.CLOUDINARY_API_SECRET
        self.folder = settings.CLOUDINARY_FOLDER
        self.base_url = f"https://api.cloudinary.com/v1_1/{self.cloud_name}/image/upload"
        self.transport = transport
        self.timeout = 30

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def sign(self, params: dict) -> str:
        """SHA-1 over the sorted `key=value` pairs followed by the API secret."""
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode()).hexdigest()

    async def upload(self, source: str) -> dict:
        """
        Upload an image to the book-covers folder.

        Args:
            source: a remote URL or a `data:` URI with base64 content

        Returns the provider response (secure_url, public_id, width, height, ...).
        """
        if not self.configured:
            raise AppError("Image upload is not configured")

        params = {
            "folder": self.folder,
            "timestamp": str(int(time.time())),
            "transformation": COVER_TRANSFORMATION,
        }
        payload = {
            **params,
            "file": source,
            "api_key": self.api_key,
            "signature": self.sign(params),
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.base_url, data=payload)
                response.raise_for_status()
                result = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Cloudinary upload rejected",
                status_code=e.response.status_code,
                body=e.response.text[:200],
            )
            raise ExternalServiceException("Failed to upload image") from e
        except httpx.HTTPError as e:
            logger.warning("Cloudinary connection error", error=str(e))
            raise ExternalServiceException("Failed to upload image") from e

        logger.info("Image uploaded", public_id=result.get("public_id"))
        return result

    @staticmethod
    def to_data_uri(content: bytes, content_type: Optional[str]) -> str:
        encoded = base64.b64encode(content).decode("ascii")
        return f"data:{content_type or 'application/octet-stream'};base64,{encoded}"
