"""Upload API routes — book cover images pushed to Cloudinary."""

import structlog
from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from staffpicks.core.exceptions import ValidationException
from staffpicks.domain.schemas.auth import SessionUser
from staffpicks.infrastructure.cloudinary_api import CloudinaryClient
from staffpicks.interfaces.api.deps import get_current_session
from staffpicks.interfaces.deps import get_cloudinary_client

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/api/upload", tags=["Uploads"])


async def _read_source(request: Request) -> str:
    """The upload source: a multipart `file` as a data URI, or a JSON `url`."""
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        file = form.get("file")
        if not isinstance(file, UploadFile):
            raise ValidationException("No file or URL provided")
        content = await file.read()
        if not content:
            raise ValidationException("Uploaded file is empty")
        return CloudinaryClient.to_data_uri(content, file.content_type)

    try:
        body = await request.json()
    except ValueError:
        raise ValidationException("No file or URL provided")
    url = body.get("url") if isinstance(body, dict) else None
    if not url:
        raise ValidationException("No file or URL provided")
    return url


@router.post("/image")
async def upload_image(
    request: Request,
    cloudinary: CloudinaryClient = Depends(get_cloudinary_client),
    session: SessionUser = Depends(get_current_session),
):
    source = await _read_source(request)
    result = await cloudinary.upload(source)

    logger.info("Cover image uploaded", user_id=session.user_id, public_id=result.get("public_id"))
    return {
        "success": True,
        "url": result.get("secure_url"),
        "publicId": result.get("public_id"),
        "width": result.get("width"),
        "height": result.get("height"),
    }
