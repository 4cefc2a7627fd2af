"""
Generic file upload endpoint backed by S3

Errors are returned as ``{"message": ...}`` rather than FastAPI's default
``{"detail": ...}`` because browser upload widgets read that field.
"""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse
from typing import Optional

from app.config import settings
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.upload import UploadResponse
from app.services.storage_service import storage_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Upload"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


@router.post("/upload", response_model=UploadResponse)
async def upload_file(
    file: Optional[UploadFile] = File(None),
    key: Optional[str] = Form(None),
    bucket: Optional[str] = Form(None),
    current_user: User = Depends(get_current_user),
):
    """
    Store one file under ``key`` and return its public URL

    - **file**: the file content
    - **key**: object key, e.g. ``events/1700000000000-poster.png``
    - **bucket**: optional, must be the configured bucket
    """
    if file is None or not key or not key.strip():
        return _error(status.HTTP_400_BAD_REQUEST, "Missing file or key")
    if bucket and bucket != storage_service.bucket:
        return _error(status.HTTP_400_BAD_REQUEST, "Unknown bucket")

    content = await file.read()
    if len(content) > settings.max_upload_size_bytes:
        return _error(
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            f"File exceeds {settings.MAX_UPLOAD_SIZE_MB} MB",
        )

    try:
        url = await storage_service.upload_bytes(key.strip(), content, file.content_type)
    except Exception as e:
        logger.error(f"Upload of {key} by {current_user.uid} failed: {e}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Upload failed")
    return UploadResponse(url=url)
