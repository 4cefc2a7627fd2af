"""Object storage (S3) for organization logos and event images.

Only object keys are built here; durability and serving are left to S3.
Keys follow the layout already present in the bucket:

- ``events/{timestamp}-{filename}``
- ``logos/{organizationId}``
- ``organization-logos/{timestamp}-{filename}`` (written by clients via the
  generic upload endpoint, which takes the key as given)
"""

import asyncio
import logging
import time
from pathlib import PurePath
from typing import Optional

import boto3

from app.config import settings

logger = logging.getLogger(__name__)


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


def _safe_filename(filename: Optional[str]) -> str:
    name = PurePath(filename or "upload").name
    return name.replace(" ", "_") or "upload"


def event_image_key(filename: Optional[str]) -> str:
    return f"events/{_timestamp_ms()}-{_safe_filename(filename)}"


def organization_logo_key(organization_id: str) -> str:
    return f"logos/{organization_id}"


class StorageService:
    """Thin wrapper over the S3 PutObject call"""

    def __init__(self):
        self._client = None

    @property
    def bucket(self) -> str:
        return settings.S3_BUCKET_NAME

    @property
    def client(self):
        if self._client is None:
            kwargs = {"region_name": settings.AWS_REGION}
            if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
                kwargs["aws_access_key_id"] = settings.AWS_ACCESS_KEY_ID
                kwargs["aws_secret_access_key"] = settings.AWS_SECRET_ACCESS_KEY
            self._client = boto3.client("s3", **kwargs)
        return self._client

    def public_url(self, key: str, bucket: Optional[str] = None) -> str:
        return f"https://{bucket or self.bucket}.s3.{settings.AWS_REGION}.amazonaws.com/{key}"

    async def upload_bytes(
        self, key: str, content: bytes, content_type: Optional[str] = None
    ) -> str:
        """
        Store bytes under ``key`` and return the public URL

        Raises:
            ValueError: no bucket is configured
            Exception: the S3 call failed
        """
        if not self.bucket:
            raise ValueError("S3_BUCKET_NAME is not defined")

        def _put():
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=content,
                ContentType=content_type or "application/octet-stream",
            )

        await asyncio.to_thread(_put)
        logger.info(f"Uploaded {len(content)} bytes to s3://{self.bucket}/{key}")
        return self.public_url(key)


storage_service = StorageService()
