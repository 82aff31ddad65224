"""
Asset storage backends — turn an asset's stored file key into a URL.

Two backends, picked by STORAGE_BACKEND:

    local   files live under UPLOADS_DIR/assets/; the URL is the
            site-relative path ("/uploads/assets/<key>").  Nothing to
            sign, the TTL is ignored.
    s3      files live in an S3/MinIO bucket; the URL is a presigned
            GET valid for ASSET_URL_TTL_SECONDS.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from doccraft.core.config import settings
from doccraft.core.constants import StorageBackend
from doccraft.core.logging import get_logger
from doccraft.pipeline.context import AssetRef
from doccraft.pipeline.errors import StorageError

logger = get_logger(__name__)


class AssetStorage(Protocol):
    def url(self, asset: AssetRef) -> str:
        """Return a (signed, time-limited where supported) URL for the asset file."""
        ...


class LocalAssetStorage:
    """Assets served from the local uploads directory."""

    def __init__(self, uploads_dir: str | None = None) -> None:
        self.uploads_dir = (uploads_dir or settings.UPLOADS_DIR).strip("/")

    def url(self, asset: AssetRef) -> str:
        if not asset.file:
            raise StorageError(f"Asset '{asset.name}' has no stored file")
        return f"/{self.uploads_dir}/assets/{asset.file.lstrip('/')}"


class S3AssetStorage:
    """Assets in an S3-compatible bucket, exposed through presigned URLs."""

    def __init__(
        self,
        bucket: str | None = None,
        ttl_seconds: int | None = None,
        client=None,
    ) -> None:
        self.bucket = bucket or settings.STORAGE_BUCKET_NAME
        self.ttl_seconds = ttl_seconds or settings.ASSET_URL_TTL_SECONDS
        self.client = client or boto3.client(
            "s3",
            endpoint_url=settings.STORAGE_ENDPOINT,
            aws_access_key_id=settings.STORAGE_ACCESS_KEY,
            aws_secret_access_key=settings.STORAGE_SECRET_KEY,
            region_name=settings.AWS_REGION,
            config=Config(signature_version="s3v4"),
        )

    def url(self, asset: AssetRef) -> str:
        if not asset.file:
            raise StorageError(f"Asset '{asset.name}' has no stored file")
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": asset.file},
                ExpiresIn=self.ttl_seconds,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error(
                "Presigning asset URL failed",
                asset=asset.name,
                key=asset.file,
                bucket=self.bucket,
                error=str(exc),
            )
            raise StorageError(f"Cannot sign URL for asset '{asset.name}': {exc}") from exc


@lru_cache(maxsize=1)
def get_asset_storage() -> AssetStorage:
    """Storage backend configured for this process."""
    backend = StorageBackend(settings.STORAGE_BACKEND.lower())
    if backend is StorageBackend.S3:
        return S3AssetStorage()
    return LocalAssetStorage()
