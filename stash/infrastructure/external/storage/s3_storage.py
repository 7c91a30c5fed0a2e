"""S3-compatible object storage (AWS S3, MinIO, etc.)."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Any, BinaryIO

import boto3
from botocore.exceptions import ClientError

from stash.infrastructure.exceptions import (
    StorageAlreadyExistsError,
    StorageDeleteError,
    StorageDownloadError,
    StorageNotFoundError,
    StorageUploadError,
)

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


def _is_missing(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") in _MISSING_CODES


class S3StorageService:
    """S3-compatible storage with optional server-side encryption.

    Uses boto3 (sync) via asyncio.to_thread for async API. Compatible with
    AWS S3, MinIO, DigitalOcean Spaces.
    """

    CHUNK_SIZE = 64 * 1024  # 64KB

    is_remote = True

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        server_side_encryption: str | None = None,
    ) -> None:
        """Initialize S3 client.

        Args:
            bucket: Bucket name.
            region: AWS region.
            endpoint_url: Custom endpoint (MinIO/Spaces).
            access_key: Optional; uses env/IAM if not set.
            secret_key: Optional.
            server_side_encryption: e.g. "AES256"; None sends no SSE header
                (MinIO without KMS rejects it).
        """
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        self.server_side_encryption = server_side_encryption
        extra = {} if endpoint_url is None else {"endpoint_url": endpoint_url}
        self._client = boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            **extra,
        )

    def local_path(self, storage_ref: str) -> None:
        return None

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Upload object under storage_ref. Refuses to overwrite."""
        def _upload() -> dict[str, Any]:
            try:
                self._client.head_object(Bucket=self.bucket, Key=storage_ref)
                raise StorageAlreadyExistsError(storage_ref)
            except ClientError as e:
                if not _is_missing(e):
                    raise

            body = file_data.read()
            meta = {k.lower().replace("_", "-"): v for k, v in (metadata or {}).items()}
            params: dict[str, Any] = {
                "Bucket": self.bucket,
                "Key": storage_ref,
                "Body": body,
                "ContentType": content_type,
                "Metadata": meta,
            }
            if self.server_side_encryption:
                params["ServerSideEncryption"] = self.server_side_encryption
            self._client.put_object(**params)
            head = self._client.head_object(Bucket=self.bucket, Key=storage_ref)
            return {
                "storage_ref": storage_ref,
                "size": len(body),
                "content_type": content_type,
                "uploaded_at": head["LastModified"].isoformat(),
            }

        try:
            return await asyncio.to_thread(_upload)
        except StorageAlreadyExistsError:
            raise
        except Exception as e:
            raise StorageUploadError(storage_ref, str(e)) from e

    async def download(
        self,
        storage_ref: str,
        start: int = 0,
        end: int | None = None,
    ) -> AsyncIterator[bytes]:
        """Stream object content, optionally only bytes start..end (inclusive)."""
        def _open() -> Any:
            params: dict[str, Any] = {"Bucket": self.bucket, "Key": storage_ref}
            if start or end is not None:
                params["Range"] = f"bytes={start}-{'' if end is None else end}"
            try:
                return self._client.get_object(**params)["Body"]
            except ClientError as e:
                if _is_missing(e):
                    raise StorageNotFoundError(storage_ref) from e
                raise StorageDownloadError(storage_ref, str(e)) from e

        try:
            body = await asyncio.to_thread(_open)
        except (StorageNotFoundError, StorageDownloadError):
            raise
        except Exception as e:
            raise StorageDownloadError(storage_ref, str(e)) from e
        try:
            while True:
                chunk = await asyncio.to_thread(body.read, self.CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk
        finally:
            body.close()

    async def delete(self, storage_ref: str) -> bool:
        """Delete object. Returns True if deleted."""
        def _delete() -> bool:
            try:
                self._client.head_object(Bucket=self.bucket, Key=storage_ref)
            except ClientError as e:
                if _is_missing(e):
                    return False
                raise
            self._client.delete_object(Bucket=self.bucket, Key=storage_ref)
            return True

        try:
            return await asyncio.to_thread(_delete)
        except Exception as e:
            raise StorageDeleteError(storage_ref, str(e)) from e

    async def exists(self, storage_ref: str) -> bool:
        """Return True if object exists."""
        def _exists() -> bool:
            try:
                self._client.head_object(Bucket=self.bucket, Key=storage_ref)
                return True
            except ClientError:
                return False

        return await asyncio.to_thread(_exists)
