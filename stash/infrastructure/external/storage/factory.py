"""Builds the configured storage backend.

Settings.validate_storage_and_ids has already rejected unknown backends
and S3 without a bucket, so this only maps the backend name to a class.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from stash.infrastructure.external.storage.protocol import StorageProtocol

if TYPE_CHECKING:
    from stash.core.config import Settings


class StorageFactory:
    """Maps settings.storage_backend to a storage service instance."""

    @staticmethod
    def create_storage_service(settings: Settings) -> StorageProtocol:
        """Return LocalStorageService or S3StorageService for settings.

        boto3 is imported only for the s3 backend (the 's3' extra).
        """
        if settings.storage_backend == "s3":
            from stash.infrastructure.external.storage.s3_storage import S3StorageService

            secret = settings.s3_secret_key
            return S3StorageService(
                bucket=settings.s3_bucket,
                region=settings.s3_region,
                endpoint_url=settings.s3_endpoint_url,
                access_key=settings.s3_access_key,
                secret_key=secret.get_secret_value() if secret else None,
                server_side_encryption=settings.s3_server_side_encryption,
            )

        from stash.infrastructure.external.storage.local_storage import LocalStorageService

        return LocalStorageService(storage_root=settings.storage_root)
