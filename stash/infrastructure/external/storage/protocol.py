"""Storage service protocol (DIP). Implementations: LocalStorageService, S3StorageService."""

from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any, BinaryIO, Protocol


class StorageProtocol(Protocol):
    """Protocol for resource byte storage (local disk, S3-compatible)."""

    #: True when bytes do not live on this machine (post-processors need a temp copy).
    is_remote: bool

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Write file_data under storage_ref. Returns storage_ref, size, uploaded_at."""
        ...

    def download(
        self,
        storage_ref: str,
        start: int = 0,
        end: int | None = None,
    ) -> AsyncIterator[bytes]:
        """Stream content, optionally the inclusive byte range start..end."""
        ...

    async def delete(self, storage_ref: str) -> bool:
        """Delete file. Returns True if deleted, False if not found."""
        ...

    async def exists(self, storage_ref: str) -> bool:
        """Return True if file exists."""
        ...

    def local_path(self, storage_ref: str) -> Path | None:
        """Return the on-disk path for local backends, None for remote ones."""
        ...
