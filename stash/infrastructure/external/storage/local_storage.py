"""Local filesystem storage with path validation and atomic writes."""

from __future__ import annotations

import os
import tempfile
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any, BinaryIO

import aiofiles
import aiofiles.os

from stash.infrastructure.exceptions import (
    StorageAlreadyExistsError,
    StorageDeleteError,
    StorageDownloadError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageUploadError,
)
from stash.shared.utils.datetime import utc_now


class LocalStorageService:
    """Local filesystem storage with atomic writes and path traversal protection.

    Paths are validated against storage_root. Writes use temp file + rename,
    so a reader never sees a partially written resource.
    """

    CHUNK_SIZE = 64 * 1024  # 64KB

    is_remote = False

    def __init__(self, storage_root: str) -> None:
        """Initialize local storage.

        Args:
            storage_root: Base directory for all files.
        """
        self.storage_root = Path(storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, storage_ref: str) -> Path:
        """Resolve and validate path under storage_root. Raises StoragePermissionError if traversal."""
        full_path = (self.storage_root / storage_ref).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StoragePermissionError(storage_ref, "path_validation") from e
        return full_path

    def local_path(self, storage_ref: str) -> Path:
        return self._get_full_path(storage_ref)

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Write file_data to storage_ref atomically. Refuses to overwrite."""
        try:
            target_path = self._get_full_path(storage_ref)
            if target_path.exists():
                raise StorageAlreadyExistsError(storage_ref)

            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            temp_fd, temp_path = tempfile.mkstemp(
                dir=target_path.parent,
                prefix=".tmp_",
                suffix=target_path.suffix,
            )
            os.close(temp_fd)
            try:
                file_size = 0
                async with aiofiles.open(temp_path, "wb") as f:
                    while chunk := file_data.read(self.CHUNK_SIZE):
                        await f.write(chunk)
                        file_size += len(chunk)
                os.chmod(temp_path, 0o640)
                os.rename(temp_path, target_path)
                return {
                    "storage_ref": storage_ref,
                    "size": file_size,
                    "content_type": content_type,
                    "uploaded_at": utc_now().isoformat(),
                }
            finally:
                if Path(temp_path).exists():
                    os.unlink(temp_path)
        except (StorageAlreadyExistsError, StoragePermissionError):
            raise
        except Exception as e:
            raise StorageUploadError(storage_ref, str(e)) from e

    async def download(
        self,
        storage_ref: str,
        start: int = 0,
        end: int | None = None,
    ) -> AsyncIterator[bytes]:
        """Stream file content, optionally only bytes start..end (inclusive)."""
        try:
            file_path = self._get_full_path(storage_ref)
            if not file_path.exists():
                raise StorageNotFoundError(storage_ref)
            remaining = None if end is None else end - start + 1
            async with aiofiles.open(file_path, "rb") as f:
                if start:
                    await f.seek(start)
                while remaining is None or remaining > 0:
                    size = self.CHUNK_SIZE if remaining is None else min(self.CHUNK_SIZE, remaining)
                    chunk = await f.read(size)
                    if not chunk:
                        break
                    if remaining is not None:
                        remaining -= len(chunk)
                    yield chunk
        except StorageNotFoundError:
            raise
        except Exception as e:
            raise StorageDownloadError(storage_ref, str(e)) from e

    async def delete(self, storage_ref: str) -> bool:
        """Delete file and prune empty partition folders. Returns True if deleted."""
        try:
            file_path = self._get_full_path(storage_ref)
            if not file_path.exists():
                return False
            await aiofiles.os.remove(file_path)
            parent = file_path.parent
            while parent != self.storage_root:
                try:
                    if not any(parent.iterdir()):
                        parent.rmdir()
                        parent = parent.parent
                    else:
                        break
                except OSError:
                    break
            return True
        except Exception as e:
            raise StorageDeleteError(storage_ref, str(e)) from e

    async def exists(self, storage_ref: str) -> bool:
        """Return True if file exists."""
        try:
            return self._get_full_path(storage_ref).exists()
        except StoragePermissionError:
            return False
