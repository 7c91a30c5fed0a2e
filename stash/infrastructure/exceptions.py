"""Infrastructure exceptions for storage operations.

Storage errors extend StashException so presentation can map them
to HTTP responses consistently. StorageUploadError is the pipeline's
fatal StorageWriteFailed.
"""

from stash.domain.exceptions import StashException


class StorageException(StashException):
    """Base exception for storage operations."""


class StorageNotFoundError(StorageException):
    """File or object not found in storage."""

    def __init__(self, file_path: str) -> None:
        super().__init__(
            f"File not found: {file_path}",
            "STORAGE_NOT_FOUND",
            {"file_path": file_path},
        )


class StorageUploadError(StorageException):
    """File upload failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to upload file: {file_path}",
            "STORAGE_UPLOAD_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageDownloadError(StorageException):
    """File download failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to download file: {file_path}",
            "STORAGE_DOWNLOAD_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageDeleteError(StorageException):
    """File deletion failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to delete file: {file_path}",
            "STORAGE_DELETE_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageAlreadyExistsError(StorageException):
    """A different file already occupies the storage ref."""

    def __init__(self, file_path: str) -> None:
        super().__init__(
            f"File already exists: {file_path}",
            "STORAGE_EXISTS_ERROR",
            {"file_path": file_path},
        )


class StoragePermissionError(StorageException):
    """Storage ref resolves outside the storage root."""

    def __init__(self, file_path: str, operation: str) -> None:
        super().__init__(
            f"Permission denied for {operation} on {file_path}",
            "STORAGE_PERMISSION_ERROR",
            {"file_path": file_path, "operation": operation},
        )
