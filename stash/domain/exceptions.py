"""Domain exceptions for the stash service.

Defines domain-level exceptions that represent rule violations in the
ingestion, delivery and deletion flows. These exceptions are independent
of infrastructure concerns. Presentation layer maps them to HTTP
responses in exception handlers.
"""

from typing import Any


class StashException(Exception):
    """Base exception for all stash errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP status codes using error_code.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. resource_id, filename).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logs."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ResourceNotFoundException(StashException):
    """Raised when a resource id (or its thumbnail) does not resolve."""

    def __init__(self, resource_id: str, what: str = "resource") -> None:
        """Initialize with the identifier that failed to resolve.

        Args:
            resource_id: Identifier taken from the request path.
            what: What was being looked up ('resource' or 'thumbnail').
        """
        super().__init__(
            f"{what.capitalize()} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_id": resource_id, "what": what},
        )


class UnauthorizedException(StashException):
    """Raised when an upload carries no token or a token the credential store rejects."""

    def __init__(self, message: str = "Missing or unknown token") -> None:
        super().__init__(message, "UNAUTHORIZED")


class UnknownResourceException(StashException):
    """Raised when a delete link names a stored filename no resource owns."""

    def __init__(self, filename: str) -> None:
        super().__init__(
            f"No resource stored as: {filename}",
            "UNKNOWN_RESOURCE",
            {"filename": filename},
        )


class ExhaustedIdSpaceException(StashException):
    """Raised when no free identifier was found within the retry ceiling.

    Fatal to the current upload only.
    """

    def __init__(self, strategy: str, attempts: int) -> None:
        super().__init__(
            f"No free identifier after {attempts} attempts ({strategy})",
            "ID_SPACE_EXHAUSTED",
            {"strategy": strategy, "attempts": attempts},
        )


class PostProcessFailedException(StashException):
    """Raised by a post-processor; recovered by the pipeline (field left unset)."""

    def __init__(self, processor: str, reason: str) -> None:
        super().__init__(
            f"Post-processor {processor} failed: {reason}",
            "POST_PROCESS_FAILED",
            {"processor": processor, "reason": reason},
        )


class NotifyFailedException(StashException):
    """Raised by a notifier; logged only, never surfaced to the uploader."""

    def __init__(self, target: str, reason: str) -> None:
        super().__init__(
            f"Notification to {target} failed: {reason}",
            "NOTIFY_FAILED",
            {"target": target, "reason": reason},
        )
