"""Service interfaces (ports) for the application layer.

Protocols define contracts for the collaborators the upload, delivery
and deletion use cases depend on (DIP).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from stash.infrastructure.external.notifications.discord_webhook import WebhookTarget


class IThumbnailGenerator(Protocol):
    """Derive a thumbnail from a local file; return its reference or None."""

    name: str

    def __call__(self, source: Path, mime_type: str, stem: str) -> str | None:
        """Raise PostProcessFailedException when the file cannot be decoded."""

    def remove(self, filename: str | None) -> None:
        """Delete a previously generated thumbnail (no-op when absent)."""


class IColorExtractor(Protocol):
    """Derive a dominant colour ('#rrggbb') from a local file."""

    name: str

    def __call__(self, source: Path, mime_type: str) -> str | None:
        """Raise PostProcessFailedException when the file cannot be decoded."""


class INotifier(Protocol):
    """Best-effort outbound notification."""

    async def send(self, target: WebhookTarget, payload: dict[str, Any]) -> None:
        """Raise NotifyFailedException on failure."""
