"""DTOs for the upload use case."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, BinaryIO

from stash.domain.entities.resource import OpenGraphOverrides, Resource
from stash.domain.enums import IdStrategy

if TYPE_CHECKING:
    from stash.infrastructure.external.notifications.discord_webhook import WebhookTarget


@dataclass(frozen=True)
class UploadRequest:
    """One parsed upload: file stream plus the x-ass-* options."""

    file_data: BinaryIO
    original_name: str
    mime_type: str
    token: str | None
    strategy: IdStrategy
    length: int
    alt_length: int
    opengraph: OpenGraphOverrides = field(default_factory=OpenGraphOverrides)
    domain: str | None = None
    webhook: WebhookTarget | None = None


@dataclass(frozen=True)
class UploadResult:
    """Committed resource and the URLs returned to the uploader."""

    resource: Resource
    resource_url: str
    thumbnail_url: str
    delete_url: str
    webhook: WebhookTarget | None = None
