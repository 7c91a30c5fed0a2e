"""Resource delivery: resolve ids, stream bytes, and build embed/oEmbed/thumbnail responses.

Read-only over the resource table.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import aiofiles

from stash.application.dtos.delivery import ByteStream
from stash.application.interfaces import IStorageService
from stash.application.services.urls import UrlBuilder
from stash.domain.entities.resource import Resource, resource_key
from stash.domain.exceptions import ResourceNotFoundException
from stash.infrastructure.persistence.resource_store import ResourceStore
from stash.pages.embed import EmbedUrls, render_embed

logger = logging.getLogger(__name__)

_RANGE_RE = re.compile(r"^bytes=(\d*)-(\d*)$")


def parse_range(header: str | None, size: int) -> tuple[int, int] | None:
    """Parse a single 'bytes=a-b' range against size.

    Returns:
        Inclusive (start, end), or None when no usable range was requested.

    Raises:
        ValueError: The range cannot be satisfied (start beyond the end).
    """
    if not header:
        return None
    match = _RANGE_RE.match(header.strip())
    if not match:
        return None
    first, last = match.groups()
    if not first and not last:
        return None
    if not first:
        # Suffix range: the final N bytes.
        length = int(last)
        if length == 0:
            raise ValueError("empty suffix range")
        return max(size - length, 0), size - 1
    start = int(first)
    end = int(last) if last else size - 1
    if start >= size or end < start:
        raise ValueError(f"range {header!r} outside 0..{size - 1}")
    return start, min(end, size - 1)


class DeliveryService:
    """Serves resources, thumbnails and oEmbed metadata out of the resource table."""

    def __init__(
        self,
        storage: IStorageService,
        resources: ResourceStore,
        thumbnails_dir: Path,
        urls: UrlBuilder,
        site_name: str = "stash",
    ) -> None:
        self.storage = storage
        self.resources = resources
        self.thumbnails_dir = Path(thumbnails_dir)
        self.urls = urls
        self.site_name = site_name

    def resolve(self, path_id: str) -> Resource:
        """Return the resource addressed by a path segment (extension optional).

        Raises:
            ResourceNotFoundException: Unknown or malformed identifier.
        """
        if not path_id or "/" in path_id:
            raise ResourceNotFoundException(path_id)
        for key in (path_id, resource_key(path_id)):
            resource = self.resources.get(key)
            if resource is not None:
                return resource
        raise ResourceNotFoundException(path_id)

    def embed(self, resource: Resource) -> str:
        """HTML embed document for bot user agents."""
        rid = resource.resource_id
        return render_embed(
            resource,
            EmbedUrls(
                resource=self.urls.resource(rid),
                direct=self.urls.direct(rid),
                thumbnail=self.urls.thumbnail(rid),
                oembed=self.urls.oembed(rid),
            ),
            site_name=self.site_name,
        )

    async def open_stream(self, resource: Resource, range_header: str | None = None) -> ByteStream:
        """Prepare the raw bytes response for resource.

        Local storage advertises byte ranges and honours a single Range request.

        Raises:
            ResourceNotFoundException: Metadata exists but the bytes are gone.
        """
        if not await self.storage.exists(resource.storage_ref):
            logger.warning("Bytes missing for %s (%s)", resource.resource_id, resource.storage_ref)
            raise ResourceNotFoundException(resource.resource_id)

        if self.storage.is_remote:
            return ByteStream(
                status_code=200,
                media_type=resource.mime_type,
                body=self.storage.download(resource.storage_ref),
                headers={"Content-Length": str(resource.size)},
            )

        size = resource.size
        headers = {"Accept-Ranges": "bytes"}
        try:
            byte_range = parse_range(range_header, size)
        except ValueError:
            headers["Content-Range"] = f"bytes */{size}"
            return ByteStream(status_code=416, media_type=resource.mime_type, body=None, headers=headers)

        if byte_range is None:
            headers["Content-Length"] = str(size)
            return ByteStream(
                status_code=200,
                media_type=resource.mime_type,
                body=self.storage.download(resource.storage_ref),
                headers=headers,
            )
        start, end = byte_range
        headers["Content-Length"] = str(end - start + 1)
        headers["Content-Range"] = f"bytes {start}-{end}/{size}"
        return ByteStream(
            status_code=206,
            media_type=resource.mime_type,
            body=self.storage.download(resource.storage_ref, start=start, end=end),
            headers=headers,
        )

    async def read_thumbnail(self, resource: Resource) -> bytes:
        """Return the JPEG thumbnail bytes.

        Raises:
            ResourceNotFoundException: No thumbnail recorded, or it cannot be read.
        """
        if not resource.thumbnail:
            raise ResourceNotFoundException(resource.resource_id, "thumbnail")
        path = self.thumbnails_dir / resource.thumbnail
        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except OSError as e:
            logger.warning("Thumbnail unreadable for %s: %s", resource.resource_id, e)
            raise ResourceNotFoundException(resource.resource_id, "thumbnail") from e

    def oembed(self, resource: Resource) -> dict[str, Any]:
        """oEmbed document (https://oembed.com/) for clickable author/provider links."""
        og = resource.opengraph
        return {
            "version": "1.0",
            "type": "video" if resource.is_video else "photo",
            "author_name": og.author,
            "author_url": og.author_url,
            "provider_name": og.provider,
            "provider_url": og.provider_url,
        }
