"""Upload pipeline: store bytes, post-process, commit metadata, then notify and account.

Stages run strictly in UploadStage order for one upload. ingest() covers
everything up to the commit and is what the uploader waits for;
notify_and_account() runs after the response has been sent.
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import aiofiles

from stash.application.dtos.upload import UploadRequest, UploadResult
from stash.application.interfaces import (
    IColorExtractor,
    INotifier,
    IStorageService,
    IThumbnailGenerator,
)
from stash.application.services.id_generator import IdGenerator, sanitize_original_stem
from stash.application.services.urls import UrlBuilder
from stash.domain.entities.resource import Resource, split_extension
from stash.domain.enums import UploadStage
from stash.domain.exceptions import (
    NotifyFailedException,
    PostProcessFailedException,
    StashException,
    UnauthorizedException,
)
from stash.infrastructure.external.notifications.discord_webhook import build_upload_payload
from stash.infrastructure.persistence.credential_store import CredentialStore
from stash.infrastructure.persistence.resource_store import ResourceStore
from stash.shared.utils.datetime import month_partition, now_millis
from stash.shared.utils.generators import generate_stored_filename

logger = logging.getLogger(__name__)


def _stored_filename(original_name: str, save_as_original: bool) -> str:
    if not save_as_original:
        return generate_stored_filename()
    _, extension = split_extension(os.path.basename(original_name))
    return f"{sanitize_original_stem(original_name)}{extension}"


class UploadService:
    """Orchestrates one upload across storage, post-processors and both stores."""

    def __init__(
        self,
        storage: IStorageService,
        resources: ResourceStore,
        credentials: CredentialStore,
        id_generator: IdGenerator,
        thumbnailer: IThumbnailGenerator,
        color_extractor: IColorExtractor,
        notifier: INotifier,
        urls: UrlBuilder,
        *,
        save_with_date: bool = False,
        save_as_original: bool = False,
        auto_register_tokens: bool = False,
        post_process_timeout: float | None = 30.0,
        temp_dir: Path | None = None,
    ) -> None:
        self.storage = storage
        self.resources = resources
        self.credentials = credentials
        self.id_generator = id_generator
        self.thumbnailer = thumbnailer
        self.color_extractor = color_extractor
        self.notifier = notifier
        self.urls = urls
        self.save_with_date = save_with_date
        self.save_as_original = save_as_original
        self.auto_register_tokens = auto_register_tokens
        self.post_process_timeout = post_process_timeout
        self.temp_dir = temp_dir

    def _stage(self, label: str, stage: UploadStage) -> None:
        logger.debug("Upload %s: %s", label, stage.value)

    def is_authorized(self, token: str | None) -> bool:
        """True if token may commit uploads (known, or any token when auto-registration is on)."""
        if not token:
            return False
        return self.credentials.authenticate(token) is not None or self.auto_register_tokens

    def _require_authorized(self, token: str | None) -> None:
        if not self.is_authorized(token):
            raise UnauthorizedException()

    async def ingest(self, request: UploadRequest) -> UploadResult:
        """Run Received -> StoredBytes -> PostProcessed -> Committed.

        Raises:
            UnauthorizedException: Missing/unknown token (checked before and at commit).
            StorageUploadError: Bytes could not be written; nothing else ran.
            ExhaustedIdSpaceException: No free identifier; stored bytes are discarded.
        """
        label = request.original_name
        self._require_authorized(request.token)
        self._stage(label, UploadStage.RECEIVED)

        stored_filename = _stored_filename(request.original_name, self.save_as_original)
        storage_ref = (
            f"{month_partition()}/{stored_filename}" if self.save_with_date else stored_filename
        )
        written = await self.storage.upload(
            file_data=request.file_data,
            storage_ref=storage_ref,
            content_type=request.mime_type,
            metadata={"original_name": request.original_name},
        )
        self._stage(label, UploadStage.STORED_BYTES)

        thumbnail, dominant_color = await self._post_process(storage_ref, request.mime_type)
        self._stage(label, UploadStage.POST_PROCESSED)

        try:
            resource = self._commit(request, stored_filename, storage_ref, written, thumbnail, dominant_color)
        except Exception:
            await self._discard(storage_ref, thumbnail)
            raise
        self._stage(label, UploadStage.COMMITTED)

        identity = self.credentials.authenticate(request.token)
        logger.info(
            "Uploaded: %s (%s) (user: %s)",
            resource.original_name,
            resource.mime_type,
            identity.username if identity else "<token-only>",
        )
        return UploadResult(
            resource=resource,
            resource_url=self.urls.resource(resource.resource_id, request.domain),
            thumbnail_url=self.urls.thumbnail(resource.resource_id, request.domain),
            delete_url=self.urls.delete(resource.stored_filename, request.domain),
            webhook=request.webhook,
        )

    def _commit(
        self,
        request: UploadRequest,
        stored_filename: str,
        storage_ref: str,
        written: dict[str, Any],
        thumbnail: str | None,
        dominant_color: str | None,
    ) -> Resource:
        # No awaits: minting and inserting cannot interleave with another commit.
        self._require_authorized(request.token)
        resource_id = self.id_generator.generate(
            request.strategy,
            request.length,
            request.alt_length,
            request.original_name,
            self.resources.contains,
        )
        resource = Resource(
            resource_id=resource_id,
            original_name=request.original_name,
            stored_filename=stored_filename,
            storage_ref=storage_ref,
            mime_type=request.mime_type,
            size=int(written.get("size", 0)),
            timestamp=now_millis(),
            token=request.token or "",
            thumbnail=thumbnail,
            dominant_color=dominant_color,
            opengraph=request.opengraph,
        )
        self.resources.put(resource.key, resource)
        return resource

    async def _discard(self, storage_ref: str, thumbnail: str | None) -> None:
        await self.storage.delete(storage_ref)
        self.thumbnailer.remove(thumbnail)

    @asynccontextmanager
    async def _local_copy(self, storage_ref: str) -> AsyncIterator[Path]:
        """Yield a local path holding the stored bytes; temp copies are removed on exit."""
        local = self.storage.local_path(storage_ref)
        if local is not None:
            yield local
            return
        temp_fd, temp_path = tempfile.mkstemp(dir=self.temp_dir, prefix=".stash_", suffix=Path(storage_ref).suffix)
        os.close(temp_fd)
        try:
            async with aiofiles.open(temp_path, "wb") as f:
                async for chunk in self.storage.download(storage_ref):
                    await f.write(chunk)
            yield Path(temp_path)
        finally:
            Path(temp_path).unlink(missing_ok=True)

    async def _post_process(self, storage_ref: str, mime_type: str) -> tuple[str | None, str | None]:
        """Run thumbnail and colour extraction concurrently; failures leave fields unset."""
        thumbnail_stem = generate_stored_filename()
        try:
            async with self._local_copy(storage_ref) as source:
                thumbnail, color = await asyncio.gather(
                    self._run_processor(self.thumbnailer.name, self.thumbnailer, source, mime_type, thumbnail_stem),
                    self._run_processor(self.color_extractor.name, self.color_extractor, source, mime_type),
                )
        except (StashException, OSError) as e:
            logger.warning("Post-processing skipped for %s: %s", storage_ref, e)
            return None, None
        return thumbnail, color

    async def _run_processor(self, name: str, processor: Callable[..., Any], *args: Any) -> Any:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(processor, *args),
                timeout=self.post_process_timeout,
            )
        except PostProcessFailedException as e:
            logger.warning("%s", e.message)
        except TimeoutError:
            logger.warning(
                "%s",
                PostProcessFailedException(name, f"timed out after {self.post_process_timeout}s").message,
            )
        except Exception as e:
            logger.warning("%s", PostProcessFailedException(name, str(e)).message, exc_info=True)
        return None

    async def notify_and_account(self, result: UploadResult) -> None:
        """Committed -> Notified -> Accounted -> Done. Never raises for notification failures."""
        label = result.resource.original_name
        if result.webhook is not None:
            payload = build_upload_payload(
                result.resource,
                result.webhook,
                result.resource_url,
                result.thumbnail_url,
                result.delete_url,
            )
            try:
                await self.notifier.send(result.webhook, payload)
            except NotifyFailedException as e:
                logger.warning("%s", e.message)
            except Exception as e:
                logger.warning(
                    "%s",
                    NotifyFailedException(f"webhook {result.webhook.client_id}", repr(e)).message,
                    exc_info=True,
                )
        self._stage(label, UploadStage.NOTIFIED)

        self.credentials.record_upload(result.resource.token)
        self._stage(label, UploadStage.ACCOUNTED)
        self._stage(label, UploadStage.DONE)
