"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Used by main.py; no
business logic here, only wiring of stores, storage backend,
post-processors, the shared HTTP client and background tasks.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from stash.application.services import IdGenerator, UrlBuilder
from stash.application.use_cases import DeletionService, DeliveryService, UploadService
from stash.core.config import get_settings
from stash.infrastructure.external.imaging import DominantColorExtractor, ThumbnailGenerator
from stash.infrastructure.external.notifications import DiscordWebhookNotifier
from stash.infrastructure.external.storage import StorageFactory
from stash.infrastructure.persistence import (
    CredentialReloader,
    CredentialStore,
    ResourceStore,
)

logger = logging.getLogger(__name__)


async def _cancel(task: asyncio.Task | None, name: str) -> None:
    if task is None:
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    logger.info("%s stopped", name)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: data directories, resource table, credential table
    (bootstrap token if new), storage backend, services, reload tasks.
    Shutdown order: reload tasks, shared HTTP client.
    """
    settings = get_settings()

    # ---- Startup ----
    settings.data_path.mkdir(parents=True, exist_ok=True)
    settings.thumbnails_dir.mkdir(parents=True, exist_ok=True)

    id_generator = IdGenerator(max_attempts=settings.id_max_attempts)
    resources = ResourceStore(settings.resources_file)
    resources.load()
    credentials = CredentialStore(settings.credentials_file, id_generator)
    credentials.load(bootstrap_username=settings.bootstrap_username)
    logger.info("Users & data read from filesystem")

    storage = StorageFactory.create_storage_service(settings)
    urls = UrlBuilder(
        domain=settings.domain,
        port=settings.port,
        use_ssl=settings.use_ssl,
        is_proxied=settings.is_proxied,
    )
    thumbnailer = ThumbnailGenerator(settings.thumbnails_dir, size=settings.thumbnail_size)

    # Shared HTTP client for webhook notifications (connection reuse).
    app.state.http_client = httpx.AsyncClient(timeout=settings.webhook_timeout_seconds)
    notifier = DiscordWebhookNotifier(
        app.state.http_client,
        base_url=settings.webhook_base_url,
        timeout=settings.webhook_timeout_seconds,
    )

    app.state.resources = resources
    app.state.credentials = credentials
    app.state.upload_service = UploadService(
        storage=storage,
        resources=resources,
        credentials=credentials,
        id_generator=id_generator,
        thumbnailer=thumbnailer,
        color_extractor=DominantColorExtractor(),
        notifier=notifier,
        urls=urls,
        save_with_date=settings.save_with_date,
        save_as_original=settings.save_as_original,
        auto_register_tokens=settings.auto_register_tokens,
        post_process_timeout=settings.post_process_timeout_seconds,
        temp_dir=settings.data_path,
    )
    app.state.delivery_service = DeliveryService(
        storage=storage,
        resources=resources,
        thumbnails_dir=settings.thumbnails_dir,
        urls=urls,
        site_name=settings.app_name,
    )
    app.state.deletion_service = DeletionService(
        storage=storage,
        resources=resources,
        thumbnailer=thumbnailer,
    )

    reloader = CredentialReloader(credentials)
    app.state.credential_reloader = reloader
    app.state.credential_reload_task = asyncio.create_task(reloader.run())
    app.state.credential_watch_task = (
        asyncio.create_task(reloader.watch()) if settings.watch_credentials else None
    )

    logger.info(
        "Server ready on [%s:%d] (storage: %s). Authorized users: %d. Available files: %d",
        settings.host,
        settings.port,
        settings.storage_backend,
        len(credentials),
        len(resources),
    )

    yield

    # ---- Shutdown ----
    await _cancel(app.state.credential_watch_task, "Credential watcher")
    await _cancel(app.state.credential_reload_task, "Credential reload consumer")

    if getattr(app.state, "http_client", None) is not None:
        await app.state.http_client.aclose()
        app.state.http_client = None
        logger.info("HTTP client closed")
