"""Hot reload of the credential table through an explicit change channel.

Producers (the watchfiles watcher, or anything else that knows auth.json
changed) call notify(); a single consumer task drains the channel and
calls CredentialStore.reload(). Reload therefore never runs inside a
request's own steps.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from watchfiles import Change, awatch

from stash.infrastructure.persistence.credential_store import CredentialStore
from stash.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


@dataclass
class CredentialChangeEvent:
    """One notification that the credential file may have changed."""

    source: str
    received_at: str = field(default_factory=lambda: utc_now().isoformat())


class CredentialReloader:
    """Owns the change channel for one CredentialStore."""

    def __init__(self, store: CredentialStore) -> None:
        self.store = store
        self.events: asyncio.Queue[CredentialChangeEvent] = asyncio.Queue()

    def notify(self, source: str = "manual") -> None:
        """Enqueue a change event (non-blocking)."""
        self.events.put_nowait(CredentialChangeEvent(source=source))

    async def process_next(self) -> bool:
        """Consume one event and reload. Returns whether memory was replaced."""
        event = await self.events.get()
        try:
            changed = self.store.reload()
            logger.debug("Credential change from %s handled (changed=%s)", event.source, changed)
            return changed
        finally:
            self.events.task_done()

    async def run(self) -> None:
        """Consume change events until cancelled. A failed reload is logged and skipped."""
        while True:
            try:
                await self.process_next()
            except Exception:
                logger.exception("Credential reload failed; keeping current tokens")

    async def watch(self) -> None:
        """Feed the channel from filesystem events on the credential file until cancelled."""
        path = self.store.path.resolve()
        logger.info("Watching %s for credential changes", path)
        async for changes in awatch(path.parent, recursive=False):
            if any(
                change != Change.deleted and path.name == _name(changed_path)
                for change, changed_path in changes
            ):
                self.notify("watchfiles")


def _name(changed_path: str) -> str:
    return changed_path.replace("\\", "/").rsplit("/", 1)[-1]
