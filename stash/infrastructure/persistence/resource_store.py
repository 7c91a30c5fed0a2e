"""Resource table: resource key -> Resource, persisted as one JSON snapshot."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from stash.domain.entities.resource import Resource
from stash.infrastructure.persistence.json_snapshot import read_snapshot, write_snapshot

logger = logging.getLogger(__name__)


class ResourceStore:
    """Process-wide resource metadata table.

    Mutated only by ingestion (put) and deletion (remove); each mutation
    snapshots the whole table before returning. No method awaits, so a
    single call is never interleaved with another request's.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._resources: dict[str, Resource] = {}

    def load(self) -> None:
        """Read the snapshot, creating an empty one if absent."""
        if not self.path.exists():
            self._resources = {}
            self.persist()
            logger.info("File [%s] created", self.path.name)
            return
        raw = read_snapshot(self.path) or {}
        self._resources = {key: Resource.from_dict(value) for key, value in raw.items()}
        logger.info("File [%s] exists (%d resources)", self.path.name, len(self._resources))

    def persist(self) -> None:
        """Write the full table as a single durable snapshot."""
        write_snapshot(
            self.path,
            {key: resource.to_dict() for key, resource in self._resources.items()},
        )

    def get(self, key: str) -> Resource | None:
        return self._resources.get(key)

    def contains(self, key: str) -> bool:
        return key in self._resources

    def put(self, key: str, resource: Resource) -> None:
        """Insert resource under key and persist. Keys are never overwritten while live.

        A failed snapshot leaves the table as it was and re-raises.
        """
        if key in self._resources:
            raise ValueError(f"Resource key already live: {key}")
        self._resources[key] = resource
        try:
            self.persist()
        except Exception:
            del self._resources[key]
            raise

    def remove(self, key: str) -> Resource | None:
        """Remove and return the resource under key, persisting if anything changed."""
        resource = self._resources.pop(key, None)
        if resource is not None:
            try:
                self.persist()
            except Exception:
                self._resources[key] = resource
                raise
        return resource

    def find_by_stored_filename(self, filename: str) -> str | None:
        """Return the key of the resource stored as filename (linear scan)."""
        for key, resource in self._resources.items():
            if resource.stored_filename == filename:
                return key
        return None

    def __len__(self) -> int:
        return len(self._resources)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._resources))
