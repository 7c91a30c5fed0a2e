"""Resource deletion by stored filename (the capability embedded in delete links)."""

from __future__ import annotations

import logging

from stash.application.interfaces import IStorageService, IThumbnailGenerator
from stash.domain.entities.resource import Resource
from stash.domain.exceptions import UnknownResourceException
from stash.infrastructure.persistence.resource_store import ResourceStore

logger = logging.getLogger(__name__)


class DeletionService:
    """Removes a resource's bytes, thumbnail and metadata entry.

    No token is required: knowing the stored filename is the credential.
    """

    def __init__(
        self,
        storage: IStorageService,
        resources: ResourceStore,
        thumbnailer: IThumbnailGenerator,
    ) -> None:
        self.storage = storage
        self.resources = resources
        self.thumbnailer = thumbnailer

    async def delete_by_filename(self, filename: str) -> Resource:
        """Delete the resource stored as filename and return its former metadata.

        Raises:
            UnknownResourceException: No resource is stored under filename.
        """
        key = self.resources.find_by_stored_filename(filename)
        resource = self.resources.get(key) if key is not None else None
        if key is None or resource is None:
            raise UnknownResourceException(filename)

        if not await self.storage.delete(resource.storage_ref):
            logger.warning("Bytes already missing for %s (%s)", key, resource.storage_ref)
        self.thumbnailer.remove(resource.thumbnail)

        # Another delete of the same file may have finished while we awaited storage.
        if self.resources.remove(key) is None:
            raise UnknownResourceException(filename)
        logger.info("Deleted: %s (%s)", resource.original_name, resource.mime_type)
        return resource
