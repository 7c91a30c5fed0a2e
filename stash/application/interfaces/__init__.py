"""Ports the application layer depends on; infrastructure implements them."""

from stash.application.interfaces.services import (
    IColorExtractor,
    INotifier,
    IThumbnailGenerator,
)
from stash.infrastructure.external.storage.protocol import (
    StorageProtocol as IStorageService,
)

__all__ = [
    "IColorExtractor",
    "INotifier",
    "IStorageService",
    "IThumbnailGenerator",
]
