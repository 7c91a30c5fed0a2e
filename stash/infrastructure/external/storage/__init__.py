"""Storage: local filesystem and S3-compatible backends.

Factory creates backend from stash.core.config. Implementations are loaded
lazily inside StorageFactory.create_storage_service() so that:
- Default (local) only requires aiofiles (main dependency).
- S3 backend only loads boto3 when used; install with the 's3' extra.

Implementations implement StorageProtocol (upload, download, delete, exists,
local_path).
"""

from stash.infrastructure.external.storage.factory import StorageFactory
from stash.infrastructure.external.storage.protocol import StorageProtocol

__all__ = [
    "StorageFactory",
    "StorageProtocol",
]
