"""Domain entities: Resource and Identity."""

from stash.domain.entities.identity import Identity
from stash.domain.entities.resource import (
    OpenGraphOverrides,
    Resource,
    resource_key,
    split_extension,
)

__all__ = [
    "Identity",
    "OpenGraphOverrides",
    "Resource",
    "resource_key",
    "split_extension",
]
