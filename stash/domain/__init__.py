"""Domain layer: entities, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from stash.domain.entities import Identity, OpenGraphOverrides, Resource
from stash.domain.enums import IdStrategy, UploadStage
from stash.domain.exceptions import (
    ExhaustedIdSpaceException,
    NotifyFailedException,
    PostProcessFailedException,
    ResourceNotFoundException,
    StashException,
    UnauthorizedException,
    UnknownResourceException,
)

__all__ = [
    # Entities
    "Identity",
    "OpenGraphOverrides",
    "Resource",
    # Enums
    "IdStrategy",
    "UploadStage",
    # Exceptions
    "ExhaustedIdSpaceException",
    "NotifyFailedException",
    "PostProcessFailedException",
    "ResourceNotFoundException",
    "StashException",
    "UnauthorizedException",
    "UnknownResourceException",
]
