"""API response schemas."""

from stash.schemas.health import HealthResponse
from stash.schemas.resource import OEmbedResponse, UploadResponse

__all__ = ["HealthResponse", "OEmbedResponse", "UploadResponse"]
