"""Resource API schemas."""

from typing import Literal

from pydantic import BaseModel


class UploadResponse(BaseModel):
    """Response for POST / (resource committed)."""

    resource: str
    thumbnail: str
    delete: str


class OEmbedResponse(BaseModel):
    """Response for GET /{resource_id}/oembed.json. Unset fields are omitted."""

    version: str = "1.0"
    type: Literal["video", "photo"]
    author_name: str | None = None
    author_url: str | None = None
    provider_name: str | None = None
    provider_url: str | None = None
