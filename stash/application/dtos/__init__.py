"""DTOs passed between the HTTP layer and use cases."""

from stash.application.dtos.delivery import ByteStream
from stash.application.dtos.upload import UploadRequest, UploadResult

__all__ = ["ByteStream", "UploadRequest", "UploadResult"]
