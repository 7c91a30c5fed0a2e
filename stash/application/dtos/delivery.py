"""DTOs for the delivery use case."""

from collections.abc import AsyncIterator
from dataclasses import dataclass, field


@dataclass
class ByteStream:
    """Raw resource bytes ready to be sent: status, headers and body iterator."""

    status_code: int
    media_type: str
    body: AsyncIterator[bytes] | None
    headers: dict[str, str] = field(default_factory=dict)
