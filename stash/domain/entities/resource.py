"""Resource domain entity: one uploaded file's metadata.

The byte payload lives in a storage backend under storage_ref; this
record is what the resource table persists.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import PurePosixPath
from typing import Any


@dataclass
class OpenGraphOverrides:
    """Per-upload embed overrides (x-ass-og-* headers). Each field is optional."""

    title: str | None = None
    description: str | None = None
    author: str | None = None
    author_url: str | None = None
    provider: str | None = None
    provider_url: str | None = None
    color: str | None = None

    @classmethod
    def from_headers(cls, headers: Any) -> OpenGraphOverrides:
        """Build from a case-insensitive header mapping."""
        return cls(
            title=headers.get("x-ass-og-title"),
            description=headers.get("x-ass-og-description"),
            author=headers.get("x-ass-og-author"),
            author_url=headers.get("x-ass-og-author-url"),
            provider=headers.get("x-ass-og-provider"),
            provider_url=headers.get("x-ass-og-provider-url"),
            color=headers.get("x-ass-og-color"),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> OpenGraphOverrides:
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in (data or {}).items() if k in names})


@dataclass
class Resource:
    """Metadata for one uploaded file, keyed in the store by its id stem.

    resource_id carries the extension (it is what public URLs use);
    key is resource_id without it and is the uniqueness key.
    """

    resource_id: str
    original_name: str
    stored_filename: str
    storage_ref: str
    mime_type: str
    size: int
    timestamp: int
    token: str
    thumbnail: str | None = None
    dominant_color: str | None = None
    opengraph: OpenGraphOverrides = field(default_factory=OpenGraphOverrides)

    @property
    def key(self) -> str:
        return resource_key(self.resource_id)

    @property
    def is_video(self) -> bool:
        return "video" in self.mime_type

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the JSON snapshot."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Resource:
        """Deserialize from the JSON snapshot (unknown keys ignored)."""
        data = dict(data)
        data["opengraph"] = OpenGraphOverrides.from_dict(data.get("opengraph"))
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


def split_extension(name: str) -> tuple[str, str]:
    """Return (stem, extension) where extension is the last suffix including its dot."""
    suffix = PurePosixPath(name).suffix
    if not suffix or suffix == name:
        return name, ""
    return name[: -len(suffix)], suffix


def resource_key(resource_id: str) -> str:
    """Store key for a public identifier: the identifier without its extension."""
    return split_extension(resource_id)[0]
