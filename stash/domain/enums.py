"""Domain enumerations: identifier strategy and upload pipeline stage."""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class IdStrategy(_ValuesMixin, str, Enum):
    """How a public resource identifier is composed.

    Selected per upload by the x-ass-access header, falling back to the
    configured default.
    """

    RANDOM = "random"
    GFYCAT = "gfycat"
    ZWS = "zws"
    ORIGINAL = "original"

    @classmethod
    def parse(cls, raw: str | None, default: "IdStrategy") -> "IdStrategy":
        """Return the strategy named by raw, or default when raw is empty or unknown."""
        if not raw:
            return default
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return default


class UploadStage(_ValuesMixin, str, Enum):
    """Stages of a single upload, in the only order they may occur."""

    RECEIVED = "received"
    STORED_BYTES = "stored_bytes"
    POST_PROCESSED = "post_processed"
    COMMITTED = "committed"
    NOTIFIED = "notified"
    ACCOUNTED = "accounted"
    DONE = "done"
