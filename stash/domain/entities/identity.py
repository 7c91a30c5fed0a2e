"""Identity domain entity: a credential's display name and upload counter."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class Identity:
    """Identity behind one token. count never decreases."""

    username: str
    count: int = 0

    def record_upload(self) -> None:
        self.count += 1

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Identity":
        return cls(username=str(data["username"]), count=int(data.get("count", 0)))
