"""Atomic JSON snapshot files (temp file + rename).

Both durable tables are rewritten in full on every mutation. Writes are
synchronous so a snapshot always reflects one consistent in-memory state.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def write_snapshot(path: Path, data: Any) -> None:
    """Serialize data to path atomically; readers never see a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp_", suffix=".json")
    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=4, ensure_ascii=False)
        os.replace(temp_path, path)
    finally:
        if os.path.exists(temp_path):
            os.unlink(temp_path)


def read_snapshot(path: Path) -> Any:
    """Return the parsed JSON in path. Raises OSError / ValueError on failure."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)
