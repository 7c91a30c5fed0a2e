"""Thumbnail generation: Pillow for images, an FFmpeg frame grab for videos.

Thumbnails are always written locally (thumbnails directory under the
data dir), whichever backend holds the resource bytes.
"""

from __future__ import annotations

import logging
import subprocess
import tempfile
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from stash.domain.exceptions import PostProcessFailedException

logger = logging.getLogger(__name__)

FFMPEG_TIMEOUT_SECONDS = 60


class ThumbnailGenerator:
    """Write a JPEG thumbnail for a local file; return its filename."""

    name = "thumbnail"

    def __init__(self, thumbnails_dir: Path, size: int = 512) -> None:
        self.thumbnails_dir = Path(thumbnails_dir)
        self.size = size
        self.thumbnails_dir.mkdir(parents=True, exist_ok=True)

    def __call__(self, source: Path, mime_type: str, stem: str) -> str | None:
        """Create <stem>.jpg for source.

        Returns:
            The thumbnail filename, or None when the type has no thumbnail.

        Raises:
            PostProcessFailedException: The file could not be decoded.
        """
        target = self.thumbnails_dir / f"{stem}.jpg"
        if mime_type.startswith("image/"):
            self._from_image(source, target)
        elif mime_type.startswith("video/"):
            self._from_video(source, target)
        else:
            logger.debug("No thumbnail for %s (%s)", source.name, mime_type)
            return None
        return target.name

    def _from_image(self, source: Path, target: Path) -> None:
        try:
            with Image.open(source) as image:
                image.seek(0)
                thumb = ImageOps.exif_transpose(image).convert("RGB")
                thumb.thumbnail((self.size, self.size))
                thumb.save(target, "JPEG", quality=85)
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise PostProcessFailedException(self.name, str(e)) from e

    def _from_video(self, source: Path, target: Path) -> None:
        with tempfile.TemporaryDirectory() as workdir:
            frame = Path(workdir) / "frame.png"
            cmd = [
                "ffmpeg",
                "-y",
                "-loglevel", "error",
                "-i", str(source),
                "-frames:v", "1",
                str(frame),
            ]
            try:
                subprocess.run(
                    cmd,
                    check=True,
                    capture_output=True,
                    timeout=FFMPEG_TIMEOUT_SECONDS,
                )
            except FileNotFoundError as e:
                raise PostProcessFailedException(self.name, "ffmpeg not found") from e
            except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
                raise PostProcessFailedException(self.name, f"ffmpeg failed: {e}") from e
            self._from_image(frame, target)

    def remove(self, filename: str | None) -> None:
        """Delete a thumbnail file if it exists."""
        if not filename:
            return
        (self.thumbnails_dir / filename).unlink(missing_ok=True)
