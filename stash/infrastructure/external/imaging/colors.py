"""Dominant colour extraction for embed theme colours."""

from __future__ import annotations

from pathlib import Path

from PIL import Image, UnidentifiedImageError

from stash.domain.exceptions import PostProcessFailedException

SAMPLE_SIZE = (64, 64)
PALETTE_COLORS = 8


class DominantColorExtractor:
    """Return the most common colour of an image as '#rrggbb'."""

    name = "dominant_color"

    def __call__(self, source: Path, mime_type: str) -> str | None:
        if not mime_type.startswith("image/"):
            return None
        try:
            with Image.open(source) as image:
                image.seek(0)
                sample = image.convert("RGB").resize(SAMPLE_SIZE)
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise PostProcessFailedException(self.name, str(e)) from e

        quantized = sample.quantize(colors=PALETTE_COLORS)
        palette = quantized.getpalette() or []
        counts = quantized.getcolors() or []
        if not counts or not palette:
            return None
        _, index = max(counts)
        r, g, b = palette[index * 3 : index * 3 + 3]
        return f"#{r:02x}{g:02x}{b:02x}"
