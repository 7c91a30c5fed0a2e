"""Post-processors deriving a thumbnail and a dominant colour from local bytes."""

from stash.infrastructure.external.imaging.colors import DominantColorExtractor
from stash.infrastructure.external.imaging.thumbnails import ThumbnailGenerator

__all__ = ["DominantColorExtractor", "ThumbnailGenerator"]
