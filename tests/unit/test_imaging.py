"""Tests for the Pillow post-processors."""

import pytest
from PIL import Image

from stash.domain.exceptions import PostProcessFailedException
from stash.infrastructure.external.imaging import DominantColorExtractor, ThumbnailGenerator


@pytest.fixture
def image_file(tmp_path, png_factory):
    path = tmp_path / "big.png"
    path.write_bytes(png_factory(color=(255, 0, 0), size=(1200, 600)))
    return path


class TestThumbnailGenerator:
    def test_image_is_scaled_to_jpeg(self, tmp_path, image_file) -> None:
        gen = ThumbnailGenerator(tmp_path / "thumbs", size=100)
        name = gen(image_file, "image/png", "stem")
        assert name == "stem.jpg"
        with Image.open(tmp_path / "thumbs" / name) as thumb:
            assert thumb.format == "JPEG"
            assert thumb.size == (100, 50)

    def test_corrupt_image_fails(self, tmp_path) -> None:
        bad = tmp_path / "bad.png"
        bad.write_bytes(b"definitely not a png")
        gen = ThumbnailGenerator(tmp_path / "thumbs")
        with pytest.raises(PostProcessFailedException):
            gen(bad, "image/png", "stem")

    def test_other_types_have_no_thumbnail(self, tmp_path) -> None:
        doc = tmp_path / "doc.txt"
        doc.write_text("hello")
        assert ThumbnailGenerator(tmp_path / "thumbs")(doc, "text/plain", "stem") is None

    def test_remove(self, tmp_path, image_file) -> None:
        gen = ThumbnailGenerator(tmp_path / "thumbs")
        name = gen(image_file, "image/png", "stem")
        gen.remove(name)
        gen.remove(None)
        assert not (tmp_path / "thumbs" / name).exists()


class TestDominantColorExtractor:
    def test_solid_image(self, image_file) -> None:
        assert DominantColorExtractor()(image_file, "image/png") == "#ff0000"

    def test_non_image(self, tmp_path) -> None:
        assert DominantColorExtractor()(tmp_path / "x.mp4", "video/mp4") is None

    def test_corrupt_image(self, tmp_path) -> None:
        bad = tmp_path / "bad.png"
        bad.write_bytes(b"nope")
        with pytest.raises(PostProcessFailedException):
            DominantColorExtractor()(bad, "image/png")
