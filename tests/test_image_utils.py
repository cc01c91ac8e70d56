"""Tests for the Pillow image helpers."""

import pytest
from PIL import Image

from ocr_structured_text.models import ImageSize
from ocr_structured_text.utils import ImageUtils


class TestImageUtils:

    def test_size_defaults_to_unit_square(self):
        assert ImageUtils.image_size(None) == ImageSize(1.0, 1.0)

    def test_size_from_image(self):
        assert ImageUtils.image_size(Image.new("RGB", (640, 480))) == ImageSize(640.0, 480.0)

    def test_aspect_ratio_ignores_orientation(self):
        assert ImageUtils.aspect_ratio(Image.new("L", (200, 350))) == pytest.approx(1.75)
        assert ImageUtils.aspect_ratio(None) is None

    def test_load_image(self, tmp_path):
        path = tmp_path / "card.png"
        Image.new("RGB", (35, 20), "white").save(path)
        image = ImageUtils.load_image(str(path))
        assert image.size == (35, 20)
