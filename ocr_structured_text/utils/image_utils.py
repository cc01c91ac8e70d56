"""Image utilities."""

from typing import Optional

from PIL import Image

from ..models.data_structures import ImageSize


class ImageUtils:
    """Image utilities"""

    @staticmethod
    def image_size(image: Optional[Image.Image]) -> ImageSize:
        """Pixel size of an image, or the unit square when there is none."""
        if image is None:
            return ImageSize()
        width, height = image.size
        if width <= 0 or height <= 0:
            return ImageSize()
        return ImageSize(width=float(width), height=float(height))

    @staticmethod
    def aspect_ratio(image: Optional[Image.Image]) -> Optional[float]:
        """Long side over short side; orientation does not matter."""
        if image is None:
            return None
        width, height = image.size
        if width <= 0 or height <= 0:
            return None
        return max(width, height) / min(width, height)

    @staticmethod
    def load_image(path: str) -> Image.Image:
        """Open an image file and load its pixels so the file handle can be closed."""
        with Image.open(path) as image:
            image.load()
            return image.copy()
