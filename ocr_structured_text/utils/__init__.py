"""Utility modules."""

from .image_utils import ImageUtils

__all__ = ["ImageUtils"]
