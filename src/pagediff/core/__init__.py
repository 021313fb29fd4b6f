"""Pixel buffers, region alignment and the pixel differ."""

from .align import align_regions, union_rect
from .diff import DiffResult, diff_images, to_grayscale
from .types import PixelBuffer, Rect

__all__ = [
    "align_regions",
    "union_rect",
    "diff_images",
    "to_grayscale",
    "DiffResult",
    "PixelBuffer",
    "Rect",
]
