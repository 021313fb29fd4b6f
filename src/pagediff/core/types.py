"""Pixel buffers and rectangles shared by the aligner and the differ."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import pymupdf as fitz
import numpy as np

Color = Tuple[int, int, int]

WHITE: Color = (255, 255, 255)
RED: Color = (255, 0, 0)
BLUE: Color = (0, 0, 255)


@dataclass(eq=False)
class PixelBuffer:
    """Owned ``height x width x 3`` RGB image.

    The array is always a private, writable ``uint8`` copy so buffers never
    alias the memory of the pixmap they were rendered from.
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 3:
            raise ValueError(f"Expected an HxWx3 array, got shape {self.pixels.shape}")
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"Expected uint8 pixels, got {self.pixels.dtype}")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def stride(self) -> int:
        """Bytes per row of the backing storage."""
        return int(self.pixels.strides[0])

    @classmethod
    def blank(cls, width: int, height: int, color: Color = WHITE) -> "PixelBuffer":
        pixels = np.empty((height, width, 3), dtype=np.uint8)
        pixels[:, :] = color
        return cls(pixels)

    @classmethod
    def from_pixmap(cls, pix: fitz.Pixmap) -> "PixelBuffer":
        """Copy the colour channels of ``pix`` honouring its row stride."""

        rows = np.frombuffer(pix.samples, dtype=np.uint8).reshape(pix.height, pix.stride)
        packed = rows[:, : pix.width * pix.n].reshape(pix.height, pix.width, pix.n)
        return cls(np.array(packed[:, :, :3], dtype=np.uint8, copy=True))

    def to_pixmap(self) -> fitz.Pixmap:
        samples = np.ascontiguousarray(self.pixels).tobytes()
        return fitz.Pixmap(fitz.csRGB, self.width, self.height, samples, 0)

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.pixels.copy())

    def pixel(self, x: int, y: int) -> Color:
        r, g, b = self.pixels[y, x]
        return int(r), int(g), int(b)


@dataclass(frozen=True)
class Rect:
    """Integer rectangle placing a buffer within a shared coordinate frame."""

    x: int
    y: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Rect size must be non-negative, got {self.width}x{self.height}")

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def translated(self, dx: int, dy: int) -> "Rect":
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def slices(self) -> Tuple[slice, slice]:
        """Row and column slices addressing this rect inside a pixel array."""
        return slice(self.y, self.bottom), slice(self.x, self.right)

    @classmethod
    def of_buffer(cls, buffer: Optional[PixelBuffer], x: int = 0, y: int = 0) -> "Rect":
        """Placement of ``buffer`` at ``(x, y)``; an absent buffer is empty."""

        if buffer is None:
            return cls(0, 0, 0, 0)
        return cls(x, y, buffer.width, buffer.height)
