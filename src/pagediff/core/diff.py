"""Pixel level comparison of two page rasterizations.

The composite keeps the red and green channels of the first image and takes
the blue channel from the second one, so unchanged areas look like the first
page with a slight blue cast while changes show up as a visible colour shift.
In grayscale mode both pages are reduced to luminance first and unchanged
content turns neutral gray.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .align import align_regions
from .types import BLUE, RED, PixelBuffer, Rect

logger = logging.getLogger(__name__)

# Rec. 709 luma weights for R, G, B.
LUMA_WEIGHTS = (0.2126, 0.7152, 0.0722)

# Width in pixels of the left margin flag painted on differing rows.
MARK_WIDTH_PX = 10


@dataclass
class DiffResult:
    """Outcome of :func:`diff_images`.

    ``image`` is ``None`` exactly when ``changed`` is ``False``.
    """

    image: Optional[PixelBuffer]
    changed: bool
    thumbnail: Optional[PixelBuffer] = None
    changed_pixels: int = 0


def to_grayscale(pixels: np.ndarray) -> np.ndarray:
    """Return the truncated luminance of an ``HxWx3`` array as ``uint8``."""

    r, g, b = LUMA_WEIGHTS
    luma = r * pixels[..., 0] + g * pixels[..., 1] + b * pixels[..., 2]
    return luma.astype(np.uint8)


def diff_images(
    image_a: Optional[PixelBuffer],
    image_b: Optional[PixelBuffer],
    *,
    tolerance: int = 0,
    mark_differences: bool = False,
    grayscale: bool = False,
    thumbnail_width: Optional[int] = None,
    offset: Tuple[int, int] = (0, 0),
) -> DiffResult:
    """Overlay ``image_b`` on ``image_a`` and report whether they differ.

    Parameters
    ----------
    image_a, image_b:
        Rasterized pages. Either may be ``None`` for a page that only exists
        in one document, but not both.
    tolerance:
        Maximum per-channel absolute difference still considered equal.
    mark_differences:
        Paint the first :data:`MARK_WIDTH_PX` pixels of every differing row
        pure blue.
    grayscale:
        Compose luminance values instead of colour channels.
    thumbnail_width:
        When positive, also build a white thumbnail of this width with a red
        dot at every differing pixel.
    offset:
        ``(dx, dy)`` displacement of ``image_b`` relative to ``image_a``.
    """

    if image_a is None and image_b is None:
        raise ValueError("At least one image is required for comparison")

    canvas, rect_a, rect_b = align_regions(
        Rect.of_buffer(image_a),
        Rect.of_buffer(image_b, *offset),
    )

    # Size or placement mismatch is a difference on its own.
    changed = rect_a != rect_b
    out = PixelBuffer.blank(canvas.width, canvas.height)

    if image_a is not None:
        out.pixels[rect_a.slices()] = image_a.pixels

    thumbnail = None
    if thumbnail_width and thumbnail_width > 0 and canvas.width > 0:
        thumbnail = _blank_thumbnail(canvas, thumbnail_width)

    changed_pixels = 0
    if image_b is not None and not rect_b.is_empty:
        region = out.pixels[rect_b.slices()]
        before = region.astype(np.int16)
        after = image_b.pixels.astype(np.int16)

        differs = (np.abs(before - after) > tolerance).any(axis=2)
        rows = differs.any(axis=1)
        changed_pixels = int(np.count_nonzero(differs))
        if changed_pixels:
            changed = True

        if grayscale:
            gray_a = to_grayscale(region)
            gray_b = to_grayscale(image_b.pixels)
            region[..., 0] = gray_b
            region[..., 1] = (gray_a.astype(np.uint16) + gray_b) // 2
            region[..., 2] = gray_a
        else:
            region[..., 2] = image_b.pixels[..., 2]

        if mark_differences and rows.any():
            region[rows, : min(MARK_WIDTH_PX, rect_b.width)] = BLUE

        if thumbnail is not None and changed_pixels:
            _plot_differences(thumbnail, differs, rect_b, thumbnail_width / canvas.width)

    logger.debug(
        "diffed %dx%d canvas: %d pixels differ (tolerance %d)",
        canvas.width,
        canvas.height,
        changed_pixels,
        tolerance,
    )

    return DiffResult(
        image=out if changed else None,
        changed=changed,
        thumbnail=thumbnail,
        changed_pixels=changed_pixels,
    )


def _blank_thumbnail(canvas: Rect, width: int) -> PixelBuffer:
    scale = width / canvas.width
    height = max(1, int(round(canvas.height * scale)))
    return PixelBuffer.blank(width, height)


def _plot_differences(thumbnail: PixelBuffer, differs: np.ndarray, rect: Rect, scale: float) -> None:
    ys, xs = np.nonzero(differs)
    # Rounding can push the last row or column just past the edge.
    tx = np.minimum(((rect.x + xs) * scale).astype(np.intp), thumbnail.width - 1)
    ty = np.minimum(((rect.y + ys) * scale).astype(np.intp), thumbnail.height - 1)
    thumbnail.pixels[ty, tx] = RED
