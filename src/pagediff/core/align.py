"""Common coordinate frame for two page rasterizations."""
from __future__ import annotations

from typing import Tuple

from .types import Rect


def union_rect(r1: Rect, r2: Rect) -> Rect:
    """Return the bounding union of ``r1`` and ``r2`` in their shared frame."""

    x0 = min(r1.x, r2.x)
    y0 = min(r1.y, r2.y)
    x1 = max(r1.right, r2.right)
    y1 = max(r1.bottom, r2.bottom)
    return Rect(x0, y0, x1 - x0, y1 - y0)


def align_regions(r1: Rect, r2: Rect) -> Tuple[Rect, Rect, Rect]:
    """Place ``r1`` and ``r2`` on a canvas large enough for both.

    Returns ``(canvas, r1, r2)`` where ``canvas`` is the union rectangle moved
    to the origin and both inputs are expressed as offsets inside it, so
    neither of them gets clipped when the sizes disagree. Empty rectangles
    take part with their origin only.
    """

    canvas = union_rect(r1, r2)
    dx, dy = -canvas.x, -canvas.y
    return canvas.translated(dx, dy), r1.translated(dx, dy), r2.translated(dx, dy)
