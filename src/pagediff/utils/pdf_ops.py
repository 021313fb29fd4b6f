"""Document engine helpers built on PyMuPDF."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

import pymupdf as fitz

from ..core.types import PixelBuffer
from ..errors import DocumentOpenError, RenderError

logger = logging.getLogger(__name__)


def open_document(path: str | Path) -> fitz.Document:
    """Open ``path`` and return a PDF document ready for comparison.

    Formats other than PDF that PyMuPDF understands (XPS, EPUB, CBZ, ...) are
    converted to an in-memory PDF so their pages can later be copied into the
    output document as vector content.
    """

    path = Path(path)
    try:
        doc = fitz.open(str(path))
    except (RuntimeError, ValueError, OSError) as exc:
        raise DocumentOpenError(path, str(exc)) from exc

    try:
        if doc.needs_pass:
            raise DocumentOpenError(path, "document is encrypted")
        if doc.page_count == 0:
            raise DocumentOpenError(path, "document has no pages")
        if not doc.is_pdf:
            logger.debug("converting %s to PDF", path)
            converted = fitz.open("pdf", doc.convert_to_pdf())
            doc.close()
            doc = converted
    except DocumentOpenError:
        doc.close()
        raise
    except RuntimeError as exc:
        doc.close()
        raise DocumentOpenError(path, str(exc)) from exc
    return doc


def page_count(doc: fitz.Document) -> int:
    return doc.page_count


def get_page(doc: fitz.Document, index: int) -> Optional[fitz.Page]:
    """Return page ``index`` or ``None`` when the document is shorter."""

    if index >= doc.page_count:
        return None
    return doc[index]


def page_size(page: fitz.Page) -> Tuple[float, float]:
    """Page width and height in PDF points (1/72 inch)."""

    rect = page.rect
    return rect.width, rect.height


def render_page(page: fitz.Page, dpi: int) -> PixelBuffer:
    """Rasterize ``page`` to an opaque RGB buffer at ``dpi``."""

    zoom = dpi / 72.0
    mat = fitz.Matrix(zoom, zoom)
    try:
        pix = page.get_pixmap(matrix=mat, colorspace=fitz.csRGB, alpha=False)
    except RuntimeError as exc:
        raise RenderError(f"Failed to render page {page.number + 1}: {exc}") from exc
    return PixelBuffer.from_pixmap(pix)


def thumbnail_size(page: fitz.Page) -> Optional[Tuple[int, int]]:
    """Size of the thumbnail image embedded in ``page`` (``/Thumb``), if any."""

    doc = page.parent
    kind, value = doc.xref_get_key(page.xref, "Thumb")
    if kind != "xref":
        return None
    thumb_xref = int(value.split()[0])
    width = doc.xref_get_key(thumb_xref, "Width")
    height = doc.xref_get_key(thumb_xref, "Height")
    if width[0] != "int" or height[0] != "int":
        return None
    return int(width[1]), int(height[1])
