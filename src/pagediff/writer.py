"""Composite PDF written page by page while documents are compared."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

import pymupdf as fitz

from .core.types import PixelBuffer

logger = logging.getLogger(__name__)


class DiffDocumentWriter:
    """Sequential PDF sink.

    Pages are started lazily at the size most recently passed to
    :meth:`set_page_size` and committed with :meth:`show_page`; nothing is
    written to ``path`` before :meth:`close`.
    """

    def __init__(self, path: str | Path, width: float, height: float) -> None:
        self.path = Path(path)
        self._doc = fitz.open()
        self._size: Tuple[float, float] = (width, height)
        self._page: Optional[fitz.Page] = None
        self._closed = False

    def __enter__(self) -> "DiffDocumentWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.discard()
        else:
            self.close()

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def set_page_size(self, width: float, height: float) -> None:
        """Size used for the next page that gets started."""
        self._size = (width, height)

    def _current_page(self) -> fitz.Page:
        if self._page is None:
            width, height = self._size
            self._page = self._doc.new_page(width=width, height=height)
        return self._page

    def paint_image(self, buffer: PixelBuffer, scale: float) -> None:
        """Draw ``buffer`` at the page origin, ``scale`` points per pixel."""

        page = self._current_page()
        rect = fitz.Rect(0, 0, buffer.width * scale, buffer.height * scale)
        page.insert_image(rect, pixmap=buffer.to_pixmap(), keep_proportion=False)

    def paint_page(self, source: fitz.Page) -> None:
        """Copy the vector content of ``source`` onto the current page."""

        page = self._current_page()
        if not source.get_contents():
            # Nothing drawn on the source page; keep the blank page.
            return
        rect = fitz.Rect(0, 0, source.rect.width, source.rect.height)
        page.show_pdf_page(rect, source.parent, source.number)

    def show_page(self) -> None:
        """Commit the current page; an untouched page is emitted blank."""

        self._current_page()
        self._page = None

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            if self._doc.page_count == 0:
                logger.info("no pages to write, %s not created", self.path)
                return
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._doc.save(str(self.path), garbage=3, deflate=True)
            logger.debug("wrote %d pages to %s", self._doc.page_count, self.path)
        finally:
            self._doc.close()

    def discard(self) -> None:
        """Close without writing anything to disk."""

        if self._closed:
            return
        self._closed = True
        self._doc.close()
        logger.debug("discarded partial output %s", self.path)
