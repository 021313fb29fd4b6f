"""Page by page visual comparison of two documents."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import pymupdf as fitz

from .config import ToleranceConfig
from .core.diff import diff_images
from .utils.pdf_ops import get_page, open_document, page_count, page_size, render_page, thumbnail_size
from .writer import DiffDocumentWriter

logger = logging.getLogger(__name__)

# Thumbnail width used when a page carries no embedded thumbnail.
DEFAULT_THUMBNAIL_WIDTH = 128


@dataclass(frozen=True)
class DocumentVerdict:
    """Aggregate result of :func:`compare_documents`."""

    pages_differ: int
    pages_total: int
    page_count_a: int
    page_count_b: int
    differences: Optional[List[bool]] = None

    @property
    def identical(self) -> bool:
        return self.pages_differ == 0 and self.page_count_a == self.page_count_b

    def to_dict(self) -> Dict[str, object]:
        return {
            "identical": self.identical,
            "pages_differ": self.pages_differ,
            "pages_total": self.pages_total,
            "page_count_a": self.page_count_a,
            "page_count_b": self.page_count_b,
            "differences": list(self.differences) if self.differences is not None else None,
        }


def compare_page(
    sink: Optional[DiffDocumentWriter],
    page_a: Optional[fitz.Page],
    page_b: Optional[fitz.Page],
    config: ToleranceConfig,
    *,
    thumbnail_path: Optional[str | Path] = None,
) -> bool:
    """Compare one page pair and return ``True`` when the pages are equal.

    When ``sink`` is given, a differing pair is emitted as its rasterized
    composite while an equal pair is copied from ``page_a`` as vector content,
    or skipped entirely with ``config.skip_identical``.
    """

    image_a = render_page(page_a, config.dpi) if page_a is not None else None
    image_b = render_page(page_b, config.dpi) if page_b is not None else None

    thumbnail_width = None
    if thumbnail_path is not None:
        embedded = thumbnail_size(page_a) if page_a is not None else None
        thumbnail_width = embedded[0] if embedded else DEFAULT_THUMBNAIL_WIDTH

    result = diff_images(
        image_a,
        image_b,
        tolerance=config.channel_tolerance,
        mark_differences=config.mark_differences,
        grayscale=config.grayscale,
        thumbnail_width=thumbnail_width,
    )

    if sink is not None:
        if result.image is not None:
            sink.paint_image(result.image, 1.0 / config.scale)
            sink.show_page()
        elif not config.skip_identical:
            if page_a is not None:
                sink.paint_page(page_a)
            sink.show_page()

    if result.changed and result.thumbnail is not None:
        _save_thumbnail(result.thumbnail.to_pixmap(), Path(thumbnail_path))

    return not result.changed


def _save_thumbnail(pix: fitz.Pixmap, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    pix.save(str(path))
    logger.debug("saved thumbnail %s", path)


def compare_documents(
    doc_a: fitz.Document,
    doc_b: fitz.Document,
    config: ToleranceConfig,
    *,
    output_path: Optional[str | Path] = None,
    collect_differences: bool = False,
    verbose: bool = False,
    thumbnail_dir: Optional[str | Path] = None,
) -> DocumentVerdict:
    """Compare every page of ``doc_a`` with the same page of ``doc_b``.

    The documents are identical only when no page differs and both have the
    same number of pages. Unless a verbose report, an output document, the
    difference list or thumbnails are requested, the scan stops at the first
    differing page since the answer is already known.
    """

    pages_a = page_count(doc_a)
    pages_b = page_count(doc_b)
    pages_total = max(pages_a, pages_b)

    if pages_a != pages_b:
        logger.info("pages count differs: %d vs %d", pages_a, pages_b)

    need_full_scan = (
        verbose or output_path is not None or collect_differences or thumbnail_dir is not None
    )
    # The first output page is sized by doc_a, later ones by the longer
    # document, or doc_b when both have the same number of pages.
    sizing_doc = doc_a if pages_a > pages_b else doc_b

    sink = None
    if output_path is not None:
        sink = DiffDocumentWriter(output_path, *page_size(doc_a[0]))

    differences: Optional[List[bool]] = [] if collect_differences else None
    pages_differ = 0
    try:
        for index in range(pages_total):
            page_start = time.time()
            if sink is not None and index > 0:
                sink.set_page_size(*page_size(sizing_doc[index]))

            thumbnail_path = None
            if thumbnail_dir is not None:
                thumbnail_path = Path(thumbnail_dir) / f"page-{index + 1:04d}.png"

            page_same = compare_page(
                sink,
                get_page(doc_a, index),
                get_page(doc_b, index),
                config,
                thumbnail_path=thumbnail_path,
            )
            logger.debug("page %d processed in %.2fs", index + 1, time.time() - page_start)

            if differences is not None:
                differences.append(not page_same)

            if not page_same:
                pages_differ += 1
                logger.info("page %d differs", index + 1)
                if not need_full_scan:
                    break
    except BaseException:
        if sink is not None:
            sink.discard()
        raise

    if sink is not None:
        sink.close()

    logger.info("%d of %d pages differ.", pages_differ, pages_total)

    return DocumentVerdict(
        pages_differ=pages_differ,
        pages_total=pages_total,
        page_count_a=pages_a,
        page_count_b=pages_b,
        differences=differences,
    )


def compare_files(
    path_a: str | Path,
    path_b: str | Path,
    config: ToleranceConfig,
    **kwargs,
) -> DocumentVerdict:
    """Open both documents, run :func:`compare_documents` and close them."""

    doc_a = open_document(path_a)
    try:
        doc_b = open_document(path_b)
    except BaseException:
        doc_a.close()
        raise
    try:
        return compare_documents(doc_a, doc_b, config, **kwargs)
    finally:
        doc_a.close()
        doc_b.close()
