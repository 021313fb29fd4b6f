"""Visual page-by-page comparison of PDF documents."""

from __future__ import annotations

from .compare import DocumentVerdict, compare_documents, compare_files, compare_page
from .config import ToleranceConfig
from .core.diff import DiffResult, diff_images
from .core.types import PixelBuffer, Rect
from .errors import ConfigurationError, DocumentOpenError, PageDiffError, RenderError

__all__ = [
    "compare_documents",
    "compare_files",
    "compare_page",
    "diff_images",
    "DiffResult",
    "DocumentVerdict",
    "PixelBuffer",
    "Rect",
    "ToleranceConfig",
    "PageDiffError",
    "ConfigurationError",
    "DocumentOpenError",
    "RenderError",
]

__version__ = "0.1.0"
