"""Utility functions used across the project."""

from .pdf_ops import get_page, open_document, page_count, page_size, render_page, thumbnail_size

__all__ = [
    "get_page",
    "open_document",
    "page_count",
    "page_size",
    "render_page",
    "thumbnail_size",
]
