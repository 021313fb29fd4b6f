"""Custom exceptions used across pagediff."""

__all__ = [
    "PageDiffError",
    "ConfigurationError",
    "DocumentOpenError",
    "RenderError",
]


class PageDiffError(Exception):
    """Base class for errors raised by pagediff."""

    pass


class ConfigurationError(PageDiffError):
    """Raised when comparison parameters are malformed or out of range."""

    pass


class DocumentOpenError(PageDiffError):
    """Raised when a document cannot be opened by the document engine."""

    def __init__(self, path, message: str) -> None:
        super().__init__(f"Error opening {path}: {message}")
        self.path = path
        self.message = message


class RenderError(PageDiffError):
    """Raised when a page of an opened document fails to rasterize."""

    pass
