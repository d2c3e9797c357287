from .loaders import PageRenderer, PdfRenderer
from .writers import JPEG_QUALITY, clear_directory, ensure_directory, page_filename, write_jpeg

__all__ = [
    "PageRenderer",
    "PdfRenderer",
    "JPEG_QUALITY",
    "clear_directory",
    "ensure_directory",
    "page_filename",
    "write_jpeg",
]
