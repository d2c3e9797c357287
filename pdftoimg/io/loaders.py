"""Page renderers (PDF path -> page images), backed by pdf2image/poppler."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol

from pdf2image import convert_from_path, pdfinfo_from_path
from pdf2image.exceptions import (
    PDFInfoNotInstalledError,
    PDFPageCountError,
    PDFPopplerTimeoutError,
    PDFSyntaxError,
)
from PIL import Image

from ..errors import DocumentOpenError, RenderError

LOGGER = logging.getLogger("pdftoimg.io")

_POPPLER_ERRORS = (PDFInfoNotInstalledError, PDFPageCountError, PDFPopplerTimeoutError, PDFSyntaxError)
# OSError covers a missing pdftoppm/pdfinfo binary and unreadable poppler output
_OPEN_ERRORS = _POPPLER_ERRORS + (OSError,)
_RENDER_ERRORS = _POPPLER_ERRORS + (OSError, Image.DecompressionBombError)


class PageRenderer(Protocol):
    """Open document handle that can rasterize single pages."""

    def page_count(self) -> int: ...

    def render_page(self, index: int) -> Image.Image: ...

    def close(self) -> None: ...

    def __enter__(self) -> "PageRenderer": ...

    def __exit__(self, *exc_info) -> None: ...


class PdfRenderer:
    """Render pages of one PDF file, one page per poppler call.

    The handle caches document info while open. Callers that process many
    pages should drop it and open a new one every so often so whatever the
    backend holds on to gets released.
    """

    def __init__(self, path: Path | str, *, dpi: int = 300) -> None:
        self.path = Path(path)
        self.dpi = dpi
        self._page_count: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self._page_count is not None

    def open(self) -> "PdfRenderer":
        if not self.path.is_file():
            raise DocumentOpenError(f"PDF not found: {self.path}")
        try:
            info = pdfinfo_from_path(str(self.path))
        except _OPEN_ERRORS as exc:
            raise DocumentOpenError(f"Cannot open {self.path}: {exc}") from exc
        try:
            self._page_count = int(info["Pages"])
        except (KeyError, TypeError, ValueError) as exc:
            raise DocumentOpenError(f"Cannot read page count of {self.path}") from exc
        LOGGER.debug("Opened %s (%d pages)", self.path, self._page_count)
        return self

    def page_count(self) -> int:
        if self._page_count is None:
            raise RenderError(f"Renderer for {self.path} is not open")
        return self._page_count

    def render_page(self, index: int) -> Image.Image:
        """Rasterize the 0-based page ``index`` and return an RGB image."""
        total = self.page_count()
        if not 0 <= index < total:
            raise RenderError(f"Page index {index} out of range for {self.path} ({total} pages)")
        page_no = index + 1
        try:
            pages = convert_from_path(str(self.path), dpi=self.dpi, first_page=page_no, last_page=page_no)
        except _RENDER_ERRORS as exc:
            raise RenderError(f"Failed to render page {page_no} of {self.path}: {exc}") from exc
        if not pages:
            raise RenderError(f"No image produced for page {page_no} of {self.path}")
        im = pages[0]
        if im.mode not in ("RGB", "L"):
            im = im.convert("RGB")
        return im

    def close(self) -> None:
        if self._page_count is not None:
            LOGGER.debug("Closed %s", self.path)
        self._page_count = None

    def __enter__(self) -> "PdfRenderer":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()
