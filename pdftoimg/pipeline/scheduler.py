"""Chunked page conversion.

The page range is split into chunks of at most ``chunk_size`` pages and
every chunk gets its own renderer handle, opened on entry and closed on
exit. Native PDF renderers tend to grow while a document stays open, so
recycling the handle keeps peak memory bounded on long documents. One
running counter spans all chunks and drives the progress line.
"""

from __future__ import annotations

import functools
import logging
import time
from pathlib import Path
from typing import Callable, Iterator, Optional

from PIL import Image

from ..errors import ConfigError
from ..io.loaders import PageRenderer, PdfRenderer
from ..io.writers import clear_directory, ensure_directory, page_filename, write_jpeg
from .progress import ProgressReporter
from .schemas import Chunk, ConversionRequest, ConversionResult, PageRange

LOGGER = logging.getLogger("pdftoimg.pipeline")

RendererFactory = Callable[[Path], PageRenderer]
Encoder = Callable[[Image.Image, Path], None]
Reporter = Callable[[int, int], None]


def resolve_page_range(start_flag: int, end_flag: int, total_pages: int) -> PageRange:
    """Turn 1-based user bounds into a safe 0-based ``[start, end)`` range.

    A start page only counts when it is positive and not past the end page,
    so a start given without an end (``end_flag == -1``) falls back to the
    first page. A negative or too-large end page means "through the last page".
    """
    total_pages = max(total_pages, 0)
    start = start_flag - 1 if 0 < start_flag <= end_flag else 0
    end = total_pages if end_flag < 0 or end_flag > total_pages else end_flag
    return PageRange(start=min(start, end), end=end)


def iter_chunks(page_range: PageRange, chunk_size: int) -> Iterator[Chunk]:
    if chunk_size <= 0:
        raise ConfigError(f"chunk size must be positive, got {chunk_size}")
    remaining = len(page_range)
    cur_start = page_range.start
    while remaining > 0:
        cur_end = min(cur_start + chunk_size, page_range.end)
        yield Chunk(start=cur_start, end=cur_end)
        remaining -= cur_end - cur_start
        cur_start = cur_end


def process_chunk(
    chunk: Chunk,
    renderer: PageRenderer,
    output_dir: Path,
    counter: int,
    total: int,
    *,
    encoder: Encoder = write_jpeg,
    reporter: Optional[Reporter] = None,
    progress_every: int = 5,
) -> int:
    """Render, encode and write every page of ``chunk``; return the new counter."""
    for n in chunk.indices():
        image = renderer.render_page(n)
        encoder(image, output_dir / page_filename(n))
        counter += 1
        if reporter is not None and counter % progress_every == 0:
            reporter(counter, total)
    if reporter is not None:
        reporter(counter, total)
    return counter


def _probe_page_count(renderer_factory: RendererFactory, source: Path) -> int:
    # throwaway handle, never reused for rendering
    with renderer_factory(source) as probe:
        return probe.page_count()


def convert(
    request: ConversionRequest,
    *,
    renderer_factory: Optional[RendererFactory] = None,
    encoder: Encoder = write_jpeg,
    reporter: Optional[Reporter] = None,
) -> ConversionResult:
    """Convert ``request.source`` into numbered JPEGs under ``request.output_dir``.

    Errors propagate immediately; pages already written are left in place.
    """
    if renderer_factory is None:
        renderer_factory = functools.partial(PdfRenderer, dpi=request.dpi)
    if reporter is None:
        reporter = ProgressReporter()

    output_dir = Path(request.output_dir)
    ensure_directory(output_dir)
    if not request.append and output_dir.exists():
        LOGGER.info("Removing files in %s", output_dir)
        clear_directory(output_dir)

    total_pages = _probe_page_count(renderer_factory, Path(request.source))
    page_range = resolve_page_range(request.start_page, request.end_page, total_pages)
    total = len(page_range)

    started = time.perf_counter()
    LOGGER.info("Processing %d page(s), in chunks of: %d", total, request.chunk_size)
    counter = 0
    chunks = 0
    for chunk in iter_chunks(page_range, request.chunk_size):
        LOGGER.debug("Opening renderer for pages %d-%d", chunk.start + 1, chunk.end)
        with renderer_factory(Path(request.source)) as renderer:
            counter = process_chunk(
                chunk,
                renderer,
                output_dir,
                counter,
                total,
                encoder=encoder,
                reporter=reporter,
                progress_every=request.progress_every,
            )
        chunks += 1
    elapsed = time.perf_counter() - started

    finish = getattr(reporter, "finish", None)
    if finish is not None:
        finish()
    return ConversionResult(page_range=page_range, pages_written=counter, chunks=chunks, elapsed=elapsed)
