from .progress import ProgressReporter, format_bar
from .scheduler import convert, iter_chunks, process_chunk, resolve_page_range
from .schemas import Chunk, ConversionRequest, ConversionResult, PageRange

__all__ = [
    "ProgressReporter",
    "format_bar",
    "convert",
    "iter_chunks",
    "process_chunk",
    "resolve_page_range",
    "Chunk",
    "ConversionRequest",
    "ConversionResult",
    "PageRange",
]
