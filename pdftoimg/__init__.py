from .errors import ConfigError, ConversionError, DocumentOpenError, PageWriteError, RenderError
from .io.loaders import PdfRenderer
from .pipeline.progress import ProgressReporter, format_bar
from .pipeline.scheduler import convert, iter_chunks, resolve_page_range
from .pipeline.schemas import Chunk, ConversionRequest, ConversionResult, PageRange

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "ConversionError",
    "DocumentOpenError",
    "PageWriteError",
    "RenderError",
    "PdfRenderer",
    "ProgressReporter",
    "format_bar",
    "convert",
    "iter_chunks",
    "resolve_page_range",
    "Chunk",
    "ConversionRequest",
    "ConversionResult",
    "PageRange",
]
