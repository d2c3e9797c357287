"""Error taxonomy for a conversion run."""

from __future__ import annotations


class ConversionError(RuntimeError):
    """Base class for every failure that aborts a conversion."""


class ConfigError(ConversionError):
    """Bad flags, settings or an unusable output directory."""


class DocumentOpenError(ConversionError):
    """The source PDF could not be opened or inspected."""


class RenderError(ConversionError):
    """A page could not be rasterized."""


class PageWriteError(ConversionError):
    """A rendered page could not be encoded or written to disk."""
