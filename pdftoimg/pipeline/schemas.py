"""Value types shared by the scheduler and the CLI."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path

from ..errors import ConfigError


@dataclass(frozen=True)
class ConversionRequest:
    source: Path
    output_dir: Path = Path("out")
    start_page: int = 0
    end_page: int = -1
    append: bool = False
    chunk_size: int = 100
    dpi: int = 300
    progress_every: int = 5

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ConfigError(f"chunk size must be positive, got {self.chunk_size}")
        if self.dpi <= 0:
            raise ConfigError(f"dpi must be positive, got {self.dpi}")
        if self.progress_every <= 0:
            raise ConfigError(f"progress cadence must be positive, got {self.progress_every}")


@dataclass(frozen=True)
class PageRange:
    """0-based half-open page interval ``[start, end)``."""
    start: int
    end: int

    def __len__(self) -> int:
        return max(self.end - self.start, 0)


@dataclass(frozen=True)
class Chunk:
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def indices(self) -> range:
        return range(self.start, self.end)


@dataclass
class ConversionResult:
    page_range: PageRange
    pages_written: int
    chunks: int
    elapsed: float

    def to_dict(self) -> dict:
        return asdict(self)
