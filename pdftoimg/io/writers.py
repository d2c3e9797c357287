"""Output directory management and JPEG encoding."""

from __future__ import annotations

import shutil
from pathlib import Path

from PIL import Image

from ..errors import ConfigError, PageWriteError

JPEG_QUALITY = 100


def page_filename(index: int) -> str:
    """File name for the 0-based page ``index`` (1-based, zero-padded to 3)."""
    return f"{index + 1:03d}.jpg"


def ensure_directory(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigError(f"Cannot create output directory {path}: {exc}") from exc


def clear_directory(path: Path) -> None:
    """Remove every entry inside ``path``, keeping the directory itself."""
    try:
        for child in path.iterdir():
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()
    except OSError as exc:
        raise ConfigError(f"Cannot clear output directory {path}: {exc}") from exc


def write_jpeg(image: Image.Image, path: Path, *, quality: int = JPEG_QUALITY) -> None:
    if image.mode not in ("RGB", "L"):
        image = image.convert("RGB")
    try:
        with path.open("wb") as f:
            image.save(f, format="JPEG", quality=quality)
    except OSError as exc:
        raise PageWriteError(f"Cannot write {path}: {exc}") from exc
