"""Converter defaults (packaged YAML + optional user overrides)."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..errors import ConfigError

DEFAULTS_PATH = Path(__file__).resolve().parent / "defaults.yaml"


@dataclass
class Settings:
    output_dir: str = "out"
    start_page: int = 0
    end_page: int = -1
    append: bool = False
    chunk_size: int = 100
    dpi: int = 300
    progress_every: int = 5
    log_level: str = "INFO"


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text())
    except OSError as exc:
        raise ConfigError(f"Cannot read config {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping")
    return data


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load packaged defaults, then overlay ``path`` if given."""
    data = _read_yaml(DEFAULTS_PATH)
    if path is not None:
        data.update(_read_yaml(Path(path)))

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")
    return Settings(**data)
