"""Scanner configuration, optionally loaded from a YAML or JSON file."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

import yaml

DEFAULT_IGNORE_DIRS: Tuple[str, ...] = (
    "node_modules",
    ".git",
    "dist",
    "build",
    ".next",
    "coverage",
    ".nyc_output",
)
DEFAULT_IGNORE_FILES: Tuple[str, ...] = ("*.log", ".DS_Store")
PATTERN_KEYS = frozenset({"ignore_dirs", "ignore_files", "extra_ignore"})


def _patterns(key: str, value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"'{key}' must be a string or a list of strings, got {value!r}")
    return tuple(value)


def _integer(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"'{key}' must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'{key}' must be an integer, got {value!r}") from exc


@dataclass
class ScannerConfig:
    ignore_dirs: Tuple[str, ...] = DEFAULT_IGNORE_DIRS
    ignore_files: Tuple[str, ...] = DEFAULT_IGNORE_FILES
    # Directory or file name patterns added on top of the defaults.
    extra_ignore: Tuple[str, ...] = field(default_factory=tuple)
    max_file_bytes: int = 2 * 1024 * 1024
    max_concurrency: int = 32

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ScannerConfig":
        section = data.get("scanner", data)
        if not isinstance(section, Mapping):
            raise ValueError("'scanner' section must be a mapping")

        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in section.items():
            key = str(key).replace("-", "_")
            if key not in known:
                continue
            if key in PATTERN_KEYS:
                values[key] = _patterns(key, value)
            else:
                values[key] = _integer(key, value)

        config = cls(**values)
        if config.max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        return config


def load_config(path: Path | None) -> ScannerConfig:
    if not path:
        return ScannerConfig()
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        if path.suffix.lower() in {".yml", ".yaml"}:
            try:
                data = yaml.safe_load(handle) or {}
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid config file {path}: {exc}") from exc
        else:
            data = json.load(handle)
    if not isinstance(data, Mapping):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return ScannerConfig.from_mapping(data)
