"""
TOML-based config file loading for filesweep.

Searches for `.filesweep.toml`, `filesweep.toml`, or `pyproject.toml [tool.filesweep]`
walking up from the working directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

from filesweep.errors import ConfigError

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

logger = logging.getLogger(__name__)


@dataclass
class FilesweepConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    so the merge can tell "not configured" apart from "explicitly set to default".
    """

    # Processing
    processor: str | None = None
    concurrency: int | None = None
    # File discovery
    extensions: list[str] | None = None
    ignore_name: str | None = None
    silently_ignore: bool | None = None
    exclude: list[str] | None = None
    extend_exclude: list[str] | None = None
    # Reporting
    frail: bool | None = None
    quiet: bool | None = None
    silent: bool | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".filesweep.toml", "filesweep.toml", "pyproject.toml"]

_VALID_FIELDS = {f.name for f in fields(FilesweepConfig)}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.filesweep.toml` >
    `filesweep.toml` > `pyproject.toml` (only if it has `[tool.filesweep]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    if _pyproject_has_filesweep_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_filesweep_section(path: Path) -> bool:
    try:
        data = tomllib.loads(path.read_text())
        return "filesweep" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> FilesweepConfig:
    """
    Load a `FilesweepConfig` from a TOML file, extracting `[tool.filesweep]`
    from `pyproject.toml`. Raises `ConfigError` on unreadable or invalid TOML.
    """
    try:
        data = tomllib.loads(config_path.read_text())
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Invalid config file {config_path}: {e}") from e

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("filesweep", {})

    return _parse_config_data(data)


def _parse_config_data(data: dict[str, Any]) -> FilesweepConfig:
    """Parse a flat or sectioned TOML dict into FilesweepConfig."""
    # Flatten sections: [discovery] and [report] merge into top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = key.replace("-", "_")
        if snake_key in _VALID_FIELDS:
            mapped[snake_key] = value
        else:
            logger.warning("Unrecognized config key: %s", key)

    return FilesweepConfig(**mapped)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: FilesweepConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(FilesweepConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue
        if cfg_field.name in explicit_flags:
            continue
        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
