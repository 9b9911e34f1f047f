"""Config file loading and auto-discovery for navdiff.

Searches for ``navdiff.yaml`` in the current directory and parent
directories, parses it, and resolves relative paths against the config
file's location.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

CONFIG_FILENAME = "navdiff.yaml"

OUTPUT_FORMATS = ("text", "json")


@dataclass(frozen=True)
class NavdiffConfig:
    """Parsed navdiff project configuration."""

    config_path: Path | None = None
    scenarios: str | None = None
    format: str = "text"
    validate: bool = True
    log_level: str = "WARNING"


def find_config(start: Path | None = None) -> Path | None:
    """Walk from *start* (default ``cwd()``) up to the filesystem root.

    Returns the first ``navdiff.yaml`` found, or ``None``.
    """
    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def load_config(
    path: str | Path | None = None,
    *,
    auto_discover: bool = True,
) -> NavdiffConfig:
    """Load a navdiff config file.

    Resolution order:

    1. Explicit *path* (error if it doesn't exist).
    2. Auto-discover by walking parent directories.
    3. Return an empty ``NavdiffConfig`` (all defaults).
    """
    config_path: Path | None = None

    if path is not None:
        config_path = Path(path).resolve()
        if not config_path.is_file():
            msg = f"Config file not found: {config_path}"
            raise FileNotFoundError(msg)
    elif auto_discover:
        config_path = find_config()

    if config_path is None:
        return NavdiffConfig()

    return _parse_config(config_path)


def _parse_config(config_path: Path) -> NavdiffConfig:
    """Read and parse a YAML config file, resolving relative paths."""
    text = config_path.read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}

    if not isinstance(data, dict):
        msg = f"Expected a YAML mapping in {config_path}, got {type(data).__name__}"
        raise ValueError(msg)

    fmt = data.get("format", "text")
    if fmt not in OUTPUT_FORMATS:
        msg = f"Unknown output format {fmt!r} in {config_path} (expected one of {', '.join(OUTPUT_FORMATS)})"
        raise ValueError(msg)

    scenarios = data.get("scenarios")
    if scenarios is not None:
        scenarios = str((config_path.parent / scenarios).resolve())

    return NavdiffConfig(
        config_path=config_path,
        scenarios=scenarios,
        format=fmt,
        validate=bool(data.get("validate", True)),
        log_level=str(data.get("log_level", "WARNING")).upper(),
    )
