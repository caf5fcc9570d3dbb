"""Configuration loading for RouteDoc using TOML files.

Settings live in a ``[routedoc]`` table::

    [routedoc]
    routes_dir = "lib/routes"
    output = "docs/api.md"
    ignore = ["index.js", "validators.js"]
    workers = 4
    title = "Auth Server API"

Relative paths are resolved against the directory holding the file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional

import toml

from . import config
from .errors import ConfigError

logger = logging.getLogger(__name__)

SECTION = "routedoc"


@dataclass(frozen=True)
class Settings:
    routes_dir: Path = field(default_factory=lambda: config.ROUTES_DIR)
    output: Path = field(default_factory=lambda: config.OUTPUT_FILE)
    ignore: FrozenSet[str] = field(default_factory=lambda: config.IGNORE_FILES)
    workers: int = field(default_factory=lambda: config.DEFAULT_WORKERS)
    title: str = config.DEFAULT_TITLE

    def override(self, **values: Any) -> "Settings":
        """Return a copy with every non-None value in *values* applied."""
        return replace(self, **{k: v for k, v in values.items() if v is not None})


def load_config(config_file: Optional[Path] = None) -> Dict[str, Any]:
    """Read the raw ``[routedoc]`` table.

    Without *config_file* the default ``routedoc.toml`` is used when it
    exists; an explicitly requested file must exist.
    """
    path = config_file or config.CONFIG_FILE
    if not path.exists():
        if config_file is not None:
            raise ConfigError(f"Config file not found: {path}")
        logger.debug("No config file at %s, using defaults", path)
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        raise ConfigError(f"Could not load config {path}: {exc}") from exc

    section = data.get(SECTION, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{SECTION}] in {path} must be a table")
    logger.debug("Loaded config from %s", path)
    return section


def load_settings(config_file: Optional[Path] = None) -> Settings:
    path = config_file or config.CONFIG_FILE
    raw = load_config(config_file)
    base_dir = path.resolve().parent
    settings = Settings()

    values: Dict[str, Any] = {}
    for key in ("routes_dir", "output"):
        if key in raw:
            values[key] = _path_value(raw[key], key, base_dir)
    if "ignore" in raw:
        ignore = raw["ignore"]
        if not isinstance(ignore, list) or not all(isinstance(name, str) for name in ignore):
            raise ConfigError("'ignore' must be a list of file names")
        values["ignore"] = frozenset(ignore)
    if "workers" in raw:
        workers = raw["workers"]
        if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
            raise ConfigError("'workers' must be a positive integer")
        values["workers"] = workers
    if "title" in raw:
        if not isinstance(raw["title"], str):
            raise ConfigError("'title' must be a string")
        values["title"] = raw["title"]

    return settings.override(**values)


def _path_value(value: Any, key: str, base_dir: Path) -> Path:
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a path string")
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return path
