"""Default paths and settings for route documentation runs."""

from __future__ import annotations

import os
from pathlib import Path

PROJECT_ROOT = Path(os.environ.get("ROUTEDOC_ROOT", str(Path.cwd()))).expanduser()
ROUTES_DIR = PROJECT_ROOT / "lib" / "routes"
OUTPUT_FILE = PROJECT_ROOT / "docs" / "api.md"
CONFIG_FILE = PROJECT_ROOT / "routedoc.toml"

# Files in the routes directory that do not export route definitions.
IGNORE_FILES = frozenset({"index.js", "validators.js"})
SOURCE_EXTENSIONS = {".js"}

DEFAULT_TITLE = "API"
DEFAULT_WORKERS = min(8, (os.cpu_count() or 1) + 4)
OUTPUT_MODE = 0o644
