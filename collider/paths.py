from __future__ import annotations

from pathlib import Path

CONFIG_FILE = "collider.json"
SOURCE_DIR = "project"
BUILD_DIR = "distribute"
ASSETS_DIR = "assets"
SCRIPTS_DIR = "js"
LOG_PREFIX = "Collider"


def find_root(start: Path | None = None) -> Path:
    """Walk up from start to the first directory holding a project."""
    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / CONFIG_FILE).exists() or (candidate / SOURCE_DIR).is_dir():
            return candidate
    return current
