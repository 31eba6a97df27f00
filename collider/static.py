from __future__ import annotations

import logging
import shutil
from pathlib import Path

from collider.config import AssetOptions
from collider.paths import ASSETS_DIR
from collider.sources import SourceSet
from collider.tasks import RunResult

logger = logging.getLogger(__name__)


def copy_if_newer(src: Path, dst: Path) -> bool:
    """Copy src to dst if src is newer. Return True if copied."""
    if dst.exists() and dst.stat().st_mtime >= src.stat().st_mtime:
        return False
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dst)
    return True


def flatten_path(rel: Path) -> Path:
    """Keep only the file name and its nearest parent directory."""
    parts = rel.parts
    return Path(*parts[-2:]) if len(parts) > 2 else rel


def asset_destination(rel: Path, options: AssetOptions) -> Path:
    """Destination under the assets dir for a path relative to a source root."""
    parts = rel.parts
    inside = Path(*parts[1:]) if parts and parts[0] == ASSETS_DIR else rel
    return flatten_path(inside) if options.flatten else inside


def clean_dir(path: Path, keep_root: bool = False):
    """Delete a directory tree, optionally keeping the empty directory."""
    if not path.exists():
        return
    if not keep_root:
        shutil.rmtree(path)
        return
    for child in path.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()


class AssetCopier:
    """Copy asset files from every source root into ``<build>/assets``."""

    name = "assets"
    label = "assets"

    def invoke(self, sources: SourceSet, output_dir: Path, options: AssetOptions) -> RunResult:
        dest_dir = output_dir / ASSETS_DIR
        copied = 0
        for src in sources.files():
            _, rel = sources.relative(src)
            dst = dest_dir / asset_destination(rel, options)
            if options.only_changed:
                copied += copy_if_newer(src, dst)
            else:
                dst.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(src, dst)
                copied += 1
        logger.debug("Copied %d asset(s) into %s", copied, dest_dir)
        return RunResult.success(self.name)
