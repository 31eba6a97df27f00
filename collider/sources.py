from __future__ import annotations

import os
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from collider.errors import ConfigError


@lru_cache(maxsize=None)
def glob_to_regex(pattern: str) -> re.Pattern:
    """Translate a glob suffix into a regex over posix relative paths."""
    parts: list[str] = []
    index = 0
    while index < len(pattern):
        if pattern.startswith("**/", index):
            parts.append("(?:.*/)?")
            index += 3
            continue
        if pattern.startswith("**", index):
            parts.append(".*")
            index += 2
            continue
        char = pattern[index]
        if char == "*":
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        else:
            parts.append(re.escape(char))
        index += 1
    return re.compile("".join(parts) + r"\Z")


def check_roots(roots: tuple[Path, ...], error: type[Exception] = ConfigError):
    """Fail fast on source roots that are missing or unreadable."""
    for root in roots:
        if not root.is_dir():
            raise error(f"Source root does not exist: {root}")
        if not os.access(root, os.R_OK | os.X_OK):
            raise error(f"Source root is not readable: {root}")


@dataclass(frozen=True)
class SourceSet:
    """An explicit list of root directories plus one glob suffix."""

    roots: tuple[Path, ...]
    pattern: str

    def relative(self, path: Path) -> tuple[Path, Path] | None:
        """Return (root, rel) for the first root owning path, if it matches."""
        regex = glob_to_regex(self.pattern)
        path = Path(path)
        for root in self.roots:
            try:
                rel = path.relative_to(root)
            except ValueError:
                continue
            if regex.match(rel.as_posix()):
                return root, rel
        return None

    def matches(self, path: Path) -> bool:
        return self.relative(path) is not None

    def files(self) -> list[Path]:
        """All existing files matching the pattern, sorted for determinism."""
        found: list[Path] = []
        for root in self.roots:
            if not root.is_dir():
                continue
            for path in root.rglob("*"):
                if path.is_file() and self.matches(path):
                    found.append(path)
        return sorted(found)

    def check(self, error: type[Exception] = ConfigError):
        check_roots(self.roots, error)


def resolve_roots(base: Path, names: list[str] | tuple[str, ...]) -> tuple[Path, ...]:
    """Resolve root names against base once; missing roots are an error."""
    roots = tuple((base / name).resolve() for name in names)
    check_roots(roots)
    return roots
