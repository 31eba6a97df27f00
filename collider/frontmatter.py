from __future__ import annotations

import re

FRONTMATTER_RE = re.compile(r"\A---\s*\n(.*?)\n---[ \t]*\n?", re.DOTALL)
INT_RE = re.compile(r"^-?\d+$")


def strip_quotes(value: str) -> str:
    trimmed = value.strip()
    if len(trimmed) >= 2 and trimmed[0] == trimmed[-1] and trimmed[0] in ('"', "'"):
        return trimmed[1:-1]
    return trimmed


def parse_value(raw: str):
    """Scalar, [list] or quoted string from a single frontmatter line."""
    value = raw.strip()
    if value.startswith("[") and value.endswith("]"):
        inner = value[1:-1].strip()
        if not inner:
            return []
        return [strip_quotes(item) for item in inner.split(",")]
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if INT_RE.match(value):
        return int(value)
    return strip_quotes(value)


def split_frontmatter(content: str) -> tuple[dict, str]:
    """Split a leading ``---`` block from a page. Returns (meta, body)."""
    match = FRONTMATTER_RE.match(content)
    if not match:
        return {}, content
    meta: dict = {}
    for line in match.group(1).splitlines():
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        key, sep, rest = line.partition(":")
        if not sep:
            continue
        meta[key.strip()] = parse_value(rest)
    return meta, content[match.end() :]
