from __future__ import annotations

import json
import re
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape
from markdown import Markdown
from markupsafe import Markup

from collider.config import TemplateOptions
from collider.frontmatter import split_frontmatter
from collider.paths import ASSETS_DIR
from collider.sources import SourceSet
from collider.tasks import Failure, RunResult

COMMENT_RE = re.compile(r"<!--(?!\[if).*?-->", re.DOTALL)
BETWEEN_TAGS_RE = re.compile(r">\s+<")
EDGE_RE = re.compile(r"(?<=>)\s+\Z|\A\s+(?=<)")
WHITESPACE_RE = re.compile(r"\s+")
PRESERVE_RE = re.compile(
    r"(<(pre|textarea|script|style)\b.*?</\2\s*>)", re.DOTALL | re.IGNORECASE
)


def build_markdown_renderer() -> Markdown:
    """Create a Markdown renderer for the ``markdown`` template filter."""
    return Markdown(extensions=["extra"], output_format="xhtml")


def get_template_env(search_roots: tuple[Path, ...]) -> Environment:
    """Create a Jinja environment that can include partials from every root."""
    env = Environment(
        loader=FileSystemLoader([str(root) for root in search_roots]),
        autoescape=select_autoescape(["html"]),
        keep_trailing_newline=True,
    )
    renderer = build_markdown_renderer()

    def markdown_filter(text: str) -> Markup:
        renderer.reset()
        return Markup(renderer.convert(text))

    env.filters["markdown"] = markdown_filter
    return env


def load_data(search_roots: tuple[Path, ...], data_dir: str) -> dict:
    """Load ``<root>/<data_dir>/**/*.json`` keyed by file stem. Earlier roots win."""
    data: dict = {}
    for root in search_roots:
        directory = root / data_dir
        if not directory.is_dir():
            continue
        for path in sorted(directory.rglob("*.json")):
            data.setdefault(path.stem, json.loads(path.read_text()))
    return data


def minify_html(html: str) -> str:
    """Drop comments and collapse whitespace outside pre/textarea/script/style."""
    html = COMMENT_RE.sub("", html)
    pieces = PRESERVE_RE.split(html)
    out: list[str] = []
    # split() yields text, whole match, tag name, text, ...
    for index in range(0, len(pieces), 3):
        text = BETWEEN_TAGS_RE.sub("><", pieces[index])
        text = EDGE_RE.sub("", text)
        out.append(WHITESPACE_RE.sub(" ", text))
        if index + 1 < len(pieces):
            out.append(pieces[index + 1])
    return "".join(out).strip()


def skip_page(rel: Path, options: TemplateOptions) -> bool:
    """Partials, data and assets are never rendered as pages."""
    return bool(rel.parts) and rel.parts[0] in (*options.partials, options.data, ASSETS_DIR)


def format_template_error(rel: Path, exc: TemplateError, line_offset: int = 0) -> str:
    """``rel:line: message``. line_offset counts frontmatter lines cut from the body."""
    lineno = getattr(exc, "lineno", None)
    if lineno and getattr(exc, "name", None) is None:
        lineno += line_offset
    where = f"{rel.as_posix()}:{lineno}" if lineno else rel.as_posix()
    return f"{where}: {exc.message or type(exc).__name__}"


class TemplateRenderer:
    """Render Jinja pages into the build tree."""

    name = "jinja"
    label = "Jinja"

    def __init__(self, search_roots: tuple[Path, ...]):
        self.search_roots = search_roots

    def invoke(self, sources: SourceSet, output_dir: Path, options: TemplateOptions) -> RunResult:
        env = get_template_env(self.search_roots)
        try:
            data = load_data(self.search_roots, options.data)
        except (OSError, json.JSONDecodeError) as exc:
            return RunResult.failed(self.name, self.name, f"Template data: {exc}")

        failures: list[Failure] = []
        for page in sources.files():
            _, rel = sources.relative(page)
            if skip_page(rel, options):
                continue
            offset = 0
            try:
                content = page.read_text(encoding="utf-8")
                meta, body = split_frontmatter(content)
                offset = content.count("\n", 0, len(content) - len(body))
                template = env.from_string(body)
                html = template.render(page=meta, data=data, path=rel.as_posix())
            except TemplateError as exc:
                failures.append(Failure(self.name, format_template_error(rel, exc, offset)))
                continue
            except Exception as exc:
                failures.append(Failure(self.name, f"{rel.as_posix()}: {type(exc).__name__}: {exc}"))
                continue

            if options.minify:
                html = minify_html(html)
            output = output_dir / rel
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(html)

        return RunResult(name=self.name, failures=tuple(failures))
