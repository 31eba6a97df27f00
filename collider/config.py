"""Project configuration: closed per-unit option structs loaded from JSON."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from pathlib import Path

from collider.errors import ConfigError
from collider.paths import ASSETS_DIR, BUILD_DIR, CONFIG_FILE, SOURCE_DIR
from collider.sources import resolve_roots

STYLE_OUTPUT_STYLES = ("expanded", "compressed")
SCRIPT_FORMATS = ("iife", "esm", "cjs")


def _check_choice(section: str, key: str, value: str, choices: tuple[str, ...]):
    if value not in choices:
        raise ConfigError(
            f"{section}.{key} must be one of {', '.join(choices)}, got {value!r}"
        )


@dataclass(frozen=True)
class TemplateOptions:
    """Jinja page rendering.

    pages: glob of page files inside each source root.
    partials: directories holding includable fragments, never rendered as pages.
    data: directory of JSON files exposed to templates as ``data.<stem>``.
    minify: strip HTML comments and collapse whitespace between tags.
    """

    pages: str = "**/*.html"
    partials: tuple[str, ...] = ("common", "matter")
    data: str = "data"
    minify: bool = True


@dataclass(frozen=True)
class StyleOptions:
    entry: str = "main.scss"
    output: str = "css/main.css"
    output_style: str = "compressed"
    source_map: bool = True
    command: tuple[str, ...] = ("sass",)

    def __post_init__(self):
        _check_choice("styles", "output_style", self.output_style, STYLE_OUTPUT_STYLES)


@dataclass(frozen=True)
class ScriptOptions:
    entry: str = "main.js"
    output: str = "js/bundle.js"
    format: str = "iife"
    minify: bool = False
    aliases: dict[str, str] = field(default_factory=dict)
    command: tuple[str, ...] = ("esbuild",)

    def __post_init__(self):
        _check_choice("scripts", "format", self.format, SCRIPT_FORMATS)


@dataclass(frozen=True)
class AssetOptions:
    pattern: str = f"{ASSETS_DIR}/**/*"
    flatten: bool = True
    only_changed: bool = True


@dataclass(frozen=True)
class ServerOptions:
    host: str = "localhost"
    port: int = 8000
    open_browser: bool = True
    open_delay: float = 0.5
    live_css: bool = True


@dataclass(frozen=True)
class DeployOptions:
    remote: str = "origin"
    branch: str = "gh-pages"
    message: str = "Update site"


SECTIONS = {
    "templates": TemplateOptions,
    "styles": StyleOptions,
    "scripts": ScriptOptions,
    "assets": AssetOptions,
    "server": ServerOptions,
    "deploy": DeployOptions,
}


@dataclass(frozen=True)
class ProjectConfig:
    root: Path
    source: str = SOURCE_DIR
    build: str = BUILD_DIR
    packages: tuple[str, ...] = ()
    shared: tuple[str, ...] = ()
    templates: TemplateOptions = field(default_factory=TemplateOptions)
    styles: StyleOptions = field(default_factory=StyleOptions)
    scripts: ScriptOptions = field(default_factory=ScriptOptions)
    assets: AssetOptions = field(default_factory=AssetOptions)
    server: ServerOptions = field(default_factory=ServerOptions)
    deploy: DeployOptions = field(default_factory=DeployOptions)

    @property
    def source_dir(self) -> Path:
        return (self.root / self.source).resolve()

    @property
    def build_dir(self) -> Path:
        return (self.root / self.build).resolve()

    def roots(self) -> tuple[Path, ...]:
        """Source roots: the project first, then matter packages."""
        return resolve_roots(self.root, [self.source, *self.packages])

    def shared_roots(self) -> tuple[Path, ...]:
        """Framework sources outside the site: watched and on the sass load path."""
        return resolve_roots(self.root, self.shared)


def _coerce(section: str, option: dataclasses.Field, value):
    """Check a JSON value against the declared field type."""
    default = (
        option.default_factory()
        if option.default_factory is not dataclasses.MISSING
        else option.default
    )
    where = f"{section}.{option.name}"
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise ConfigError(f"{where} must be true or false")
        return value
    if isinstance(default, (int, float)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"{where} must be a number")
        return type(default)(value)
    if isinstance(default, str):
        if not isinstance(value, str):
            raise ConfigError(f"{where} must be a string")
        return value
    if isinstance(default, tuple):
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"{where} must be a list of strings")
        return tuple(value)
    if isinstance(default, dict):
        if not isinstance(value, dict) or not all(
            isinstance(v, str) for v in value.values()
        ):
            raise ConfigError(f"{where} must be an object of strings")
        return dict(value)
    return value


def build_options(section: str, cls, raw) -> object:
    """Build one closed options struct, rejecting unknown keys."""
    if not isinstance(raw, dict):
        raise ConfigError(f"{section} must be an object")
    fields = {f.name: f for f in dataclasses.fields(cls)}
    unknown = sorted(set(raw) - set(fields))
    if unknown:
        raise ConfigError(f"Unknown {section} option(s): {', '.join(unknown)}")
    values = {key: _coerce(section, fields[key], value) for key, value in raw.items()}
    return cls(**values)


def parse_config(root: Path, raw: dict) -> ProjectConfig:
    if not isinstance(raw, dict):
        raise ConfigError("Configuration must be a JSON object")
    top_level = {"source", "build", "packages", "shared", *SECTIONS}
    unknown = sorted(set(raw) - top_level)
    if unknown:
        raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}")

    values: dict = {}
    project_fields = {f.name: f for f in dataclasses.fields(ProjectConfig)}
    for key in ("source", "build", "packages", "shared"):
        if key in raw:
            values[key] = _coerce("project", project_fields[key], raw[key])
    for section, cls in SECTIONS.items():
        if section in raw:
            values[section] = build_options(section, cls, raw[section])
    return ProjectConfig(root=root, **values)


def load_config(root: Path, path: Path | None = None) -> ProjectConfig:
    """Load collider.json from root; defaults when the file is absent."""
    root = root.resolve()
    config_path = path or root / CONFIG_FILE
    if not config_path.exists():
        if path is not None:
            raise ConfigError(f"Config file not found: {config_path}")
        return ProjectConfig(root=root)
    try:
        raw = json.loads(config_path.read_text())
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {config_path}: {exc}") from exc
    return parse_config(root, raw)
