"""The site's task graph: clean, compile, serve, watch, deploy."""

from __future__ import annotations

from pathlib import Path

from collider.bundle import ScriptBundler
from collider.config import ProjectConfig
from collider.context import Orchestrator
from collider.deploy import publish
from collider.paths import ASSETS_DIR, SCRIPTS_DIR
from collider.render import TemplateRenderer
from collider.sources import SourceSet
from collider.static import AssetCopier, clean_dir
from collider.styles import StyleCompiler
from collider.tasks import Body, TransformUnit, parallel, series
from collider.watch import WatchBinding

COMPILE_TASKS = ("templates", "styles", "scripts", "assets")


def transform_task(unit: TransformUnit, sources: SourceSet, output_dir: Path, options) -> Body:
    def body():
        return unit.invoke(sources, output_dir, options)

    body.__name__ = unit.name
    return body


def watch_bindings(config: ProjectConfig, roots: tuple[Path, ...]) -> list[WatchBinding]:
    shared = config.shared_roots()

    def sources(pattern: str) -> tuple[SourceSet, ...]:
        if not shared:
            return (SourceSet(roots, pattern),)
        return (SourceSet(roots, pattern), SourceSet(shared, pattern))

    return [
        WatchBinding(
            "templates",
            (
                SourceSet(roots, "**/*.html"),
                SourceSet(roots, f"{config.templates.data}/**/*.json"),
            ),
            "templates",
        ),
        WatchBinding("styles", sources("**/*.scss"), "styles"),
        WatchBinding("scripts", sources("**/*.js"), "scripts"),
        WatchBinding("assets", (SourceSet(roots, config.assets.pattern),), "assets"),
    ]


def register_project(ctx: Orchestrator):
    """Register every task for ctx.config. Raises on missing roots or bad references."""
    config = ctx.config
    roots = config.roots()
    source = (config.source_dir,)
    build = config.build_dir
    reg = ctx.registry

    reg.register("clean", lambda: clean_dir(build), description="Delete the build tree")
    reg.register(
        "clean:assets",
        lambda: clean_dir(build / ASSETS_DIR, keep_root=True),
        description="Empty the built assets directory",
    )
    reg.register(
        "clean:js",
        lambda: clean_dir(build / SCRIPTS_DIR, keep_root=True),
        description="Empty the built scripts directory",
    )

    reg.register(
        "templates",
        transform_task(
            TemplateRenderer(roots), SourceSet(source, config.templates.pages), build, config.templates
        ),
        description="Render Jinja pages",
    )
    reg.register(
        "styles",
        transform_task(
            StyleCompiler((*roots, *config.shared_roots())),
            SourceSet(source, config.styles.entry),
            build,
            config.styles,
        ),
        description="Compile stylesheets with sass",
    )
    reg.register(
        "scripts",
        transform_task(
            ScriptBundler(), SourceSet(source, config.scripts.entry), build, config.scripts
        ),
        requires=("clean:js",),
        description="Bundle scripts with esbuild",
    )
    reg.register(
        "assets",
        transform_task(AssetCopier(), SourceSet(roots, config.assets.pattern), build, config.assets),
        requires=("clean:assets",),
        description="Copy static assets",
    )

    reg.register("build", parallel(*COMPILE_TASKS, name="build"), description="Run every compile task")
    reg.register("serve", ctx.start_server, description="Serve the build tree with live reload")
    reg.register(
        "watch",
        lambda: ctx.start_watch(watch_bindings(config, roots)),
        description="Rebuild when sources change",
    )
    reg.register(
        "deploy",
        lambda: publish(config.root, build, config.deploy),
        description="Publish the build tree to the deploy branch",
    )
    reg.register(
        "default",
        series("clean", "build", "serve", "watch", name="default"),
        description="clean, build, serve, then watch",
    )
    reg.validate()
