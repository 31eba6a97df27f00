"""Command line entry point: run one task, then keep serving/watching if asked."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from collider.config import load_config
from collider.console import Reporter
from collider.context import Orchestrator
from collider.errors import FATAL_ERRORS
from collider.notify import DesktopNotifier, NullNotifier
from collider.paths import find_root
from collider.project import register_project

EXIT_OK = 0
EXIT_TASK_FAILED = 1
EXIT_SETUP_ERROR = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="collider", description="Build, serve and watch a static site"
    )
    parser.add_argument("task", nargs="?", default="default", help="Task to run")
    parser.add_argument("--root", type=Path, help="Project root directory")
    parser.add_argument("--config", type=Path, help="Path to collider.json")
    parser.add_argument(
        "--no-notify", action="store_true", help="Disable desktop notifications"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--list", action="store_true", help="List tasks and exit")
    return parser.parse_args(argv)


def configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def list_tasks(ctx: Orchestrator):
    for name in ctx.registry.names():
        task = ctx.registry.lookup(name)
        ctx.reporter.console.print(f"[cyan]{name:<14}[/cyan] {task.description}")


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)
    reporter = Reporter()
    notifier = NullNotifier() if args.no_notify else DesktopNotifier()

    try:
        config = load_config(args.root or find_root(), args.config)
        ctx = Orchestrator(config, reporter=reporter, notifier=notifier)
        register_project(ctx)
        if args.list:
            list_tasks(ctx)
            return EXIT_OK
        result = ctx.run(args.task)
    except FATAL_ERRORS as exc:
        reporter.error(str(exc))
        return EXIT_SETUP_ERROR

    if not result.ok:
        ctx.close()
        return EXIT_TASK_FAILED

    if ctx.active:
        try:
            ctx.wait()
        except KeyboardInterrupt:
            reporter.info("Stopped.")
    else:
        ctx.close()
    return EXIT_OK
