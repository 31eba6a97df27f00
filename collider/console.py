from __future__ import annotations

import threading

from rich.console import Console
from rich.markup import escape

from collider.paths import LOG_PREFIX


def format_duration(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    return f"{seconds:.2f} s"


class Reporter:
    """Operator-facing terminal output, safe to call from worker threads."""

    def __init__(self, console: Console | None = None, errors: Console | None = None):
        self.console = console or Console(highlight=False)
        self.errors = errors or Console(stderr=True, highlight=False)
        self._lock = threading.Lock()

    def info(self, message: str):
        with self._lock:
            self.console.print(f"[dim]\\[{LOG_PREFIX}][/dim] {escape(message)}")

    def task_started(self, name: str):
        with self._lock:
            self.console.print(f"Starting '[cyan]{escape(name)}[/cyan]'...")

    def task_finished(self, name: str, seconds: float):
        with self._lock:
            self.console.print(
                f"Finished '[cyan]{escape(name)}[/cyan]' after "
                f"[magenta]{format_duration(seconds)}[/magenta]"
            )

    def task_failed(self, name: str, seconds: float):
        with self._lock:
            self.console.print(
                f"[red]Failed[/red] '[cyan]{escape(name)}[/cyan]' after "
                f"[magenta]{format_duration(seconds)}[/magenta]"
            )

    def error(self, message: str):
        """Print an error block: blank line, prefixed message, blank line."""
        with self._lock:
            self.errors.print()
            self.errors.print(
                f"[bold red]\\[{LOG_PREFIX}] Error:[/bold red] {escape(message)}"
            )
            self.errors.print()
