from __future__ import annotations

import logging

from collider.config import ProjectConfig
from collider.console import Reporter
from collider.dev import DevServer, FileWatcher
from collider.isolation import ErrorIsolation
from collider.notify import DesktopNotifier, Notifier
from collider.runner import Runner
from collider.tasks import RunResult, TaskRegistry, Unit
from collider.watch import WatchBinding, WatchDispatcher

logger = logging.getLogger(__name__)


class Orchestrator:
    """Registry, runner, watch session and dev server for one project run.

    Created once at startup and handed to everything that needs shared
    state; there are no module-level singletons.
    """

    def __init__(
        self,
        config: ProjectConfig,
        reporter: Reporter | None = None,
        notifier: Notifier | None = None,
    ):
        self.config = config
        self.reporter = reporter or Reporter()
        self.notifier = notifier or DesktopNotifier()
        self.registry = TaskRegistry()
        self.isolation = ErrorIsolation(self.reporter, self.notifier)
        self.runner = Runner(self.registry, self.isolation, self.reporter)
        self.dispatcher = WatchDispatcher(self.runner.run, on_result=self.after_rebuild)
        self.file_watcher = FileWatcher(self.dispatcher)
        self.server: DevServer | None = None
        self.watching = False

    def run(self, unit: Unit) -> RunResult:
        return self.runner.run(unit)

    @property
    def active(self) -> bool:
        """True when a server or watch session should keep the process alive."""
        return self.server is not None or self.watching

    def start_server(self):
        if self.server is None:
            self.server = DevServer.start(
                self.config.build_dir, self.config.server, self.file_watcher
            )
        self.reporter.info(f"Serving {self.config.build} at {self.server.url}")

    def start_watch(self, bindings: list[WatchBinding]):
        for binding in bindings:
            self.dispatcher.add(binding)
            self.file_watcher.add(binding)
            logger.debug("Watching %s for %s", binding.roots(), binding.name)
        self.watching = True
        self.reporter.info(f"Watching {len(bindings)} source group(s) for changes")

    def after_rebuild(self, binding: WatchBinding, result: RunResult):
        if not result.ok:
            self.reporter.info(f"'{binding.name}' failed, waiting for the next change")
            return
        if self.server is not None:
            self.server.reload()

    def wait(self):
        """Stay in the foreground serving and/or watching until interrupted."""
        try:
            if self.server is not None:
                self.server.serve_forever()
            elif self.watching:
                self.file_watcher.run()
        finally:
            self.close()

    def close(self):
        self.dispatcher.close()
