"""Live reload dev server and filesystem watching, both on livereload."""

from __future__ import annotations

import logging
from pathlib import Path

from livereload import Server
from livereload.handlers import LiveReloadHandler
from livereload.watcher import Watcher
from tornado import ioloop

from collider.config import ServerOptions
from collider.watch import ChangeEvent, WatchBinding, WatchDispatcher

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.8


class SilentWatcher(Watcher):
    """Runs change callbacks but never asks livereload for a reload.

    Browsers reload only through DevServer.reload(), after a successful
    rebuild.
    """

    def examine(self):
        super().examine()
        return None, None


class FileWatcher:
    """Poll binding roots with livereload's watcher and feed the dispatcher.

    livereload keeps one task per watched path, so each root is watched
    once and a change is routed to every binding that matches it.
    """

    def __init__(self, dispatcher: WatchDispatcher, watcher: Watcher | None = None):
        self.dispatcher = dispatcher
        self.watcher = watcher or SilentWatcher()
        self.bindings: list[WatchBinding] = []
        self.roots: list[Path] = []

    def add(self, binding: WatchBinding):
        self.bindings.append(binding)
        for root in binding.roots():
            if root in self.roots:
                continue
            self.roots.append(root)
            self.watcher.watch(str(root), self.on_change, ignore=self.ignore)

    def ignore(self, filename: str) -> bool:
        path = Path(filename).resolve()
        return not any(binding.matches(path) for binding in self.bindings)

    def on_change(self, *_changed):
        path = getattr(self.watcher, "filepath", None)
        if not path:
            logger.debug("Change reported without a path")
            return
        self.dispatcher.dispatch(ChangeEvent(Path(path)))

    def run(self, interval: float = POLL_INTERVAL):
        """Poll forever on the current IOLoop. Used when nothing is served."""
        loop = ioloop.IOLoop.current()
        ioloop.PeriodicCallback(self.watcher.examine, interval * 1000).start()
        logger.debug("Polling %d binding(s) every %.1fs", len(self.bindings), interval)
        loop.start()


class DevServer:
    """Serve the build tree with livereload; reload() is thread-safe."""

    def __init__(
        self,
        served_dir: Path,
        options: ServerOptions,
        file_watcher: FileWatcher | None = None,
    ):
        self.served_dir = served_dir
        self.options = options
        self.file_watcher = file_watcher
        self._loop: ioloop.IOLoop | None = None

    @classmethod
    def start(
        cls,
        served_dir: Path,
        options: ServerOptions,
        file_watcher: FileWatcher | None = None,
    ) -> "DevServer":
        served_dir.mkdir(parents=True, exist_ok=True)
        return cls(served_dir, options, file_watcher)

    @property
    def url(self) -> str:
        return f"http://{self.options.host}:{self.options.port}"

    def make_server(self) -> Server:
        if self.file_watcher is not None and self.file_watcher.bindings:
            return Server(watcher=self.file_watcher.watcher)
        # Nothing rebuilds in-process: reload whenever the output changes.
        server = Server()
        server.watch(str(self.served_dir))
        return server

    def serve_forever(self):
        """Block on the IOLoop serving files and polling watches."""
        server = self.make_server()
        self._loop = ioloop.IOLoop.current()
        server.serve(
            root=str(self.served_dir),
            host=self.options.host,
            port=self.options.port,
            open_url_delay=self.options.open_delay if self.options.open_browser else None,
            live_css=self.options.live_css,
        )

    def reload(self):
        if self._loop is None:
            logger.debug("Reload requested before the server loop started")
            return
        self._loop.add_callback(LiveReloadHandler.reload_waiters)
