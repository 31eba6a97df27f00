from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, title: str, message: str) -> None: ...


class NullNotifier:
    def notify(self, title: str, message: str) -> None:
        logger.debug("Notification suppressed: %s: %s", title, message)


def _applescript_string(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class DesktopNotifier:
    """Best-effort desktop notifications through the platform's CLI tool."""

    def notify(self, title: str, message: str) -> None:
        cmd = self.command(title, message)
        if cmd is None:
            logger.debug("No notification backend available")
            return
        try:
            subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as exc:
            logger.debug("Notification failed: %s", exc)

    def command(self, title: str, message: str) -> list[str] | None:
        if sys.platform == "darwin" and shutil.which("osascript"):
            script = (
                f"display notification {_applescript_string(message)} "
                f"with title {_applescript_string(title)}"
            )
            return ["osascript", "-e", script]
        if shutil.which("notify-send"):
            return ["notify-send", title, message]
        return None
