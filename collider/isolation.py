from __future__ import annotations

import logging

from collider.console import Reporter
from collider.errors import FATAL_ERRORS, TransformFailure
from collider.notify import Notifier
from collider.paths import LOG_PREFIX
from collider.tasks import Body, Failure, RunResult

logger = logging.getLogger(__name__)

UNIT_LABELS = {
    "jinja": "Jinja",
    "sass": "Sass",
    "esbuild": "esbuild",
    "assets": "assets",
    "gh-pages": "deploy",
}


class ErrorIsolation:
    """Turn task failures into reported RunResults instead of crashes.

    Setup errors (config, registry, watch) are not absorbed: they pass
    through so the command aborts.
    """

    def __init__(
        self,
        reporter: Reporter,
        notifier: Notifier,
        labels: dict[str, str] | None = None,
    ):
        self.reporter = reporter
        self.notifier = notifier
        self.labels = dict(UNIT_LABELS if labels is None else labels)

    def classify(self, unit: str) -> str | None:
        return self.labels.get(unit)

    def notification_message(self, unit: str) -> str:
        label = self.classify(unit)
        if label is None:
            return "There was an error. See Log."
        return f"There was an error with {label}. See Log."

    def report(self, failure: Failure):
        try:
            self.notifier.notify(LOG_PREFIX, self.notification_message(failure.unit))
        except Exception:
            logger.debug("Notifier raised", exc_info=True)
        self.reporter.error(failure.message)

    def guard(self, name: str, body: Body) -> RunResult:
        """Run a task body; failures come back as a failed RunResult."""
        try:
            result = body()
        except TransformFailure as exc:
            result = RunResult.failed(name, exc.unit, exc.message)
        except FATAL_ERRORS:
            raise
        except Exception as exc:
            logger.debug("Task %s raised", name, exc_info=True)
            result = RunResult.failed(name, name, f"{type(exc).__name__}: {exc}")

        if result is None:
            return RunResult.success(name)
        for failure in result.failures:
            self.report(failure)
        return result.renamed(name)
