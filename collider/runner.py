from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor

from collider.console import Reporter
from collider.isolation import ErrorIsolation
from collider.tasks import SERIES, Composite, RunResult, Task, TaskRegistry, Unit

logger = logging.getLogger(__name__)


class Runner:
    """Execute tasks and composites to completion.

    Series composites stop at the first failing member. Parallel
    composites start every member on its own thread and wait for all of
    them; the result carries every member failure in declaration order.
    """

    def __init__(
        self,
        registry: TaskRegistry,
        isolation: ErrorIsolation,
        reporter: Reporter,
    ):
        self.registry = registry
        self.isolation = isolation
        self.reporter = reporter

    def run(self, unit: Unit) -> RunResult:
        if isinstance(unit, str):
            unit = self.registry.lookup(unit)
        if isinstance(unit, Task):
            return self._run_task(unit)
        if unit.mode == SERIES:
            return self._run_series(unit)
        return self._run_parallel(unit)

    def _run_task(self, task: Task) -> RunResult:
        start = time.monotonic()
        self.reporter.task_started(task.name)
        result = self._run_requires(task)
        if result.ok:
            if isinstance(task.body, Composite):
                result = self.run(task.body).renamed(task.name)
            else:
                result = self.isolation.guard(task.name, task.body)

        elapsed = time.monotonic() - start
        if result.ok:
            self.reporter.task_finished(task.name, elapsed)
        else:
            self.reporter.task_failed(task.name, elapsed)
        return result

    def _run_requires(self, task: Task) -> RunResult:
        for name in task.requires:
            result = self.run(name)
            if not result.ok:
                return result.renamed(task.name)
        return RunResult.success(task.name)

    def _run_series(self, composite: Composite) -> RunResult:
        for member in composite.members:
            result = self.run(member)
            if not result.ok:
                return result.renamed(composite.label)
        return RunResult.success(composite.label)

    def _run_parallel(self, composite: Composite) -> RunResult:
        if not composite.members:
            return RunResult.success(composite.label)

        with ThreadPoolExecutor(
            max_workers=len(composite.members),
            thread_name_prefix="collider-parallel",
        ) as executor:
            futures = [executor.submit(self.run, member) for member in composite.members]

        # Every member has finished here; fatal errors re-raise in member order.
        results = [future.result() for future in futures]
        failures = tuple(failure for result in results for failure in result.failures)
        logger.debug(
            "%s: %d/%d members failed",
            composite.label,
            sum(1 for result in results if not result.ok),
            len(results),
        )
        return RunResult(name=composite.label, failures=failures)
