"""Map filesystem changes to rebuild actions, one run at a time per binding."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from collider.errors import WatchSetupFailure
from collider.sources import SourceSet
from collider.tasks import RunResult, Unit

logger = logging.getLogger(__name__)


class BindingState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PENDING = "pending"


@dataclass(frozen=True)
class ChangeEvent:
    path: Path


@dataclass(frozen=True)
class WatchBinding:
    name: str
    sources: tuple[SourceSet, ...]
    action: Unit

    def matches(self, path: Path) -> bool:
        return any(source.matches(path) for source in self.sources)

    def roots(self) -> list[Path]:
        roots: list[Path] = []
        for source in self.sources:
            for root in source.roots:
                if root not in roots:
                    roots.append(root)
        return roots


class WatchDispatcher:
    """Run each binding's action in the background when its files change.

    A change while the action is running moves the binding to PENDING;
    when the run ends the action runs exactly once more, however many
    events arrived meanwhile.
    """

    def __init__(
        self,
        run_action: Callable[[Unit], RunResult],
        on_result: Callable[[WatchBinding, RunResult], None] | None = None,
        on_transition: Callable[[str, BindingState, BindingState], None] | None = None,
        max_workers: int | None = None,
    ):
        self.run_action = run_action
        self.on_result = on_result
        self.on_transition = on_transition
        self._bindings: dict[str, WatchBinding] = {}
        self._states: dict[str, BindingState] = {}
        self._runs: dict[str, int] = {}
        self._cond = threading.Condition()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="collider-watch"
        )

    @property
    def bindings(self) -> list[WatchBinding]:
        return list(self._bindings.values())

    def add(self, binding: WatchBinding):
        if binding.name in self._bindings:
            raise WatchSetupFailure(f"Watch binding '{binding.name}' already exists")
        for source in binding.sources:
            source.check(WatchSetupFailure)
        with self._cond:
            self._bindings[binding.name] = binding
            self._states[binding.name] = BindingState.IDLE
            self._runs[binding.name] = 0

    def state(self, name: str) -> BindingState:
        with self._cond:
            return self._states[name]

    def runs(self, name: str) -> int:
        with self._cond:
            return self._runs[name]

    def dispatch(self, event: ChangeEvent) -> list[str]:
        """Trigger every binding whose sources match the changed path."""
        path = Path(event.path).resolve()
        triggered = [b.name for b in self.bindings if b.matches(path)]
        for name in triggered:
            self.trigger(name, path)
        if not triggered:
            logger.debug("No binding for %s", path)
        return triggered

    def trigger(self, name: str, path: Path | None = None):
        with self._cond:
            binding = self._bindings[name]
            state = self._states[name]
            if state is BindingState.IDLE:
                self._set_state(name, BindingState.RUNNING)
                self._executor.submit(self._run, binding)
            elif state is BindingState.RUNNING:
                self._set_state(name, BindingState.PENDING)
            else:
                logger.debug("%s already pending, coalesced %s", name, path)

    def _set_state(self, name: str, state: BindingState):
        old = self._states[name]
        self._states[name] = state
        logger.debug("%s: %s -> %s", name, old.value, state.value)
        if self.on_transition is not None:
            self.on_transition(name, old, state)
        self._cond.notify_all()

    def _run(self, binding: WatchBinding):
        while True:
            try:
                result = self.run_action(binding.action)
            except Exception as exc:
                logger.exception("Watch action %s crashed", binding.name)
                result = RunResult.failed(binding.name, binding.name, str(exc))

            with self._cond:
                self._runs[binding.name] += 1

            if self.on_result is not None:
                try:
                    self.on_result(binding, result)
                except Exception:
                    logger.exception("Result handler for %s failed", binding.name)

            with self._cond:
                if self._states[binding.name] is BindingState.PENDING:
                    self._set_state(binding.name, BindingState.RUNNING)
                    continue
                self._set_state(binding.name, BindingState.IDLE)
                return

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until every binding is idle. Returns False on timeout."""
        with self._cond:
            return self._cond.wait_for(
                lambda: all(s is BindingState.IDLE for s in self._states.values()),
                timeout=timeout,
            )

    def close(self):
        self._executor.shutdown(wait=True)
