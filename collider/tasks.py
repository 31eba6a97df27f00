"""Tasks, composites and the task registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Protocol, Union

from collider.errors import DuplicateTaskError, UnknownTaskError


@dataclass(frozen=True)
class Failure:
    unit: str
    message: str


@dataclass(frozen=True)
class RunResult:
    """Outcome of one task or composite run. Empty failures means success."""

    name: str
    failures: tuple[Failure, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures

    @classmethod
    def success(cls, name: str) -> "RunResult":
        return cls(name=name)

    @classmethod
    def failed(cls, name: str, unit: str, message: str) -> "RunResult":
        return cls(name=name, failures=(Failure(unit, message),))

    def renamed(self, name: str) -> "RunResult":
        return RunResult(name=name, failures=self.failures)


class TransformUnit(Protocol):
    """A compile step: reads sources, writes artifacts under output_dir."""

    name: str
    label: str

    def invoke(self, sources, output_dir: Path, options) -> RunResult: ...


Body = Callable[[], Union[RunResult, None]]


@dataclass(frozen=True)
class Composite:
    """An ordered group of units run in series or in parallel."""

    mode: str
    members: tuple["Unit", ...]
    name: str = ""

    @property
    def label(self) -> str:
        if self.name:
            return self.name
        inner = ", ".join(member_name(m) for m in self.members)
        return f"<{self.mode}>({inner})"


@dataclass(frozen=True)
class Task:
    name: str
    body: Union[Body, Composite]
    requires: tuple[str, ...] = ()
    description: str = ""


Unit = Union[str, Task, Composite]

SERIES = "series"
PARALLEL = "parallel"


def member_name(unit: Unit) -> str:
    if isinstance(unit, str):
        return unit
    if isinstance(unit, Task):
        return unit.name
    return unit.label


def series(*units: Unit, name: str = "") -> Composite:
    """Run members one after another, stopping at the first failure."""
    return Composite(mode=SERIES, members=tuple(units), name=name)


def parallel(*units: Unit, name: str = "") -> Composite:
    """Run members concurrently; every member runs to completion."""
    return Composite(mode=PARALLEL, members=tuple(units), name=name)


@dataclass
class TaskRegistry:
    _tasks: dict[str, Task] = field(default_factory=dict)

    def register(
        self,
        name: str,
        body: Union[Body, Composite],
        requires: tuple[str, ...] = (),
        description: str = "",
    ) -> Task:
        if name in self._tasks:
            raise DuplicateTaskError(name)
        task = Task(name=name, body=body, requires=tuple(requires), description=description)
        self._tasks[name] = task
        return task

    def lookup(self, name: str) -> Task:
        try:
            return self._tasks[name]
        except KeyError:
            raise UnknownTaskError(name) from None

    def __contains__(self, name: str) -> bool:
        return name in self._tasks

    def names(self) -> list[str]:
        return sorted(self._tasks)

    def validate(self):
        """Check every task reference resolves. Raises UnknownTaskError."""
        for task in self._tasks.values():
            for name in task.requires:
                self.lookup(name)
            if isinstance(task.body, Composite):
                self._validate_composite(task.body)

    def _validate_composite(self, composite: Composite):
        for member in composite.members:
            if isinstance(member, str):
                self.lookup(member)
            elif isinstance(member, Composite):
                self._validate_composite(member)
            else:
                for name in member.requires:
                    self.lookup(name)
