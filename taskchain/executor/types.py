from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

OK = "ok"
SKIP = "skip"
ERROR = "error"


@dataclass(frozen=True)
class Ok:
    value: Any = None
    status: ClassVar[str] = OK


@dataclass(frozen=True)
class Skip:
    reason: str | None = None
    value: Any = None
    status: ClassVar[str] = SKIP


@dataclass(frozen=True)
class Error:
    message: str | None = None
    value: Any = None
    status: ClassVar[str] = ERROR


Outcome = Ok | Skip | Error


@dataclass(frozen=True)
class ResultEntry:
    name: str
    status: str
    reason: str | None = None
    error: str | None = None
    duration: float | None = None
    result: Any = None

    @classmethod
    def from_outcome(
        cls, name: str, outcome: Outcome, duration: float | None
    ) -> ResultEntry:
        match outcome:
            case Skip(reason=reason, value=value):
                return cls(name, SKIP, reason=reason, duration=duration, result=value)
            case Error(message=message, value=value):
                return cls(name, ERROR, error=message, duration=duration, result=value)
            case Ok(value=value):
                return cls(name, OK, duration=duration, result=value)
            case _:
                raise AssertionError("Unreachable")


@dataclass
class RunReport:
    requested: list[str]
    plan: list[str]
    results: list[ResultEntry] = field(default_factory=list)
    total: int = 0
    passed: int = 0
    skipped: int = 0
    failed: int = 0
    ok: bool = True

    def record(self, entry: ResultEntry) -> None:
        self.results.append(entry)
        if entry.status == OK:
            self.passed += 1
        elif entry.status == SKIP:
            self.skipped += 1
        else:
            self.failed += 1
            self.ok = False


@dataclass(frozen=True)
class RunnerStart:
    requested: list[str]
    plan: list[str]
    kind: ClassVar[str] = "runner_start"


@dataclass(frozen=True)
class TaskStart:
    name: str
    index: int
    total: int
    kind: ClassVar[str] = "task_start"


@dataclass(frozen=True)
class TaskEnd:
    name: str
    status: str
    duration: float | None
    result: ResultEntry
    kind: ClassVar[str] = "task_end"


@dataclass(frozen=True)
class RunnerEnd:
    ok: bool
    failed: int
    skipped: int
    results: list[ResultEntry]
    kind: ClassVar[str] = "runner_end"


Event = RunnerStart | TaskStart | TaskEnd | RunnerEnd
