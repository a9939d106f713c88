from __future__ import annotations

import time
from typing import Any, Callable

from taskchain.graph import PlanError, Planner
from taskchain.registry import TaskDef, TaskRegistry

from .outcome import normalize_outcome
from .types import (
    ERROR,
    Error,
    Event,
    Outcome,
    ResultEntry,
    RunnerEnd,
    RunnerStart,
    RunReport,
    Skip,
    TaskEnd,
    TaskStart,
)

Clock = Callable[[], float]
EventCallback = Callable[[Event], Any]


class Executor:
    def __init__(
        self,
        registry: TaskRegistry,
        planner: Planner,
        *,
        clock: Clock | None = time.monotonic,
    ):
        self.registry = registry
        self.planner = planner
        self.clock = clock

    def run(
        self,
        requested: list[str],
        context: Any,
        *,
        dry_run: bool = False,
        fail_fast: bool = False,
        on_event: EventCallback | None = None,
    ) -> tuple[bool, RunReport | PlanError]:
        try:
            order = self.planner.resolve(requested)
        except PlanError as exc:
            return False, exc

        def emit(event: Event) -> None:
            if on_event is not None:
                on_event(event)

        report = RunReport(list(requested), list(order), total=len(order))
        emit(RunnerStart(report.requested, report.plan))

        for index, name in enumerate(order, start=1):
            task = self.registry.get(name)
            emit(TaskStart(name, index, len(order)))

            t0 = self._now()
            if dry_run:
                outcome: Outcome = Skip("dry_run")
            else:
                outcome = self._run_task(task, context, report)
            entry = ResultEntry.from_outcome(name, outcome, self._elapsed(t0))

            report.record(entry)
            emit(TaskEnd(name, entry.status, entry.duration, entry))

            if entry.status == ERROR and fail_fast:
                break

        emit(RunnerEnd(report.ok, report.failed, report.skipped, report.results))
        return report.ok, report

    def _run_task(self, task: TaskDef, context: Any, report: RunReport) -> Outcome:
        if task.when is not None:
            try:
                can_run = bool(task.when(context, report))
            except Exception as exc:
                return Error(f"when_error: {_describe(exc)}")
            if not can_run:
                return Skip("when_false")

        try:
            return normalize_outcome(task.body(context, report))
        except Exception as exc:
            return Error(_describe(exc))

    def _now(self) -> float | None:
        if self.clock is None:
            return None
        try:
            return self.clock()
        except Exception:
            return None

    def _elapsed(self, t0: float | None) -> float | None:
        if t0 is None:
            return None
        t1 = self._now()
        if t1 is None:
            return None
        return t1 - t0


def _describe(exc: BaseException) -> str:
    message = str(exc)
    return message if message else type(exc).__name__
