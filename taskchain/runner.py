from __future__ import annotations

import time
from collections.abc import Sequence
from typing import Any, Callable

from taskchain.executor import Executor, RunReport
from taskchain.executor.executor import Clock, EventCallback
from taskchain.graph import PlanError, Planner, normalize_requested
from taskchain.registry import TaskDef, TaskInfo, TaskRegistry

Names = str | Sequence[str] | None


class TaskRunner:
    """Define tasks, then plan or run them.

    Each runner owns its own registry. ``default`` is the task used when
    ``plan``/``run`` are called without names; ``on_event`` receives the
    lifecycle events of every run unless a run passes its own callback.
    """

    def __init__(
        self,
        *,
        default: str | None = None,
        on_event: EventCallback | None = None,
        clock: Clock | None = time.monotonic,
    ):
        self.default = default
        self.on_event = on_event
        self.registry = TaskRegistry()
        self.planner = Planner(self.registry)
        self.executor = Executor(self.registry, self.planner, clock=clock)

    def define(
        self,
        name: str,
        body: Callable[[Any, Any], Any],
        *,
        deps: Sequence[str] | None = None,
        desc: str | None = None,
        when: Callable[[Any, Any], Any] | None = None,
    ) -> TaskRunner:
        self.registry.define(name, body, deps=deps, desc=desc, when=when)
        return self

    def task(
        self,
        name: str | None = None,
        *,
        deps: Sequence[str] | None = None,
        desc: str | None = None,
        when: Callable[[Any, Any], Any] | None = None,
    ) -> Callable[[Callable[[Any, Any], Any]], Callable[[Any, Any], Any]]:
        def decorator(fn: Callable[[Any, Any], Any]) -> Callable[[Any, Any], Any]:
            self.define(name or fn.__name__, fn, deps=deps, desc=desc, when=when)
            return fn

        return decorator

    def get(self, name: str) -> TaskDef | None:
        return self.registry.get(name)

    def list(self) -> list[TaskInfo]:
        return self.registry.list()

    def resolve(self, names: Names = None) -> list[str]:
        return self.planner.resolve(normalize_requested(names, self.default))

    def plan(self, names: Names = None) -> tuple[bool, list[str] | PlanError]:
        try:
            return True, self.resolve(names)
        except PlanError as exc:
            return False, exc

    def run(
        self,
        names: Names = None,
        context: Any = None,
        *,
        dry_run: bool = False,
        fail_fast: bool = False,
        on_event: EventCallback | None = None,
    ) -> tuple[bool, RunReport | PlanError]:
        return self.executor.run(
            normalize_requested(names, self.default),
            {} if context is None else context,
            dry_run=dry_run,
            fail_fast=fail_fast,
            on_event=on_event or self.on_event,
        )
