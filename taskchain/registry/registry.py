from __future__ import annotations

from typing import Any, Callable, Sequence

from .types import DefinitionError, DuplicateTaskError, TaskDef, TaskInfo


class TaskRegistry:
    """Named task definitions, kept in the order they were defined."""

    def __init__(self) -> None:
        self._tasks: dict[str, TaskDef] = {}
        self._seq = 0

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def define(
        self,
        name: str,
        body: Callable[[Any, Any], Any],
        *,
        deps: Sequence[str] | None = None,
        desc: str | None = None,
        when: Callable[[Any, Any], Any] | None = None,
    ) -> TaskRegistry:
        if not isinstance(name, str) or len(name) < 1:
            raise DefinitionError("task name must be a non-empty string")

        if not callable(body):
            raise DefinitionError(f"{name}: task body must be callable")

        if name in self._tasks:
            raise DuplicateTaskError(name)

        deps_tuple = _check_deps(name, deps)

        if desc is not None and not isinstance(desc, str):
            raise DefinitionError(f"{name}: desc must be a string")

        if when is not None and not callable(when):
            raise DefinitionError(f"{name}: when must be callable")

        self._seq += 1
        self._tasks[name] = TaskDef(name, body, deps_tuple, when, desc, self._seq)
        return self

    def get(self, name: str) -> TaskDef | None:
        return self._tasks.get(name)

    def list(self) -> list[TaskInfo]:
        return [TaskInfo(t.name, t.desc, list(t.deps)) for t in self._tasks.values()]


def _check_deps(name: str, deps: Sequence[str] | None) -> tuple[str, ...]:
    if deps is None:
        return ()

    if not isinstance(deps, (list, tuple)):
        raise DefinitionError(f"{name}: deps must be a list of task names")

    for dep in deps:
        if not isinstance(dep, str) or len(dep) < 1:
            raise DefinitionError(f"{name}: deps must contain non-empty strings")

    return tuple(deps)
