from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass(frozen=True)
class TaskDef:
    name: str
    body: Callable[[Any, Any], Any]
    deps: tuple[str, ...]
    when: Callable[[Any, Any], Any] | None
    desc: str | None
    index: int


@dataclass(frozen=True)
class TaskInfo:
    name: str
    desc: str | None
    deps: list[str] = field(default_factory=list)


class DefinitionError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class DuplicateTaskError(DefinitionError):
    def __init__(self, name: str):
        super().__init__(f"task already defined: {name}")
        self.name = name
