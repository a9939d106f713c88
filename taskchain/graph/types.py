from __future__ import annotations

from typing import Any


class PlanError(Exception):
    code = "plan_error"

    def __init__(self, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, **self.extra}


class UnknownTaskError(PlanError):
    code = "unknown_task"

    def __init__(self, name: str):
        super().__init__(f"unknown task: {name}", name=name)
        self.name = name


class UnknownDepError(PlanError):
    code = "unknown_dep"

    def __init__(self, name: str, dep: str):
        super().__init__(f"unknown dependency: {dep} (required by {name})", name=name, dep=dep)
        self.name = name
        self.dep = dep


class CycleError(PlanError):
    code = "cycle"

    def __init__(self, cycle: list[str]):
        super().__init__(
            "dependency cycle detected: " + " -> ".join(cycle), name=cycle[-1]
        )
        self.name = cycle[-1]
        self.cycle = cycle
