from .executor import (
    Error,
    Ok,
    ResultEntry,
    RunnerEnd,
    RunnerStart,
    RunReport,
    Skip,
    TaskEnd,
    TaskStart,
    normalize_outcome,
)
from .graph import CycleError, PlanError, UnknownDepError, UnknownTaskError
from .registry import DefinitionError, DuplicateTaskError, TaskDef, TaskInfo, TaskRegistry
from .runner import TaskRunner

__all__ = [
    "TaskRunner",
    "TaskRegistry",
    "TaskDef",
    "TaskInfo",
    "DefinitionError",
    "DuplicateTaskError",
    "PlanError",
    "UnknownTaskError",
    "UnknownDepError",
    "CycleError",
    "Ok",
    "Skip",
    "Error",
    "normalize_outcome",
    "ResultEntry",
    "RunReport",
    "RunnerStart",
    "TaskStart",
    "TaskEnd",
    "RunnerEnd",
]
