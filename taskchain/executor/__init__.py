from .executor import Executor
from .outcome import normalize_outcome
from .types import (
    Error,
    Event,
    Ok,
    Outcome,
    ResultEntry,
    RunnerEnd,
    RunnerStart,
    RunReport,
    Skip,
    TaskEnd,
    TaskStart,
)

__all__ = [
    "Executor",
    "normalize_outcome",
    "Ok",
    "Skip",
    "Error",
    "Outcome",
    "ResultEntry",
    "RunReport",
    "Event",
    "RunnerStart",
    "TaskStart",
    "TaskEnd",
    "RunnerEnd",
]
