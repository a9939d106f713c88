from .planner import Planner, normalize_requested
from .types import CycleError, PlanError, UnknownDepError, UnknownTaskError

__all__ = [
    "Planner",
    "normalize_requested",
    "PlanError",
    "UnknownTaskError",
    "UnknownDepError",
    "CycleError",
]
