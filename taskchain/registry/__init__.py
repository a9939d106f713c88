from .registry import TaskRegistry
from .types import DefinitionError, DuplicateTaskError, TaskDef, TaskInfo

__all__ = ["TaskRegistry", "TaskDef", "TaskInfo", "DefinitionError", "DuplicateTaskError"]
