from .loader import build_runner, load_project
from .types import ConfigError, ProjectConfig, TaskConfig, UnsupportedConfigFormatError

__all__ = [
    "load_project",
    "build_runner",
    "ProjectConfig",
    "TaskConfig",
    "ConfigError",
    "UnsupportedConfigFormatError",
]
