from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class TaskConfig:
    id: str
    command: str | list[str]
    deps: list[str] = field(default_factory=list)
    desc: str | None = None
    env: dict[str, str] = field(default_factory=dict)
    working_dir: str | None = None
    when: str | list[str] | None = None


@dataclass
class ProjectConfig:
    tasks: dict[str, TaskConfig]
    default: str | None = None

    def __iter__(self):
        yield from self.tasks.values()

    def __len__(self):
        return len(self.tasks)


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class UnsupportedConfigFormatError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)
