import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Mapping

import yaml

from taskchain.executor import Error, Ok
from taskchain.process import run_command
from taskchain.runner import TaskRunner

from .types import ConfigError, ProjectConfig, TaskConfig, UnsupportedConfigFormatError

logger = logging.getLogger(__name__)


def load_project(path: str | Path) -> ProjectConfig:
    pure_path = Path(path).expanduser().resolve()

    if not pure_path.exists():
        raise ConfigError(f"Config file not found: {pure_path}")

    if not pure_path.is_file():
        raise ConfigError(f"Config path is not a file: {pure_path}")

    fmt = _detect_format(pure_path)
    raw_file = _parse_file(pure_path, fmt)
    project = _build_project_config(raw_file)
    logger.debug("loaded %d tasks from %s", len(project), pure_path)
    return project


def build_runner(project: ProjectConfig, **kwargs: Any) -> TaskRunner:
    kwargs.setdefault("default", project.default)
    runner = TaskRunner(**kwargs)
    for task in project:
        runner.define(
            task.id,
            _command_body(task),
            deps=task.deps,
            desc=task.desc,
            when=_command_when(task) if task.when is not None else None,
        )
    return runner


def _command_body(task: TaskConfig):
    def body(ctx, run):
        logger.debug("%s: running %r", task.id, task.command)
        result = run_command(task.command, env=task.env, cwd=task.working_dir)
        if result.returncode != 0:
            return Error(f"exit code {result.returncode}", result)
        return Ok(result)

    return body


def _command_when(task: TaskConfig):
    def when(ctx, run):
        result = run_command(task.when, env=task.env, cwd=task.working_dir)
        logger.debug("%s: condition exited with %d", task.id, result.returncode)
        return result.returncode == 0

    return when


def _detect_format(path: Path) -> str:
    fmt = path.suffix
    match fmt:
        case ".yaml" | ".yml":
            return "yaml"
        case ".toml":
            return "toml"
        case ".json":
            return "json"
        case _:
            raise UnsupportedConfigFormatError(
                f"Non supported file extension: {fmt}\n Expected format: .yml/.yaml, .toml, .json"
            )


def _parse_file(path: Path, fmt: str) -> Mapping[str, Any]:
    match fmt:
        case "yaml":
            raw_file = _parse_yaml(path)
        case "toml":
            raw_file = _parse_toml(path)
        case "json":
            raw_file = _parse_json(path)
        case _:
            raise AssertionError("Unreachable")

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _parse_yaml(path: Path) -> Any:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: invalid YAML") from exc


def _parse_toml(path: Path) -> Any:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: invalid TOML") from exc


def _parse_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid JSON") from exc


def _build_project_config(raw: Mapping[str, Any]) -> ProjectConfig:
    tasks = {}

    for key in raw.keys():
        if key not in ("tasks", "default"):
            raise ConfigError(f"Can't process top-level field: {key}")

    if "tasks" not in raw:
        raise ConfigError("Missing 'tasks' field")

    if not isinstance(raw["tasks"], Mapping):
        raise ConfigError(f"'tasks' must be a mapping, got {type(raw['tasks'])}")

    if len(raw["tasks"]) < 1:
        raise ConfigError("There must be at least one task in the config file")

    for task_id, fields in raw["tasks"].items():
        if not isinstance(task_id, str):
            raise ConfigError(f"Task id must be a string, got {type(task_id)}")

        if not isinstance(fields, Mapping):
            raise ConfigError(f"{task_id} must be a mapping")

        task_id_norm = task_id.strip()

        if len(task_id_norm) < 1:
            raise ConfigError("A task id can't be empty")

        if task_id_norm in tasks:
            raise ConfigError(f"Duplicate task id after normalization: {task_id_norm}")

        tasks[task_id_norm] = _build_task_config(task_id_norm, fields)

    default = None
    if "default" in raw:
        if not isinstance(raw["default"], str) or len(raw["default"].strip()) < 1:
            raise ConfigError("'default' must be a non-empty task id")
        default = raw["default"].strip()

    return ProjectConfig(tasks=tasks, default=default)


def _build_task_config(task_id: str, fields: Mapping[str, Any]) -> TaskConfig:
    keys = {"command", "deps", "desc", "env", "working_dir", "when"}
    deps = []
    seen = set()
    env = {}
    desc = None
    working_dir = None
    when = None

    for field in fields.keys():
        if field not in keys:
            raise ConfigError(f"{task_id}: Can't process: {field}")

    if "command" not in fields:
        raise ConfigError(f"{task_id}: missing 'command'")

    command = _build_command(task_id, "command", fields["command"])

    if "deps" in fields:
        if not isinstance(fields["deps"], list):
            raise ConfigError(f"{task_id}: Dependencies should be in a list.")

        for item in fields["deps"]:
            if not isinstance(item, str):
                raise ConfigError(
                    f"{task_id}: {item} should be a string in the dependency list"
                )

            dep = item.strip()

            if len(dep) < 1:
                raise ConfigError(f"{task_id}: A dependency is empty")

            if dep == task_id:
                raise ConfigError(f"{task_id}: A task cannot be self dependent")

            # Repeated deps are listed once, at their first position
            if dep in seen:
                continue

            deps.append(dep)
            seen.add(dep)

    if "desc" in fields:
        if not isinstance(fields["desc"], str):
            raise ConfigError(f"{task_id}: The desc should be a string")

        desc = fields["desc"].strip()

    if "env" in fields:
        if not isinstance(fields["env"], Mapping):
            raise ConfigError(f"{task_id}: Env should be a mapping")

        for key, item in fields["env"].items():
            if not isinstance(key, str):
                raise ConfigError(f"{task_id}: {key} should be a string")

            if len(key.strip()) < 1:
                raise ConfigError(f"{task_id}: A key can't be empty")

            if not isinstance(item, str):
                raise ConfigError(f"{task_id}: {item} should be a string")

            env[key.strip()] = item

    if "working_dir" in fields:
        if not isinstance(fields["working_dir"], str):
            raise ConfigError(f"{task_id}: The working_dir should be a string")

        if len(fields["working_dir"].strip()) < 1:
            raise ConfigError(
                f"{task_id}: Please provide a string or remove this field"
            )

        working_dir = fields["working_dir"].strip()

    if "when" in fields:
        when = _build_command(task_id, "when", fields["when"])

    return TaskConfig(task_id, command, deps, desc, env, working_dir, when)


def _build_command(task_id: str, field: str, value: Any) -> str | list[str]:
    if isinstance(value, str):
        if len(value.strip()) < 1:
            raise ConfigError(f"{task_id}: '{field}' is empty")
        return value.strip()

    if isinstance(value, list):
        if len(value) < 1:
            raise ConfigError(f"{task_id}: '{field}' is empty")
        for arg in value:
            if not isinstance(arg, str):
                raise ConfigError(f"{task_id}: every '{field}' argument should be a string")
        return list(value)

    raise ConfigError(f"{task_id}: '{field}' should be a string or a list of strings")
