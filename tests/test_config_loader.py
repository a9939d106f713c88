from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from taskchain.config.loader import build_runner, load_project
from taskchain.config.types import ConfigError, UnsupportedConfigFormatError
from taskchain.graph import UnknownDepError


# -------------------------
# Helpers
# -------------------------


def write_text(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def write_json(path: Path, obj: object) -> Path:
    path.write_text(json.dumps(obj), encoding="utf-8")
    return path


def py(code: str) -> list[str]:
    return [sys.executable, "-c", code]


# -------------------------
# Basic file/path errors
# -------------------------


def test_missing_file_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_project(tmp_path / "missing.yaml")


def test_path_is_dir_raises_config_error(tmp_path: Path) -> None:
    d = tmp_path / "dir"
    d.mkdir()
    with pytest.raises(ConfigError):
        load_project(d)


def test_unsupported_extension_raises_unsupported_format(tmp_path: Path) -> None:
    p = write_text(tmp_path / "config.txt", "tasks: {}")
    with pytest.raises(UnsupportedConfigFormatError):
        load_project(p)


# -------------------------
# Parse errors are wrapped
# -------------------------


@pytest.mark.parametrize(
    "ext, content",
    [
        (".yaml", "tasks: [\n"),
        (".toml", "tasks = {"),
        (".json", '{"tasks": '),
    ],
)
def test_invalid_syntax_is_wrapped_as_config_error(
    tmp_path: Path, ext: str, content: str
) -> None:
    p = write_text(tmp_path / f"config{ext}", content)
    with pytest.raises(ConfigError):
        load_project(p)


# -------------------------
# Top-level shape validation
# -------------------------


@pytest.mark.parametrize(
    "ext, content",
    [
        (".yaml", "[]\n"),
        (".yaml", "null\n"),
        (".json", "[]"),
        (".json", "null"),
    ],
)
def test_top_level_not_mapping_raises(tmp_path: Path, ext: str, content: str) -> None:
    p = write_text(tmp_path / f"config{ext}", content)
    with pytest.raises(ConfigError):
        load_project(p)


def test_missing_tasks_key_raises(tmp_path: Path) -> None:
    p = write_text(tmp_path / "config.yaml", "default: a\n")
    with pytest.raises(ConfigError):
        load_project(p)


def test_unknown_top_level_key_raises(tmp_path: Path) -> None:
    p = write_text(
        tmp_path / "config.yaml",
        "tasks:\n  a:\n    command: echo a\nextra: 1\n",
    )
    with pytest.raises(ConfigError):
        load_project(p)


@pytest.mark.parametrize(
    "ext, content",
    [
        (".yaml", "tasks: []\n"),
        (".yaml", "tasks: null\n"),
        (".json", '{"tasks": []}'),
        (".toml", 'tasks = "nope"\n'),
        (".toml", "tasks = 123\n"),
    ],
)
def test_tasks_not_mapping_raises(tmp_path: Path, ext: str, content: str) -> None:
    p = write_text(tmp_path / f"config{ext}", content)
    with pytest.raises(ConfigError):
        load_project(p)


@pytest.mark.parametrize(
    "ext, content",
    [
        (".yaml", "tasks: {}\n"),
        (".json", '{"tasks": {}}'),
        (".toml", "[tasks]\n"),
    ],
)
def test_tasks_empty_raises(tmp_path: Path, ext: str, content: str) -> None:
    p = write_text(tmp_path / f"config{ext}", content)
    with pytest.raises(ConfigError):
        load_project(p)


@pytest.mark.parametrize("default", ["3", '"  "'])
def test_bad_default_raises(tmp_path: Path, default: str) -> None:
    p = write_text(
        tmp_path / "config.yaml",
        f"default: {default}\ntasks:\n  a:\n    command: echo a\n",
    )
    with pytest.raises(ConfigError):
        load_project(p)


# -------------------------
# Task id validation
# -------------------------


def test_task_id_not_string_yaml_raises(tmp_path: Path) -> None:
    p = write_text(
        tmp_path / "config.yaml",
        "tasks:\n  1:\n    command: echo hi\n",
    )
    with pytest.raises(ConfigError):
        load_project(p)


def test_task_id_empty_after_strip_raises(tmp_path: Path) -> None:
    p = write_text(
        tmp_path / "config.yaml",
        'tasks:\n  "   ":\n    command: echo hi\n',
    )
    with pytest.raises(ConfigError):
        load_project(p)


def test_duplicate_task_id_after_normalization_raises(tmp_path: Path) -> None:
    p = write_text(
        tmp_path / "config.yaml",
        "tasks:\n"
        "  build:\n"
        "    command: echo 1\n"
        '  " build ":\n'
        "    command: echo 2\n",
    )
    with pytest.raises(ConfigError):
        load_project(p)


# -------------------------
# Task fields validation
# -------------------------


def test_task_fields_not_mapping_raises(tmp_path: Path) -> None:
    p = write_text(tmp_path / "config.yaml", "tasks:\n  build: []\n")
    with pytest.raises(ConfigError):
        load_project(p)


def test_unknown_task_field_raises(tmp_path: Path) -> None:
    p = write_text(
        tmp_path / "config.yaml",
        "tasks:\n  build:\n    command: echo hi\n    nope: 1\n",
    )
    with pytest.raises(ConfigError):
        load_project(p)


def test_missing_command_raises(tmp_path: Path) -> None:
    p = write_text(tmp_path / "config.yaml", "tasks:\n  build:\n    deps: []\n")
    with pytest.raises(ConfigError):
        load_project(p)


@pytest.mark.parametrize("command", ["123", '"   "', "[]", "[echo, 1]"])
def test_bad_command_raises(tmp_path: Path, command: str) -> None:
    p = write_text(
        tmp_path / "config.yaml", f"tasks:\n  build:\n    command: {command}\n"
    )
    with pytest.raises(ConfigError):
        load_project(p)


def test_command_list_is_kept(tmp_path: Path) -> None:
    p = write_text(
        tmp_path / "config.yaml",
        "tasks:\n  build:\n    command: [make, -j4]\n",
    )
    proj = load_project(p)
    assert proj.tasks["build"].command == ["make", "-j4"]


@pytest.mark.parametrize(
    "deps", ["no", "[1]", '["   "]', "[build]"], ids=["not-list", "int", "empty", "self"]
)
def test_bad_deps_raise(tmp_path: Path, deps: str) -> None:
    p = write_text(
        tmp_path / "config.yaml",
        f"tasks:\n  build:\n    command: echo hi\n    deps: {deps}\n",
    )
    with pytest.raises(ConfigError):
        load_project(p)


def test_duplicate_deps_are_ignored_and_preserve_order(tmp_path: Path) -> None:
    p = write_text(
        tmp_path / "config.yaml",
        "tasks:\n"
        "  a:\n"
        "    command: echo a\n"
        '    deps: [c, " c ", b, c]\n'
        "  b:\n"
        "    command: echo b\n"
        "  c:\n"
        "    command: echo c\n",
    )
    proj = load_project(p)
    assert proj.tasks["a"].deps == ["c", "b"]


def test_unknown_dependency_is_left_to_the_planner(tmp_path: Path) -> None:
    p = write_text(
        tmp_path / "config.yaml",
        "tasks:\n  a:\n    command: echo a\n    deps: [b]\n",
    )
    runner = build_runner(load_project(p))

    ok, err = runner.plan("a")

    assert ok is False
    assert isinstance(err, UnknownDepError)
    assert err.dep == "b"


@pytest.mark.parametrize(
    "env",
    ["[]", "\n      1: x", '\n      "   ": x', "\n      KEY: 1"],
    ids=["not-mapping", "int-key", "empty-key", "int-value"],
)
def test_bad_env_raises(tmp_path: Path, env: str) -> None:
    p = write_text(
        tmp_path / "config.yaml",
        f"tasks:\n  a:\n    command: echo a\n    env: {env}\n",
    )
    with pytest.raises(ConfigError):
        load_project(p)


def test_env_key_is_stripped_value_preserved(tmp_path: Path) -> None:
    p = write_text(
        tmp_path / "config.yaml",
        'tasks:\n  a:\n    command: echo a\n    env:\n      " KEY ": "  v  "\n',
    )
    proj = load_project(p)
    assert proj.tasks["a"].env == {"KEY": "  v  "}


@pytest.mark.parametrize("working_dir", ["1", '"   "'])
def test_bad_working_dir_raises(tmp_path: Path, working_dir: str) -> None:
    p = write_text(
        tmp_path / "config.yaml",
        f"tasks:\n  a:\n    command: echo a\n    working_dir: {working_dir}\n",
    )
    with pytest.raises(ConfigError):
        load_project(p)


@pytest.mark.parametrize("field, value", [("desc", "1"), ("when", "1"), ("when", '""')])
def test_bad_desc_or_when_raises(tmp_path: Path, field: str, value: str) -> None:
    p = write_text(
        tmp_path / "config.yaml",
        f"tasks:\n  a:\n    command: echo a\n    {field}: {value}\n",
    )
    with pytest.raises(ConfigError):
        load_project(p)


# -------------------------
# Happy paths (all formats)
# -------------------------


def test_valid_yaml_loads_in_file_order(tmp_path: Path) -> None:
    p = write_text(
        tmp_path / "config.yaml",
        "default: build\n"
        "tasks:\n"
        "  test:\n"
        "    command: echo test\n"
        "  build:\n"
        "    command: echo build\n"
        "    desc: Build everything\n"
        "    deps: [test]\n"
        "    when: test -d src\n"
        "    env:\n"
        "      KEY: value\n",
    )
    proj = load_project(p)
    build = proj.tasks["build"]

    assert proj.default == "build"
    assert list(proj.tasks) == ["test", "build"]
    assert build.deps == ["test"]
    assert build.desc == "Build everything"
    assert build.when == "test -d src"
    assert build.env == {"KEY": "value"}


def test_valid_json_loads(tmp_path: Path) -> None:
    obj = {
        "tasks": {
            "b": {"command": "echo b", "deps": ["a"]},
            "a": {"command": ["echo", "a"]},
        }
    }
    p = write_json(tmp_path / "config.json", obj)
    proj = load_project(p)

    assert proj.default is None
    assert list(proj.tasks) == ["b", "a"]
    assert proj.tasks["b"].deps == ["a"]


def test_valid_toml_loads(tmp_path: Path) -> None:
    p = write_text(
        tmp_path / "config.toml",
        'default = "b"\n'
        "\n"
        "[tasks.a]\n"
        'command = "echo a"\n'
        "\n"
        "[tasks.b]\n"
        'command = "echo b"\n'
        'deps = ["a"]\n',
    )
    proj = load_project(p)

    assert proj.default == "b"
    assert set(proj.tasks.keys()) == {"a", "b"}
    assert proj.tasks["b"].deps == ["a"]


# -------------------------
# Runner built from a task file
# -------------------------


def test_build_runner_runs_commands(tmp_path: Path) -> None:
    log = tmp_path / "log.txt"
    p = write_json(
        tmp_path / "config.json",
        {
            "default": "b",
            "tasks": {
                "a": {"command": py(f"open(r'{log}','a').write('a\\n')"), "desc": "first"},
                "b": {"command": py(f"open(r'{log}','a').write('b\\n')"), "deps": ["a"]},
            },
        },
    )
    runner = build_runner(load_project(p))

    ok, rep = runner.run()

    assert ok
    assert runner.list()[0].desc == "first"
    assert log.read_text(encoding="utf-8").splitlines() == ["a", "b"]
    assert rep.results[0].result.returncode == 0


def test_build_runner_reports_exit_codes(tmp_path: Path) -> None:
    p = write_json(
        tmp_path / "config.json",
        {"tasks": {"fail": {"command": py("print('partial'); raise SystemExit(5)")}}},
    )
    runner = build_runner(load_project(p))

    ok, rep = runner.run("fail")
    entry = rep.results[0]

    assert ok is False
    assert entry.status == "error"
    assert entry.error == "exit code 5"
    assert entry.result.stdout == "partial\n"


def test_build_runner_when_command_decides(tmp_path: Path) -> None:
    p = write_json(
        tmp_path / "config.json",
        {
            "tasks": {
                "never": {"command": py("raise SystemExit(9)"), "when": py("raise SystemExit(1)")},
                "always": {"command": py("pass"), "when": py("raise SystemExit(0)")},
            }
        },
    )
    runner = build_runner(load_project(p))

    ok, rep = runner.run(["never", "always"])

    assert ok
    assert [(e.name, e.status, e.reason) for e in rep.results] == [
        ("never", "skip", "when_false"),
        ("always", "ok", None),
    ]


def test_build_runner_applies_env_and_working_dir(tmp_path: Path) -> None:
    wd = tmp_path / "wd"
    wd.mkdir()
    p = write_json(
        tmp_path / "config.json",
        {
            "tasks": {
                "w": {
                    "command": py(
                        "import os; open('out.txt','w').write(os.environ['TC_VALUE'])"
                    ),
                    "env": {"TC_VALUE": "ok"},
                    "working_dir": str(wd),
                }
            }
        },
    )
    runner = build_runner(load_project(p))

    ok, _ = runner.run("w")

    assert ok
    assert (wd / "out.txt").read_text(encoding="utf-8") == "ok"


def test_build_runner_keyword_overrides(tmp_path: Path) -> None:
    p = write_json(tmp_path / "config.json", {"default": "a", "tasks": {"a": {"command": "echo a"}}})
    runner = build_runner(load_project(p), default=None)

    assert runner.plan() == (True, [])
    assert runner.default is None
