from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class CommandResult:
    command: str | list[str]
    returncode: int
    stdout: str
    stderr: str


def run_command(
    command: str | Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
) -> CommandResult:
    """Launch a command and wait for it.

    A string goes through the shell, a list of arguments does not.
    """
    shell = isinstance(command, str)
    args = command if shell else list(command)
    result = subprocess.run(
        args,
        shell=shell,
        cwd=cwd or None,
        env={**os.environ, **(env or {})},
        capture_output=True,
        text=True,
    )
    return CommandResult(args, result.returncode, result.stdout, result.stderr)
