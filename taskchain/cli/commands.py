from __future__ import annotations

import argparse
import logging
import sys

from taskchain.config import ConfigError, build_runner, load_project
from taskchain.events import LoggingObserver
from taskchain.executor import RunReport
from taskchain.graph import PlanError
from taskchain.registry import DefinitionError
from taskchain.runner import TaskRunner

from .args import build_parser


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        _setup_logging(args.verbose)

        match args.command:
            case "run":
                return cmd_run(args)
            case "list":
                return cmd_list(args)
            case "plan":
                return cmd_plan(args)
            case _:
                return 2

    except (ConfigError, PlanError, DefinitionError) as exc:
        print(str(exc), file=sys.stderr)
        return 2

    except KeyboardInterrupt:
        return 130


def main() -> None:
    sys.exit(run_cli())


def cmd_run(args: argparse.Namespace) -> int:
    runner = _load_runner(args)
    on_event = LoggingObserver() if args.verbose else None
    ok, report = runner.run(
        args.targets or None,
        {},
        dry_run=args.dry_run,
        fail_fast=args.fail_fast,
        on_event=on_event,
    )
    if isinstance(report, PlanError):
        raise report

    _print_report(report)
    return 0 if ok else 1


def cmd_list(args: argparse.Namespace) -> int:
    runner = _load_runner(args)
    for info in runner.list():
        line = f"{info.name}: {' '.join(info.deps)}".rstrip()
        if info.desc:
            line += f"  # {info.desc}"
        print(line)
    return 0


def cmd_plan(args: argparse.Namespace) -> int:
    runner = _load_runner(args)
    for name in runner.resolve(args.targets or None):
        print(name)
    return 0


def _load_runner(args: argparse.Namespace) -> TaskRunner:
    project = load_project(args.config)
    return build_runner(project)


def _setup_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _print_report(report: RunReport) -> None:
    for entry in report.results:
        match entry.status:
            case "ok":
                duration = "" if entry.duration is None else f", {entry.duration:.3f}s"
                print(f"OK {entry.name}{duration}")
            case "skip":
                print(f"SKIP {entry.name} ({entry.reason})")
            case _:
                print(f"FAIL {entry.name}: {entry.error}")
