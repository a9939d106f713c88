from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taskchain")

    parser.add_argument(
        "--config",
        default="taskchain.yml",
        help="Path to task file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log run events (-vv for debug output)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
    )

    # run
    run = subparsers.add_parser("run", help="Run tasks")
    run.add_argument(
        "targets",
        nargs="*",
        help="Task names (default: the file's default task)",
    )
    run.add_argument(
        "--dry-run",
        action="store_true",
        help="Walk the plan and mark every task skipped",
    )
    run.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop after the first failing task",
    )

    # list
    subparsers.add_parser("list", help="List tasks")

    # plan
    plan = subparsers.add_parser("plan", help="Show execution order")
    plan.add_argument(
        "targets",
        nargs="*",
        help="Task names (default: the file's default task)",
    )

    return parser
