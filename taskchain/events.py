from __future__ import annotations

import logging

from taskchain.executor import Event, RunnerEnd, RunnerStart, TaskEnd, TaskStart

logger = logging.getLogger(__name__)


class LoggingObserver:
    """Event callback that writes run lifecycle events to a logger."""

    def __init__(self, log: logging.Logger | None = None, level: int = logging.INFO):
        self.logger = log or logger
        self.level = level

    def __call__(self, event: Event) -> None:
        match event:
            case RunnerStart(requested=requested, plan=plan):
                self.logger.log(
                    self.level, "run %s: plan %s", ",".join(requested), " -> ".join(plan)
                )
            case TaskStart(name=name, index=index, total=total):
                self.logger.log(self.level, "[%d/%d] %s", index, total, name)
            case TaskEnd(name=name, status="error", result=entry):
                self.logger.error("%s failed: %s", name, entry.error)
            case TaskEnd(name=name, status="skip", result=entry):
                self.logger.log(self.level, "%s skipped (%s)", name, entry.reason)
            case TaskEnd(name=name, duration=duration):
                self.logger.log(self.level, "%s ok (%s)", name, _fmt_duration(duration))
            case RunnerEnd(ok=ok, failed=failed, skipped=skipped, results=results):
                self.logger.log(
                    self.level if ok else logging.ERROR,
                    "run %s: %d tasks, %d failed, %d skipped",
                    "ok" if ok else "failed",
                    len(results),
                    failed,
                    skipped,
                )


def _fmt_duration(duration: float | None) -> str:
    return "n/a" if duration is None else f"{duration:.3f}s"
