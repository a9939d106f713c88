from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .types import ERROR, OK, SKIP, Error, Ok, Outcome, Skip


def normalize_outcome(ret: Any) -> Outcome:
    """Map whatever a task body returned onto Ok / Skip / Error.

    - None or True -> Ok()
    - an Ok, Skip or Error instance -> unchanged
    - a mapping with a string "status" -> that status ("ok", "skip", "error";
      anything else counts as "ok"), with its "reason" / "error" fields and a
      copy of the mapping as payload
    - anything else -> Ok(ret)
    """
    if ret is None or ret is True:
        return Ok()

    if isinstance(ret, (Ok, Skip, Error)):
        return ret

    if isinstance(ret, Mapping) and isinstance(ret.get("status"), str):
        payload = dict(ret)
        if payload["status"] not in (OK, SKIP, ERROR):
            payload["status"] = OK

        match payload["status"]:
            case "skip":
                return Skip(payload.get("reason"), payload)
            case "error":
                return Error(payload.get("error"), payload)
            case _:
                return Ok(payload)

    return Ok(ret)
