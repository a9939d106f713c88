from __future__ import annotations

from collections.abc import Iterator, Sequence

from taskchain.registry import TaskRegistry

from .types import CycleError, UnknownDepError, UnknownTaskError


def normalize_requested(
    names: str | Sequence[str] | None, default: str | None = None
) -> list[str]:
    if names is None:
        return [] if default is None else [default]

    if isinstance(names, str):
        return [names]

    if not isinstance(names, (list, tuple)):
        raise TypeError(f"task names must be a string or a list of strings, got {type(names)}")

    for name in names:
        if not isinstance(name, str):
            raise TypeError(f"task names must be strings, got {type(name)}")

    return list(names)


class Planner:
    """Linear execution order for the closure of the requested tasks.

    Dependencies come first, then the order in which names were requested
    and in which each task lists its deps. Registration order plays no part.
    """

    def __init__(self, registry: TaskRegistry):
        self.registry = registry

    def resolve(self, requested: list[str]) -> list[str]:
        for name in requested:
            if name not in self.registry:
                raise UnknownTaskError(name)

        visited: set[str] = set()
        visiting: set[str] = set()
        stack: list[str] = []
        out: list[str] = []
        frames: list[tuple[str, Iterator[str]]] = []

        def enter(name: str) -> None:
            if name in visiting:
                start = stack.index(name)
                raise CycleError(stack[start:] + [name])
            visiting.add(name)
            stack.append(name)
            frames.append((name, iter(self.registry.get(name).deps)))

        for root in requested:
            if root in visited:
                continue
            enter(root)

            while frames:
                name, deps = frames[-1]
                dep = next(deps, None)
                if dep is None:
                    frames.pop()
                    stack.pop()
                    visiting.discard(name)
                    visited.add(name)
                    out.append(name)
                    continue

                if dep not in self.registry:
                    raise UnknownDepError(name, dep)
                if dep not in visited:
                    enter(dep)

        return out
