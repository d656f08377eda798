"""Per-workflow registry of disabled task identifiers."""

from __future__ import annotations

import inspect
import threading
from collections.abc import Iterable, Iterator
from typing import Any

__all__ = ["DisableRegistry", "resolve_identifier"]


def resolve_identifier(target: Any) -> str | None:
    """Reduce something that names a task to its identifier.

    Strings are taken literally. Bound methods resolve to
    ``"ClassName.method"``, the id a task class member gets when its class is
    expanded. Other callables and classes resolve to their ``__name__``; task
    nodes and workflows to their ``id()``.

    Args:
        target: A string, callable, class, task node or workflow.

    Returns:
        The identifier, or None if ``target`` has none.
    """
    from easyflow.core.workflow import Workflow
    from easyflow.steps.base import TaskNode

    if isinstance(target, str):
        return target
    if isinstance(target, (TaskNode, Workflow)):
        return target.id()
    if inspect.ismethod(target) and not inspect.isclass(target.__self__):
        return f"{type(target.__self__).__name__}.{target.__name__}"
    return getattr(target, "__name__", None)


class DisableRegistry:
    """Set of disabled identifiers, safe to mutate while a run is in progress.

    Reads and writes take a lock so callables running in worker threads may
    enable or disable siblings. Lookups always see the current set.
    """

    def __init__(self, ids: Iterable[str] = ()) -> None:
        """Initialize the registry.

        Args:
            ids: Identifiers disabled from the start.
        """
        self._lock = threading.Lock()
        self._ids: set[str] = set(ids)

    def disable(self, *targets: Any) -> None:
        """Disable the given tasks.

        Args:
            *targets: Strings, callables, classes, nodes or workflows.
        """
        ids = {identifier for identifier in map(resolve_identifier, targets) if identifier is not None}
        with self._lock:
            self._ids.update(ids)

    def enable(self, *targets: Any) -> None:
        """Re-enable the given tasks; unknown identifiers are ignored.

        Args:
            *targets: Strings, callables, classes, nodes or workflows.
        """
        ids = {identifier for identifier in map(resolve_identifier, targets) if identifier is not None}
        with self._lock:
            self._ids.difference_update(ids)

    def __contains__(self, identifier: object) -> bool:
        with self._lock:
            return identifier in self._ids

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            snapshot = sorted(self._ids)
        return iter(snapshot)

    def __len__(self) -> int:
        with self._lock:
            return len(self._ids)
