"""Local in-process async execution engine.

This module walks a composition tree on the running asyncio loop. Parallel
children are interleaved, not run on separate threads; task callables that
block should offload their own work.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Coroutine
from typing import TYPE_CHECKING, Any

from easyflow.core.events import MessageEmitter, StatusChanged, bubble
from easyflow.core.types import Lifecycle

if TYPE_CHECKING:
    from easyflow.steps.base import CallableStep, TaskNode

__all__ = ["LocalExecutionEngine"]

logger = logging.getLogger(__name__)

_VERBS = {
    Lifecycle.RUNNING: "start",
    Lifecycle.COMPLETE: "complete",
    Lifecycle.ERROR: "error",
    Lifecycle.SKIPPED: "skipped",
}


class LocalExecutionEngine:
    """In-memory async execution engine for composition trees.

    The engine keeps no per-run state besides the set of background tasks
    spawned for parallel children. Those are referenced until they finish so
    that siblings abandoned after a failure keep running to completion.

    Attributes:
        _background: Parallel child tasks that have not finished yet.
    """

    def __init__(self) -> None:
        """Initialize the engine."""
        self._background: set[asyncio.Task[Any]] = set()

    @property
    def in_flight(self) -> int:
        """Number of parallel child tasks still running."""
        return len(self._background)

    async def execute_node(self, node: TaskNode, value: Any) -> Any:
        """Enter a node: skip it if disabled, otherwise run it.

        The disable check reads the live registry, so changes made by nodes
        that already ran are honoured.

        Args:
            node: The node to enter.
            value: Input value for the node.

        Returns:
            The node's output, or ``value`` unchanged if it was skipped.
        """
        if node.is_disabled():
            self.skip_node(node)
            return value
        return await self.run_node(node, value)

    def skip_node(self, node: TaskNode) -> None:
        """Mark a node skipped without running it."""
        self._transition(node, Lifecycle.SKIPPED)

    async def run_node(self, node: TaskNode, value: Any) -> Any:
        """Run an already entered node through its lifecycle.

        Args:
            node: The node to run.
            value: Input value for the node.

        Returns:
            The node's output.

        Raises:
            Exception: Whatever the node raised, after marking it ``ERROR``.
        """
        self._transition(node, Lifecycle.RUNNING)
        try:
            result = await node.execute(value, self)
        except Exception as e:
            self._transition(node, Lifecycle.ERROR, error=e)
            raise
        self._transition(node, Lifecycle.COMPLETE)
        return result

    async def execute_step(self, step: CallableStep, value: Any) -> Any:
        """Invoke a leaf callable and await its result if needed.

        Args:
            step: The leaf to invoke.
            value: Input value for the callable.

        Returns:
            The callable's (awaited) return value.
        """
        result = step.invoke(value, MessageEmitter(step))
        if inspect.isawaitable(result):
            result = await result
        return result

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        """Schedule a coroutine on the running loop and keep it referenced.

        Args:
            coro: The coroutine to schedule.

        Returns:
            The created task.
        """
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    def _transition(self, node: TaskNode, lifecycle: Lifecycle, error: BaseException | None = None) -> None:
        record = node.status_record
        record.lifecycle = lifecycle
        if lifecycle is Lifecycle.RUNNING:
            record.error = None
        elif error is not None:
            record.error = str(error) or type(error).__name__

        self._trace(node, lifecycle)

        if node.name is not None:
            bubble(node.workflow, StatusChanged(node_id=node.id(), name=node.name, lifecycle=lifecycle))

    def _trace(self, node: TaskNode, lifecycle: Lifecycle) -> None:
        # unnamed nodes reach INFO only when skipped
        reported = node.name is not None or lifecycle is Lifecycle.SKIPPED
        level = logging.INFO if node.workflow.is_verbose and reported else logging.DEBUG
        if not logger.isEnabledFor(level):
            return
        label = node.name if node.name is not None else f"(id) {node.id()}"
        logger.log(level, "%s: %s", _VERBS.get(lifecycle, str(lifecycle)), label)
