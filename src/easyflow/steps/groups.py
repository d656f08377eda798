"""Composable step groups for easyflow."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, ClassVar

from easyflow.core.types import CompositionMode
from easyflow.steps.base import TaskNode

if TYPE_CHECKING:
    from easyflow.core.workflow import Workflow
    from easyflow.engine.local import LocalExecutionEngine

__all__ = ["GROUP_TYPES", "ParallelGroup", "SequentialGroup", "StepGroup"]


class StepGroup(TaskNode):
    """Base for composite nodes.

    A group owns an ordered list of child nodes. Children are only ever added
    or removed through ``Workflow.adopt`` so that a node never has two owners.
    """

    mode: ClassVar[CompositionMode]

    def __init__(self, workflow: Workflow, *, name: str | None = None, id: str | None = None) -> None:  # noqa: A002
        """Initialize an empty group.

        Args:
            workflow: The workflow this group is built on.
            name: Optional display name; marks the group a named unit.
            id: Optional identifier.
        """
        super().__init__(workflow, name=name, id=id)
        self._children: list[TaskNode] = []

    @property
    def children(self) -> tuple[TaskNode, ...]:
        return tuple(self._children)

    def _attach(self, child: TaskNode) -> None:
        child.parent = self
        self._children.append(child)

    def _detach(self, child: TaskNode) -> None:
        for index, candidate in enumerate(self._children):
            if candidate is child:
                del self._children[index]
                child.parent = None
                return
        msg = f"{child!r} is not a child of {self!r}"
        raise ValueError(msg)


class SequentialGroup(StepGroup):
    """Execute children in sequence, passing results.

    Each child receives the output of the previous one; a skipped child hands
    its input through unchanged. The first failure stops the group: later
    children never start and the same exception propagates.

    Example:
        >>> group = flow.sequence(fetch, parse, store)
        >>> await flow.run(url)
        # fetch(url) -> parse(page) -> store(record) -> result
    """

    mode = CompositionMode.SEQUENTIAL

    async def execute(self, value: Any, engine: LocalExecutionEngine) -> Any:
        """Execute children sequentially, threading the value forward.

        Args:
            value: Input for the first child.
            engine: The execution engine driving the run.

        Returns:
            The last produced value, or ``value`` if every child was skipped.

        Raises:
            Exception: The first exception raised by a child.
        """
        for child in list(self._children):
            value = await engine.execute_node(child, value)
        return value


class ParallelGroup(StepGroup):
    """Execute children concurrently and join on their completion.

    All children are started in declaration order, each receiving the same
    input. Results are collected in **completion order**. A child that is
    disabled when the group starts is marked skipped and settles at once with
    a ``None`` placeholder. If every child is skipped, the group passes its
    input through like a skipped node.

    The first failing child fails the group immediately. Siblings still in
    flight are not cancelled; they run to the end and their outcome is
    ignored.

    Example:
        >>> flow.parallel(resize, thumbnail, watermark)
        >>> await flow.run(image)  # [first_done, second_done, third_done]
    """

    mode = CompositionMode.PARALLEL

    async def execute(self, value: Any, engine: LocalExecutionEngine) -> Any:
        """Fan out to all children and wait for every one of them to settle.

        Args:
            value: Input handed to every child.
            engine: The execution engine driving the run.

        Returns:
            Child results in completion order.

        Raises:
            Exception: The first exception raised by a child.
        """
        children = list(self._children)
        joined: asyncio.Future[list[Any]] = asyncio.get_running_loop().create_future()
        results: list[Any] = []
        remaining = len(children)

        def settle(result: Any) -> None:
            nonlocal remaining
            results.append(result)
            remaining -= 1
            if remaining == 0 and not joined.done():
                joined.set_result(results)

        def on_done(task: asyncio.Task[Any]) -> None:
            error = asyncio.CancelledError() if task.cancelled() else task.exception()
            if joined.done():
                return
            if error is not None:
                joined.set_exception(error)
            else:
                settle(task.result())

        if not children:
            return results

        skipped = 0
        for child in children:
            if child.is_disabled():
                engine.skip_node(child)
                skipped += 1
                settle(None)
                continue
            engine.spawn(engine.run_node(child, value)).add_done_callback(on_done)

        if skipped == len(children):
            return value

        return await joined


GROUP_TYPES: dict[CompositionMode, type[StepGroup]] = {
    CompositionMode.SEQUENTIAL: SequentialGroup,
    CompositionMode.PARALLEL: ParallelGroup,
}
"""Group class for each composition mode."""
