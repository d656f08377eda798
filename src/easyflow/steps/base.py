"""Base task node implementations for easyflow."""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from easyflow.core.status import StatusRecord
from easyflow.core.types import CompositionMode

if TYPE_CHECKING:
    from easyflow.core.types import EmitMessage, MessageListener, StatusListener, TaskCallable
    from easyflow.core.workflow import Workflow
    from easyflow.engine.local import LocalExecutionEngine
    from easyflow.steps.groups import StepGroup


class TaskNode(ABC):
    """A node of the composition tree.

    Every node has exactly one owner at any time: either its parent group or,
    while it is still floating, the ``roots`` list of its workflow. Nodes are
    also the fluent handle returned by ``sequence``/``parallel``, so the
    workflow level operations are reachable from them.
    """

    def __init__(self, workflow: Workflow, *, name: str | None = None, id: str | None = None) -> None:  # noqa: A002
        """Initialize the node.

        Args:
            workflow: The workflow this node is built on.
            name: Optional display name; marks the node a named unit.
            id: Optional identifier used for disabling and reporting.
        """
        self.workflow = workflow
        self.parent: StepGroup | None = None
        self.name = name
        self._id = id
        self.status_record = StatusRecord(name=name)

    @property
    def children(self) -> tuple[TaskNode, ...]:
        """Child nodes in declaration order."""
        return ()

    def id(self, value: str | None = None) -> Any:
        """Get or set the node identifier.

        Args:
            value: New identifier. If omitted, acts as a getter.

        Returns:
            The identifier when used as a getter, otherwise this node.
        """
        if value is None:
            return self._id
        self._id = value
        return self

    def is_disabled(self) -> bool:
        """Whether the owning workflow currently disables this node."""
        return self._id is not None and self.workflow.is_disabled(self._id)

    def find_named_record(self) -> StatusRecord | None:
        """Return the status record of the nearest named unit, self included."""
        node: TaskNode | None = self
        while node is not None:
            if node.name is not None:
                return node.status_record
            node = node.parent
        return None

    def sequence(self, *items: Any) -> StepGroup:
        """Append a sequential group as the next sibling of this node."""
        return self.workflow.chain(self, CompositionMode.SEQUENTIAL, items)

    def parallel(self, *items: Any) -> StepGroup:
        """Append a parallel group as the next sibling of this node."""
        return self.workflow.chain(self, CompositionMode.PARALLEL, items)

    def disable(self, *targets: Any) -> TaskNode:
        """Disable tasks on the owning workflow."""
        self.workflow.disable(*targets)
        return self

    def enable(self, *targets: Any) -> TaskNode:
        """Enable tasks on the owning workflow."""
        self.workflow.enable(*targets)
        return self

    async def run(self, value: Any = None) -> Any:
        """Run the owning workflow."""
        return await self.workflow.run(value)

    def status(self) -> StatusRecord:
        """Return the owning workflow's live status tree."""
        return self.workflow.status()

    def on_status(self, listener: StatusListener | None) -> TaskNode:
        """Register the owning workflow's status listener."""
        self.workflow.on_status(listener)
        return self

    def on_message(self, listener: MessageListener | None) -> TaskNode:
        """Register the owning workflow's message listener."""
        self.workflow.on_message(listener)
        return self

    def verbose(self, enabled: bool = True) -> TaskNode:
        """Toggle transition tracing on the owning workflow."""
        self.workflow.verbose(enabled)
        return self

    @abstractmethod
    async def execute(self, value: Any, engine: LocalExecutionEngine) -> Any:
        """Execute the node once it has been entered.

        Args:
            value: Input value handed down by the parent.
            engine: The execution engine driving the run.

        Returns:
            The node's output value.
        """
        ...

    def __repr__(self) -> str:
        label = self.name if self.name is not None else self._id
        return f"<{type(self).__name__} {label!r}>"


class CallableStep(TaskNode):
    """Leaf node wrapping one task callable.

    The callable is invoked with ``(input, emit_message)``. Callables that
    declare fewer positional parameters receive only as many arguments as
    they accept, so ``def task(): ...`` and ``def task(data): ...`` work too.
    """

    def __init__(self, workflow: Workflow, func: TaskCallable, *, id: str | None = None) -> None:  # noqa: A002
        """Initialize the step.

        Args:
            workflow: The workflow this step is built on.
            func: The task callable.
            id: Identifier; defaults to the callable's ``__name__``.
        """
        super().__init__(workflow, id=id if id is not None else getattr(func, "__name__", None))
        self.func = func
        self._arity = _positional_arity(func)

    def invoke(self, value: Any, emit_message: EmitMessage) -> Any:
        """Call the wrapped callable; the result may be awaitable."""
        return self.func(*(value, emit_message)[: self._arity])

    async def execute(self, value: Any, engine: LocalExecutionEngine) -> Any:
        return await engine.execute_step(self, value)


def _positional_arity(func: TaskCallable) -> int:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return 2

    count = 0
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return 2
        if parameter.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return min(count, 2)
