"""Workflow events and their propagation.

Events originate at the workflow owning the node they describe and bubble up
through ``parent_workflow`` links, so a host workflow hears everything that
happens inside the workflows embedded in it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from easyflow.core.types import Lifecycle
    from easyflow.core.workflow import Workflow
    from easyflow.steps.base import TaskNode

__all__ = ["MessageEmitted", "MessageEmitter", "StatusChanged", "WorkflowEvent", "bubble", "deliver_message"]


@dataclass(frozen=True)
class WorkflowEvent:
    """Base class for all workflow events.

    Attributes:
        node_id: Identifier of the node the event is about.
        name: Display name of the named unit involved, if any.
    """

    node_id: str | None
    name: str | None


@dataclass(frozen=True)
class StatusChanged(WorkflowEvent):
    """A named unit changed lifecycle state.

    Attributes:
        node_id: Identifier of the named unit.
        name: Display name of the named unit.
        lifecycle: The state just entered.
    """

    lifecycle: Lifecycle


@dataclass(frozen=True)
class MessageEmitted(WorkflowEvent):
    """A task callable emitted a message.

    Attributes:
        node_id: Identifier of the emitting leaf.
        name: Name of the nearest named ancestor, or None if there is none.
        text: The emitted text.
    """

    text: str


def bubble(origin: Workflow, event: WorkflowEvent) -> None:
    """Deliver ``event`` to ``origin`` and every workflow embedding it.

    Args:
        origin: The workflow owning the node the event is about.
        event: The event to deliver.
    """
    seen: set[int] = set()
    workflow: Workflow | None = origin
    while workflow is not None and id(workflow) not in seen:
        seen.add(id(workflow))
        workflow.notify(event)
        workflow = workflow.parent_workflow


def deliver_message(node: TaskNode, text: str) -> None:
    """Record ``text`` on the nearest named unit and bubble a message event.

    Args:
        node: The node emitting the message.
        text: The message text.
    """
    record = node.find_named_record()
    if record is not None:
        record.message = text
    bubble(
        node.workflow,
        MessageEmitted(node_id=node.id(), name=record.name if record is not None else None, text=text),
    )


class MessageEmitter:
    """The ``emit_message`` callback handed to task callables.

    Calling it reports progress text. The owning workflow is reachable through
    :attr:`workflow`, so a plain function can disable or enable tasks while the
    workflow runs.

    Attributes:
        node: The node messages are reported for. Task class constructors get
            an emitter before their group exists; it is bound once built.
    """

    __slots__ = ("node",)

    def __init__(self, node: TaskNode | None = None) -> None:
        self.node = node

    @property
    def workflow(self) -> Workflow:
        """The workflow owning the emitting node."""
        return self._bound().workflow

    def __call__(self, text: str) -> None:
        deliver_message(self._bound(), text)

    def _bound(self) -> TaskNode:
        if self.node is None:
            msg = "This emitter is not bound to a task yet"
            raise RuntimeError(msg)
        return self.node

    def __repr__(self) -> str:
        return f"<MessageEmitter {self.node!r}>"
