"""Workflow: the entry point for building, observing and running task trees.

Example:
    >>> flow = Workflow()
    >>> flow.sequence("Import", fetch, parse).parallel(index, thumbnail).sequence(publish)
    >>> status = flow.status()
    >>> result = await flow.run("https://example.com/feed")
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from easyflow.core.composition import build_group
from easyflow.core.disable import DisableRegistry, resolve_identifier
from easyflow.core.events import MessageEmitted, StatusChanged
from easyflow.core.status import StatusRecord, formalize
from easyflow.core.types import CompositionMode
from easyflow.engine.local import LocalExecutionEngine
from easyflow.exceptions import AmbiguousRootError, WorkflowConstructionError
from easyflow.steps.groups import SequentialGroup, StepGroup

if TYPE_CHECKING:
    from easyflow.core.events import WorkflowEvent
    from easyflow.core.types import MessageListener, StatusListener
    from easyflow.steps.base import TaskNode

__all__ = ["Workflow"]


class Workflow:
    """A composition tree plus the state needed to observe and run it.

    Every top level ``sequence``/``parallel`` call allocates a fresh anonymous
    *floating root* in :attr:`roots` and attaches the new group under it.
    Chaining on a returned node appends siblings under that same root. A
    sub-tree built but never returned to the top level stays floating until
    it is passed into another ``sequence``/``parallel`` call, which splices it
    in. By the time the workflow is formalized or run it must reduce to a
    single root.

    Attributes:
        name: Optional workflow name, used as registry key.
        disabled: The disable registry consulted at node entry.
        roots: Floating roots pending adoption.
        parent_workflow: The host workflow when embedded, else None.
    """

    def __init__(
        self,
        name: str | None = None,
        *,
        id: str | None = None,  # noqa: A002
        verbose: bool = True,
        disabled: Iterable[str] = (),
    ) -> None:
        """Initialize an empty workflow.

        Args:
            name: Optional workflow name.
            id: Optional identifier; used for the inlined root when this
                workflow is embedded into another one.
            verbose: Whether node transitions are traced at INFO level.
            disabled: Identifiers disabled from the start.
        """
        self.name = name
        self._id = id
        self._verbose = verbose
        self.disabled = DisableRegistry(disabled)
        self.roots: list[TaskNode] = []
        self.parent_workflow: Workflow | None = None
        self._status_listener: StatusListener | None = None
        self._message_listener: MessageListener | None = None
        self._root: TaskNode | None = None
        self._status_tree: StatusRecord | None = None
        self._engine = LocalExecutionEngine()

    def id(self, value: str | None = None) -> Any:
        """Get or set the workflow identifier.

        Args:
            value: New identifier. If omitted, acts as a getter.

        Returns:
            The identifier when used as a getter, otherwise this workflow.
        """
        if value is None:
            return self._id
        self._id = value
        return self

    @property
    def is_verbose(self) -> bool:
        """Whether node transitions are traced at INFO level."""
        return self._verbose

    def verbose(self, enabled: bool = True) -> Workflow:
        """Toggle tracing of node transitions.

        Args:
            enabled: Trace at INFO when True, at DEBUG otherwise.

        Returns:
            This workflow.
        """
        self._verbose = enabled
        return self

    def sequence(self, *items: Any) -> StepGroup:
        """Build a sequential group under a new floating root.

        Args:
            *items: Optional display name followed by task items.

        Returns:
            The new group, for fluent chaining.
        """
        return self._build_floating(CompositionMode.SEQUENTIAL, items)

    def parallel(self, *items: Any) -> StepGroup:
        """Build a parallel group under a new floating root.

        Args:
            *items: Optional display name followed by task items.

        Returns:
            The new group, for fluent chaining.
        """
        return self._build_floating(CompositionMode.PARALLEL, items)

    def chain(self, after: TaskNode, mode: CompositionMode, items: Iterable[Any]) -> StepGroup:
        """Build a group and append it as the next sibling of ``after``.

        Args:
            after: The node to chain after.
            mode: Composition mode of the new group.
            items: Optional display name followed by task items.

        Returns:
            The new group.

        Raises:
            WorkflowConstructionError: If ``after`` has no parent, or was
                itself consumed by the new group.
        """
        parent = after.parent
        if parent is None:
            msg = f"Cannot chain after {after!r}: it is not attached to a group"
            raise WorkflowConstructionError(msg)

        group = build_group(self, mode, items)
        if after.parent is not parent:
            msg = f"Cannot chain after {after!r}: it was consumed by the group being chained"
            raise WorkflowConstructionError(msg)
        self.adopt(group, parent)
        return group

    def adopt(self, node: TaskNode, parent: StepGroup) -> None:
        """Transfer ownership of ``node`` to ``parent``.

        The node is detached from its previous owner (its parent group or the
        floating roots) and appended to ``parent`` in one step.

        Args:
            node: The node to move.
            parent: The new owner.

        Raises:
            WorkflowConstructionError: If the move would create a cycle.
        """
        ancestor: TaskNode | None = parent
        while ancestor is not None:
            if ancestor is node:
                msg = f"Cannot adopt {node!r} into its own subtree"
                raise WorkflowConstructionError(msg)
            ancestor = ancestor.parent

        if node.parent is not None:
            node.parent._detach(node)
        else:
            self._remove_root(node)
        parent._attach(node)

    def claim(self, node: TaskNode) -> TaskNode:
        """Detach the floating root holding ``node`` so it can be spliced in.

        A floating root holding a single node yields that node; one holding a
        chain of siblings yields the whole chain as an anonymous sequence.

        Args:
            node: A node returned by ``sequence``/``parallel`` on this workflow.

        Returns:
            The detached sub-tree.

        Raises:
            WorkflowConstructionError: If ``node`` is not held by a floating root.
        """
        floating = node.parent
        if floating is None or not self._remove_root(floating):
            msg = f"{node!r} is already attached elsewhere and cannot be adopted again"
            raise WorkflowConstructionError(msg)

        if len(floating.children) == 1:
            floating._detach(node)
            return node
        return floating

    def embed(self, nested: Workflow) -> TaskNode:
        """Consume the single root of another workflow for inlining here.

        Events of ``nested`` bubble to this workflow from now on, and its
        nodes consult this workflow's disabled identifiers as well as their
        own.

        Args:
            nested: The workflow to embed.

        Returns:
            The detached root of ``nested``, wrapped in a group carrying the
            workflow id when the root has a different id of its own.

        Raises:
            WorkflowConstructionError: If ``nested`` is this workflow.
            AmbiguousRootError: If ``nested`` does not have exactly one root.
        """
        if nested is self:
            msg = "Cannot embed a workflow into itself"
            raise WorkflowConstructionError(msg)

        root = nested._take_root()
        nested.parent_workflow = self
        identifier = nested.id()
        if identifier is None or root.id() == identifier:
            return root
        if root.id() is None:
            root.id(identifier)
            return root

        # the root keeps its own id; an anonymous wrapper carries the workflow's
        wrapper = SequentialGroup(nested, id=identifier)
        wrapper._attach(root)
        return wrapper

    def disable(self, *targets: Any) -> Workflow:
        """Disable tasks by callable, class, node, workflow or identifier.

        Args:
            *targets: Tasks to disable; ``"ClassName.member"`` targets one
                member of a task class.

        Returns:
            This workflow.
        """
        self.disabled.disable(*targets)
        return self

    def enable(self, *targets: Any) -> Workflow:
        """Re-enable previously disabled tasks.

        Args:
            *targets: Tasks to enable.

        Returns:
            This workflow.
        """
        self.disabled.enable(*targets)
        return self

    def is_disabled(self, target: Any) -> bool:
        """Check whether a task is disabled here or in any host workflow.

        Args:
            target: Callable, class, node, workflow or identifier.

        Returns:
            True if disabled.
        """
        identifier = resolve_identifier(target)
        if identifier is None:
            return False

        seen: set[int] = set()
        workflow: Workflow | None = self
        while workflow is not None and id(workflow) not in seen:
            if identifier in workflow.disabled:
                return True
            seen.add(id(workflow))
            workflow = workflow.parent_workflow
        return False

    def on_status(self, listener: StatusListener | None) -> Workflow:
        """Register the listener for named unit lifecycle changes.

        Args:
            listener: Called with ``(id, name, lifecycle)``; replaces any
                previous listener. None unregisters.

        Returns:
            This workflow.
        """
        self._status_listener = listener
        return self

    def on_message(self, listener: MessageListener | None) -> Workflow:
        """Register the listener for messages emitted by task callables.

        Args:
            listener: Called with ``(id, name, text)``; replaces any previous
                listener. None unregisters.

        Returns:
            This workflow.
        """
        self._message_listener = listener
        return self

    def notify(self, event: WorkflowEvent) -> None:
        """Deliver an event to the matching listener of this workflow."""
        if isinstance(event, StatusChanged) and self._status_listener is not None:
            self._status_listener(event.node_id, event.name, event.lifecycle)
        elif isinstance(event, MessageEmitted) and self._message_listener is not None:
            self._message_listener(event.node_id, event.name, event.text)

    def status(self) -> StatusRecord:
        """Return the live status tree, formalizing it on first use.

        The same object is returned on every call and is updated in place
        while the workflow runs. A workflow without roots yields an empty
        record, which is not memoized.

        Returns:
            The root status record.

        Raises:
            AmbiguousRootError: If more than one floating root remains.
        """
        if self._status_tree is None:
            if not self.roots:
                return StatusRecord()
            self._root = self._single_root()
            self._status_tree = formalize(self._root)
        return self._status_tree

    async def run(self, value: Any = None) -> Any:
        """Execute the workflow.

        Args:
            value: Input handed to the first task.

        Returns:
            The root's output; ``value`` itself if there is nothing to run.

        Raises:
            AmbiguousRootError: If more than one floating root remains.
            Exception: The first failure raised by a task callable.
        """
        if self._root is None and not self.roots:
            return value
        self.status()
        return await self._engine.execute_node(self._root, value)

    def _build_floating(self, mode: CompositionMode, items: Iterable[Any]) -> StepGroup:
        group = build_group(self, mode, items)
        floating = SequentialGroup(self)
        self.roots.append(floating)
        self.adopt(group, floating)
        return group

    def _remove_root(self, node: TaskNode) -> bool:
        for index, root in enumerate(self.roots):
            if root is node:
                del self.roots[index]
                return True
        return False

    def _single_root(self) -> TaskNode:
        if len(self.roots) != 1:
            raise AmbiguousRootError(len(self.roots))
        root = self.roots[0]
        if len(root.children) == 1:
            return root.children[0]
        return root

    def _take_root(self) -> TaskNode:
        if self._root is not None:
            root, self._root = self._root, None
            self._status_tree = None
            if root.parent is not None:
                root.parent._detach(root)
            self.roots.clear()
            return root

        root = self._single_root()
        floating = self.roots.pop()
        if root is not floating:
            floating._detach(root)
        return root

    def __repr__(self) -> str:
        label = self.name if self.name is not None else self._id
        return f"<Workflow {label!r}>"
