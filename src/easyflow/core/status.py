"""Public status tree.

A workflow's composition tree carries a :class:`StatusRecord` on every node.
:func:`formalize` links the records worth reporting into a compact tree once;
from then on the engine mutates those same records in place, so anyone
holding the tree observes execution live.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from easyflow.core.types import Lifecycle

if TYPE_CHECKING:
    from easyflow.steps.base import TaskNode

__all__ = ["StatusRecord", "formalize"]


@dataclass(eq=False)
class StatusRecord:
    """Observable status of one task node.

    Records compare by identity: the status tree is a live object, not a value.

    Attributes:
        lifecycle: Current lifecycle state of the node.
        id: The node identifier, if any.
        name: Display name; only named units carry one.
        message: Last message emitted inside this named unit.
        error: Text of the failure, once the node is in ``ERROR``.
        children: Reported child records in declaration order, or None.
    """

    lifecycle: Lifecycle = Lifecycle.PENDING
    id: str | None = None
    name: str | None = None
    message: str | None = None
    error: str | None = None
    children: list[StatusRecord] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Render the record and its children, omitting unset fields.

        Returns:
            A JSON-compatible dict.
        """
        data: dict[str, Any] = {"lifecycle": str(self.lifecycle)}
        for key in ("id", "name", "message", "error"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data

    def find(self, identifier: str) -> StatusRecord | None:
        """Find the first record in this subtree with the given id or name.

        Args:
            identifier: Node id or display name to look for.

        Returns:
            The matching record, or None.
        """
        if identifier in (self.id, self.name):
            return self
        for child in self.children or ():
            found = child.find(identifier)
            if found is not None:
                return found
        return None


def formalize(root: TaskNode) -> StatusRecord:
    """Build the public status tree for ``root``.

    Walks the tree depth first. A child's record is kept in its parent's
    ``children`` iff the child has an id, a name, or a kept descendant; pure
    structural wrappers vanish. Disabled nodes are pre-set to ``SKIPPED``.

    Args:
        root: The single consumed root of a workflow.

    Returns:
        The root's status record.
    """
    _visit(root)
    return root.status_record


def _visit(node: TaskNode) -> bool:
    record = node.status_record
    record.id = node.id()
    record.name = node.name

    kept = [child.status_record for child in node.children if _visit(child)]
    record.children = kept or None

    if node.is_disabled():
        record.lifecycle = Lifecycle.SKIPPED

    return record.id is not None or record.name is not None or bool(kept)
