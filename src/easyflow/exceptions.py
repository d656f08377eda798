"""Exception hierarchy for easyflow."""

from __future__ import annotations

from typing import Any

__all__ = (
    "AmbiguousRootError",
    "EasyflowError",
    "InvalidTaskItemError",
    "TaskClassError",
    "WorkflowConstructionError",
    "WorkflowNotFoundError",
)


class EasyflowError(Exception):
    """Base exception for all easyflow errors.

    Failures raised by task callables are never wrapped in this class; they
    propagate out of ``Workflow.run`` unchanged. Everything the library itself
    raises inherits from here.
    """


class WorkflowConstructionError(EasyflowError):
    """Raised when a workflow tree cannot be built or formalized.

    Construction errors fail fast at build or formalize time and are never
    silently recovered.
    """


class InvalidTaskItemError(WorkflowConstructionError):
    """Raised when an item passed to ``sequence``/``parallel`` is not usable.

    Attributes:
        item: The offending item.
    """

    def __init__(self, item: Any) -> None:
        """Initialize the exception with the rejected item.

        Args:
            item: The offending item.
        """
        self.item = item
        super().__init__(
            f"Invalid task item type {type(item).__name__!r}: {item!r}. "
            "Must be a callable, a task class, a task node or a workflow"
        )


class TaskClassError(WorkflowConstructionError):
    """Raised when a task class cannot be decomposed into member callables.

    Attributes:
        class_name: Name of the task class.
        reason: Why the decomposition was rejected.
    """

    def __init__(self, class_name: str, reason: str) -> None:
        """Initialize the exception with task class details.

        Args:
            class_name: Name of the task class.
            reason: Why the decomposition was rejected.
        """
        self.class_name = class_name
        self.reason = reason
        super().__init__(f"Task class '{class_name}' is invalid: {reason}")


class AmbiguousRootError(WorkflowConstructionError):
    """Raised when a workflow does not reduce to exactly one consumed root.

    More than one root means a sub-tree was built on the workflow but never
    passed into another ``sequence``/``parallel`` call.

    Attributes:
        root_count: Number of floating roots found.
    """

    def __init__(self, root_count: int) -> None:
        """Initialize the exception with the number of roots found.

        Args:
            root_count: Number of floating roots found.
        """
        self.root_count = root_count
        super().__init__(f"Workflow root is not unique: found {root_count} floating roots")


class WorkflowNotFoundError(EasyflowError):
    """Raised when a workflow is not found in a ``WorkflowRegistry``.

    Attributes:
        name: The name of the workflow that was not found.
    """

    def __init__(self, name: str) -> None:
        """Initialize the exception with workflow details.

        Args:
            name: The name of the workflow that was not found.
        """
        self.name = name
        super().__init__(f"Workflow '{name}' not found")
