"""Workflow registry for serving workflows by name.

This module provides a registry for storing and retrieving live workflow
objects, used by the Litestar plugin to expose them over HTTP.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from easyflow.exceptions import WorkflowNotFoundError

if TYPE_CHECKING:
    from easyflow.core.workflow import Workflow

__all__ = ["WorkflowRegistry"]


class WorkflowRegistry:
    """Registry mapping names to live workflows.

    Attributes:
        _workflows: Map of registered names to workflows, in registration order.
    """

    def __init__(self) -> None:
        """Initialize an empty workflow registry."""
        self._workflows: dict[str, Workflow] = {}

    def register(self, workflow: Workflow, name: str | None = None) -> None:
        """Register a workflow with the registry.

        Args:
            workflow: The workflow to register.
            name: Name to register under. Defaults to the workflow's name,
                then its id.

        Raises:
            ValueError: If no name can be determined.

        Example:
            >>> registry = WorkflowRegistry()
            >>> registry.register(Workflow("nightly").sequence(backup, prune).workflow)
        """
        key = name or workflow.name or workflow.id()
        if not key:
            msg = "Cannot register an unnamed workflow without an explicit name"
            raise ValueError(msg)
        self._workflows[key] = workflow

    def get(self, name: str) -> Workflow:
        """Retrieve a workflow by name.

        Args:
            name: The registered name.

        Returns:
            The workflow.

        Raises:
            WorkflowNotFoundError: If the name is not registered.
        """
        if name not in self._workflows:
            raise WorkflowNotFoundError(name)
        return self._workflows[name]

    def list_workflows(self) -> list[tuple[str, Workflow]]:
        """List all registered workflows with their names.

        Returns:
            ``(name, workflow)`` pairs in registration order.
        """
        return list(self._workflows.items())

    def unregister(self, name: str) -> None:
        """Remove a workflow from the registry; unknown names are ignored.

        Args:
            name: The registered name.
        """
        self._workflows.pop(name, None)

    def has_workflow(self, name: str) -> bool:
        """Check if a workflow is registered under ``name``."""
        return name in self._workflows
