"""Data Transfer Objects for the workflow web API.

This module defines DTOs for serializing and deserializing workflow data
in REST API requests and responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "RunResultDTO",
    "RunWorkflowDTO",
    "ToggleTasksDTO",
    "WorkflowSummaryDTO",
]


@dataclass
class RunWorkflowDTO:
    """DTO for running a workflow.

    Attributes:
        input: Value handed to the first task.
    """

    input: Any = None


@dataclass
class ToggleTasksDTO:
    """DTO for enabling or disabling tasks.

    Attributes:
        ids: Task identifiers, e.g. ``"fetch"`` or ``"Importer.parse"``.
    """

    ids: list[str]


@dataclass
class WorkflowSummaryDTO:
    """DTO for a registered workflow.

    Attributes:
        name: Registered name.
        lifecycle: Lifecycle of the workflow's root node.
        disabled_ids: Identifiers disabled on the workflow itself.
        error: Why the workflow cannot be formalized, if it cannot.
    """

    name: str
    lifecycle: str
    disabled_ids: list[str]
    error: str | None = None


@dataclass
class RunResultDTO:
    """DTO for the outcome of a run.

    Attributes:
        name: Registered name of the workflow.
        succeeded: Whether the run completed without a failure.
        result: The root's output when the run succeeded.
        error: Text of the failure when it did not.
        status: The status tree after the run.
    """

    name: str
    succeeded: bool
    result: Any = None
    error: str | None = None
    status: dict[str, Any] = field(default_factory=dict)
