"""Shared test fixtures for the easyflow test suite."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable

    from easyflow.core.types import Lifecycle
    from easyflow.core.workflow import Workflow
    from easyflow.engine.registry import WorkflowRegistry


class EventRecorder:
    """Collects status and message events delivered to a workflow."""

    def __init__(self) -> None:
        self.statuses: list[tuple[str | None, str | None, Lifecycle]] = []
        self.messages: list[tuple[str | None, str | None, str]] = []

    def on_status(self, node_id: str | None, name: str | None, lifecycle: Lifecycle) -> None:
        self.statuses.append((node_id, name, lifecycle))

    def on_message(self, node_id: str | None, name: str | None, text: str) -> None:
        self.messages.append((node_id, name, text))

    def attach(self, workflow: Workflow) -> EventRecorder:
        workflow.on_status(self.on_status).on_message(self.on_message)
        return self


def make_delayed(name: str, delay: float, log: list[str] | None = None) -> Callable[..., Any]:
    """Build an async task that sleeps, records its name and returns it.

    Args:
        name: Name of the task and its return value.
        delay: Seconds to sleep before returning.
        log: Optional list the name is appended to on completion.

    Returns:
        An async task callable named ``name``.
    """

    async def task(value: Any) -> str:
        await asyncio.sleep(delay)
        if log is not None:
            log.append(name)
        return name

    task.__name__ = name
    return task


@pytest.fixture
def workflow() -> Workflow:
    """Create a fresh workflow.

    Returns:
        Workflow instance
    """
    from easyflow.core.workflow import Workflow

    return Workflow()


@pytest.fixture
def delayed() -> Callable[..., Callable[..., Any]]:
    """Provide the factory for sleeping async tasks.

    Returns:
        The make_delayed factory
    """
    return make_delayed


@pytest.fixture
def recorder() -> EventRecorder:
    """Create an event recorder.

    Returns:
        EventRecorder instance
    """
    return EventRecorder()


@pytest.fixture
def workflow_registry() -> WorkflowRegistry:
    """Create a workflow registry for testing.

    Returns:
        WorkflowRegistry instance
    """
    from easyflow.engine.registry import WorkflowRegistry

    return WorkflowRegistry()


def pytest_configure(config: Any) -> None:
    """Configure pytest with custom markers.

    Args:
        config: Pytest config object
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
