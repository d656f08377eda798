"""Easyflow - composable sequential/parallel workflows for asyncio.

Easyflow gives a centralized view of a workflow: the order and concurrency of
work is declared in one place instead of being scattered through business
logic.

Key Features:
    - Compose plain callables, task classes and nested workflows
    - Ordered, data-threading ``sequence`` and fan-out/join ``parallel``
    - Live, hierarchical status tree for polling UIs
    - Enable/disable individual tasks by identifier, even mid-run
    - Status and message events bubbling through nested workflows
    - Optional Litestar plugin exposing workflows over HTTP

Example:
    >>> from easyflow import Workflow
    >>>
    >>> async def fetch(url, emit_message):
    ...     emit_message(f"fetching {url}")
    ...     return await download(url)
    >>>
    >>> flow = Workflow()
    >>> flow.sequence("Import", fetch, parse).parallel(index, thumbnail)
    >>> result = await flow.run("https://example.com/feed")
"""

from __future__ import annotations

from easyflow.__metadata__ import __project__, __version__
from easyflow.core import (
    CompositionMode,
    Decomposition,
    Lifecycle,
    MessageEmitter,
    StatusRecord,
    TaskProvider,
    Workflow,
)
from easyflow.engine import LocalExecutionEngine, WorkflowRegistry
from easyflow.exceptions import (
    AmbiguousRootError,
    EasyflowError,
    InvalidTaskItemError,
    TaskClassError,
    WorkflowConstructionError,
    WorkflowNotFoundError,
)
from easyflow.plugin import WorkflowPlugin, WorkflowPluginConfig
from easyflow.steps import CallableStep, ParallelGroup, SequentialGroup, StepGroup, TaskNode

__all__ = (
    "AmbiguousRootError",
    "CallableStep",
    "CompositionMode",
    "Decomposition",
    "EasyflowError",
    "InvalidTaskItemError",
    "Lifecycle",
    "LocalExecutionEngine",
    "MessageEmitter",
    "ParallelGroup",
    "SequentialGroup",
    "StatusRecord",
    "StepGroup",
    "TaskClassError",
    "TaskNode",
    "TaskProvider",
    "Workflow",
    "WorkflowConstructionError",
    "WorkflowNotFoundError",
    "WorkflowPlugin",
    "WorkflowPluginConfig",
    "WorkflowRegistry",
    "__project__",
    "__version__",
)
