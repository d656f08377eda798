"""Core domain for easyflow.

This package contains the workflow builder, the status tree, the disable
registry, events, protocols and type definitions.
"""

from __future__ import annotations

from easyflow.core.composition import build_group, decompose, wrap_callable, wrap_class
from easyflow.core.disable import DisableRegistry, resolve_identifier
from easyflow.core.events import (
    MessageEmitted,
    MessageEmitter,
    StatusChanged,
    WorkflowEvent,
    bubble,
    deliver_message,
)
from easyflow.core.protocols import Decomposition, TaskProvider
from easyflow.core.status import StatusRecord, formalize
from easyflow.core.types import (
    CompositionMode,
    EmitMessage,
    Lifecycle,
    MessageListener,
    StatusListener,
    TaskCallable,
)
from easyflow.core.workflow import Workflow

__all__ = [
    "CompositionMode",
    "Decomposition",
    "DisableRegistry",
    "EmitMessage",
    "Lifecycle",
    "MessageEmitted",
    "MessageEmitter",
    "MessageListener",
    "StatusChanged",
    "StatusListener",
    "StatusRecord",
    "TaskCallable",
    "TaskProvider",
    "Workflow",
    "WorkflowEvent",
    "bubble",
    "build_group",
    "decompose",
    "deliver_message",
    "formalize",
    "resolve_identifier",
    "wrap_callable",
    "wrap_class",
]
