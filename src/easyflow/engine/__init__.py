"""Execution engines and registries for easyflow."""

from __future__ import annotations

from easyflow.engine.local import LocalExecutionEngine
from easyflow.engine.registry import WorkflowRegistry

__all__ = [
    "LocalExecutionEngine",
    "WorkflowRegistry",
]
