"""Task nodes for easyflow composition trees."""

from __future__ import annotations

from easyflow.steps.base import CallableStep, TaskNode
from easyflow.steps.groups import GROUP_TYPES, ParallelGroup, SequentialGroup, StepGroup

__all__ = [
    "GROUP_TYPES",
    "CallableStep",
    "ParallelGroup",
    "SequentialGroup",
    "StepGroup",
    "TaskNode",
]
