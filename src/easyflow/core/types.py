"""Core type definitions for easyflow.

This module defines the enums and type aliases used throughout the
composition tree, the status tree and the execution engine.
"""

from __future__ import annotations

import sys
from collections.abc import Awaitable, Callable
from enum import Enum, auto
from typing import Any, TypeAlias

# StrEnum backport for Python < 3.11
if sys.version_info >= (3, 11):
    from enum import StrEnum
else:

    class StrEnum(str, Enum):
        """String enumeration compatibility for Python < 3.11."""

        @staticmethod
        def _generate_next_value_(name: str, start: int, count: int, last_values: list[Any]) -> str:
            return name.lower()

        def __str__(self) -> str:
            return str(self.value)


__all__ = [
    "CompositionMode",
    "EmitMessage",
    "Lifecycle",
    "MessageListener",
    "StatusListener",
    "TaskCallable",
]


class Lifecycle(StrEnum):
    """Execution lifecycle of a task node.

    A node moves ``PENDING -> RUNNING -> COMPLETE | ERROR``, or straight from
    ``PENDING`` to ``SKIPPED`` when it is disabled at entry.

    Attributes:
        PENDING: Node has not been entered yet.
        RUNNING: Node is executing.
        COMPLETE: Node finished and produced a value.
        ERROR: Node, or one of its descendants, raised.
        SKIPPED: Node was disabled and never ran.
    """

    PENDING = auto()
    RUNNING = auto()
    COMPLETE = auto()
    ERROR = auto()
    SKIPPED = auto()

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition can follow this state."""
        return self in (Lifecycle.COMPLETE, Lifecycle.ERROR, Lifecycle.SKIPPED)


class CompositionMode(StrEnum):
    """How a composite runs its children.

    Attributes:
        SEQUENTIAL: Children run one after another, threading values.
        PARALLEL: Children start together and join on completion.
    """

    SEQUENTIAL = auto()
    PARALLEL = auto()


EmitMessage: TypeAlias = Callable[[str], None]
"""Callback handed to every task callable for reporting progress text.

The object passed at run time is a :class:`~easyflow.core.events.MessageEmitter`,
which also exposes the owning workflow as ``emit_message.workflow``.
"""

TaskCallable: TypeAlias = Callable[..., Any | Awaitable[Any]]
"""A task function: ``(input, emit_message) -> value | awaitable``."""

StatusListener: TypeAlias = Callable[[str | None, str, Lifecycle], Any]
"""Listener receiving ``(id, name, lifecycle)`` for named units."""

MessageListener: TypeAlias = Callable[[str | None, str | None, str], Any]
"""Listener receiving ``(id, name, text)`` for emitted messages."""
