"""Core protocols for easyflow.

This module defines the capability a task class implements to expand into a
sub-tree. Using Protocol keeps task classes free of any base class while still
allowing them to be validated once, when they are wrapped.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from easyflow.core.types import CompositionMode, TaskCallable

__all__ = ["Decomposition", "TaskProvider"]


@dataclass(frozen=True)
class Decomposition:
    """Ordered member callables of a task class plus how to run them.

    Attributes:
        mode: Whether the members run in sequence or in parallel.
        members: The member callables, each following the
            ``(input, emit_message)`` contract.
        name: Optional display name; marks the expanded group a named unit.

    Example:
        >>> Decomposition(CompositionMode.SEQUENTIAL, (self.fetch, self.store), name="Import")
    """

    mode: CompositionMode
    members: Sequence[TaskCallable] = field(default_factory=tuple)
    name: str | None = None


@runtime_checkable
class TaskProvider(Protocol):
    """Protocol for task classes that expand into a sub-tree.

    A task class either implements ``decompose`` or exposes exactly one of a
    ``sequence`` or ``parallel`` list of member callables (and optionally a
    ``name``). Both forms are reduced to a :class:`Decomposition` when the
    class is passed to ``sequence``/``parallel``.

    Example:
        >>> class Import:
        ...     def decompose(self) -> Decomposition:
        ...         return Decomposition(CompositionMode.PARALLEL, (self.users, self.groups))
        ...
        ...     def users(self, data, emit_message): ...
        ...
        ...     def groups(self, data, emit_message): ...
    """

    def decompose(self) -> Decomposition:
        """Return the ordered member callables and the composition mode.

        Returns:
            The decomposition of this task instance.
        """
        ...
