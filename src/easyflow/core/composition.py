"""Builders turning ``sequence``/``parallel`` arguments into task nodes."""

from __future__ import annotations

import inspect
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from easyflow.core.events import MessageEmitter
from easyflow.core.protocols import Decomposition, TaskProvider
from easyflow.core.types import CompositionMode
from easyflow.exceptions import InvalidTaskItemError, TaskClassError
from easyflow.steps.base import CallableStep, TaskNode
from easyflow.steps.groups import GROUP_TYPES

if TYPE_CHECKING:
    from easyflow.core.types import TaskCallable
    from easyflow.core.workflow import Workflow
    from easyflow.steps.groups import StepGroup

__all__ = ["build_group", "decompose", "wrap_callable", "wrap_class"]


def build_group(workflow: Workflow, mode: CompositionMode, items: Iterable[Any]) -> StepGroup:
    """Build a group from the arguments of a ``sequence``/``parallel`` call.

    A leading string becomes the group's display name. Every other item is
    turned into a node and adopted by the group: callables become leaves,
    classes are expanded, nodes of ``workflow`` are spliced in from its
    floating roots, and other workflows (or their nodes) are embedded.

    Args:
        workflow: The workflow being built.
        mode: Composition mode of the new group.
        items: Optional name followed by the task items.

    Returns:
        The new, still unattached group.

    Raises:
        InvalidTaskItemError: If an item cannot be turned into a node.
        TaskClassError: If a class item cannot be decomposed.
    """
    items = list(items)
    name = items.pop(0) if items and isinstance(items[0], str) else None

    group = GROUP_TYPES[mode](workflow, name=name)
    for item in items:
        workflow.adopt(_to_node(workflow, item), group)
    return group


def _to_node(workflow: Workflow, item: Any) -> TaskNode:
    from easyflow.core.workflow import Workflow

    if isinstance(item, Workflow):
        return workflow.embed(item)
    if isinstance(item, TaskNode):
        if item.workflow is workflow:
            return workflow.claim(item)
        return workflow.embed(item.workflow)
    if inspect.isclass(item):
        return wrap_class(workflow, item)
    if callable(item):
        return wrap_callable(workflow, item)
    raise InvalidTaskItemError(item)


def wrap_callable(workflow: Workflow, func: TaskCallable) -> CallableStep:
    """Wrap a plain callable as a leaf identified by its ``__name__``."""
    return CallableStep(workflow, func)


def wrap_class(workflow: Workflow, task_class: type[Any]) -> StepGroup:
    """Instantiate a task class and expand it into a group of leaves.

    A constructor taking a positional parameter receives a
    :class:`~easyflow.core.events.MessageEmitter`, bound to the class group
    once it exists, so members can report progress or toggle tasks through
    the instance. The group's id is the class name and its name is the
    instance's display name, if any. Each member becomes a leaf bound to the
    instance with id ``"ClassName.member"``, so a single member can be
    disabled on its own.

    Args:
        workflow: The workflow being built.
        task_class: The task class.

    Returns:
        The expanded group.

    Raises:
        TaskClassError: If the class cannot be instantiated or decomposed.
    """
    class_name = task_class.__name__
    emitter = MessageEmitter()
    try:
        instance = task_class(emitter) if _takes_emitter(task_class) else task_class()
    except TypeError as e:
        raise TaskClassError(class_name, f"cannot be instantiated from an emitter alone ({e})") from e

    decomposition = decompose(instance)
    group = GROUP_TYPES[decomposition.mode](workflow, name=decomposition.name, id=class_name)
    emitter.node = group

    for member in decomposition.members:
        if not callable(member):
            raise TaskClassError(class_name, f"member {member!r} is not callable")
        member = _bind(member, instance)
        member_name = getattr(member, "__name__", None)
        leaf = CallableStep(workflow, member, id=f"{class_name}.{member_name}" if member_name else None)
        workflow.adopt(leaf, group)
    return group


def decompose(instance: Any) -> Decomposition:
    """Reduce a task class instance to its :class:`Decomposition`.

    Instances implementing :class:`TaskProvider` are asked directly. Otherwise
    the instance must expose exactly one of a ``sequence`` or ``parallel``
    list (or tuple) of member callables, and may expose a string ``name``.

    Args:
        instance: An instance of a task class.

    Returns:
        The validated decomposition.

    Raises:
        TaskClassError: If the instance does not describe its members.
    """
    class_name = type(instance).__name__

    if isinstance(instance, TaskProvider):
        decomposition = instance.decompose()
        if not isinstance(decomposition, Decomposition):
            raise TaskClassError(class_name, "decompose() must return a Decomposition")
        return decomposition

    sequence = getattr(instance, "sequence", None)
    parallel = getattr(instance, "parallel", None)
    has_sequence = isinstance(sequence, (list, tuple))
    has_parallel = isinstance(parallel, (list, tuple))

    if has_sequence and has_parallel:
        raise TaskClassError(class_name, 'defines both "sequence" and "parallel"; exactly one is allowed')
    if not (has_sequence or has_parallel):
        raise TaskClassError(class_name, 'missing "sequence" (or "parallel") list of sub tasks')

    name = getattr(instance, "name", None)
    if has_sequence:
        return Decomposition(CompositionMode.SEQUENTIAL, tuple(sequence), _display_name(name))
    return Decomposition(CompositionMode.PARALLEL, tuple(parallel), _display_name(name))


def _display_name(name: Any) -> str | None:
    return name if isinstance(name, str) else None


def _bind(member: TaskCallable, instance: Any) -> TaskCallable:
    # functions listed in the class body are still unbound
    if inspect.isfunction(member) and getattr(type(instance), member.__name__, None) is member:
        return member.__get__(instance, type(instance))
    return member


def _takes_emitter(task_class: type[Any]) -> bool:
    try:
        parameters = inspect.signature(task_class).parameters.values()
    except (TypeError, ValueError):
        return False
    positional = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    return any(parameter.kind in positional for parameter in parameters)
