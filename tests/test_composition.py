"""Tests for building composition trees."""

from __future__ import annotations

from typing import Any

import pytest

from easyflow import (
    AmbiguousRootError,
    CallableStep,
    CompositionMode,
    Decomposition,
    InvalidTaskItemError,
    Lifecycle,
    MessageEmitter,
    ParallelGroup,
    SequentialGroup,
    TaskClassError,
    TaskProvider,
    Workflow,
    WorkflowConstructionError,
)


def fetch(value: Any) -> Any:
    return value


def parse(value: Any) -> Any:
    return value


def store(value: Any) -> Any:
    return value


class Importer:
    """Task class listing unbound functions in its body."""

    name = "Import"

    def load(self, value: list[str]) -> list[str]:
        return [*value, "load"]

    def save(self, value: list[str]) -> list[str]:
        return [*value, "save"]

    sequence = [load, save]


class Fanout:
    """Task class implementing the provider capability."""

    def decompose(self) -> Decomposition:
        return Decomposition(CompositionMode.PARALLEL, (self.left, self.right), name="Fan out")

    def left(self, value: int) -> int:
        return value - 1

    def right(self, value: int) -> int:
        return value + 1


@pytest.mark.unit
class TestGroupBuilding:
    """Tests for turning builder arguments into groups."""

    def test_leading_string_is_name(self, workflow: Workflow) -> None:
        """Test a leading string becomes the group's display name."""
        group = workflow.sequence("Build", fetch, parse)

        assert isinstance(group, SequentialGroup)
        assert group.name == "Build"
        assert [child.id() for child in group.children] == ["fetch", "parse"]

    def test_parallel_builds_parallel_group(self, workflow: Workflow) -> None:
        """Test parallel creates a ParallelGroup with leaf children."""
        group = workflow.parallel(fetch, parse)

        assert isinstance(group, ParallelGroup)
        assert group.name is None
        assert all(isinstance(child, CallableStep) for child in group.children)

    def test_invalid_item(self, workflow: Workflow) -> None:
        """Test non callable items are rejected."""
        with pytest.raises(InvalidTaskItemError) as exc_info:
            workflow.sequence(fetch, 42)

        assert exc_info.value.item == 42
        assert workflow.roots == []

    def test_string_after_first_position_is_invalid(self, workflow: Workflow) -> None:
        """Test only the leading string is treated as a name."""
        with pytest.raises(InvalidTaskItemError):
            workflow.sequence(fetch, "not a name")

    def test_id_getter_and_setter(self, workflow: Workflow) -> None:
        """Test id() reads without an argument and chains when setting."""
        group = workflow.sequence(fetch)

        assert group.id() is None
        assert group.id("main") is group
        assert group.id() == "main"

    def test_leaf_id_defaults_to_callable_name(self, workflow: Workflow) -> None:
        """Test a leaf is identified by its callable's name."""
        group = workflow.sequence(fetch, lambda value: value)

        assert [child.id() for child in group.children] == ["fetch", "<lambda>"]


@pytest.mark.unit
class TestChaining:
    """Tests for chain-allocate-and-adopt."""

    def test_top_level_call_allocates_floating_root(self, workflow: Workflow) -> None:
        """Test every top level call adds one floating root."""
        first = workflow.sequence(fetch)
        second = workflow.sequence(parse)

        assert len(workflow.roots) == 2
        assert first.parent is workflow.roots[0]
        assert second.parent is workflow.roots[1]

    def test_chained_node_appends_sibling(self, workflow: Workflow) -> None:
        """Test chaining on a node appends under the same root."""
        first = workflow.sequence(fetch)
        second = first.parallel(parse, store)

        assert len(workflow.roots) == 1
        assert workflow.roots[0].children == (first, second)

    def test_splice_single_node(self, workflow: Workflow) -> None:
        """Test passing a built node into another call moves it in place."""
        inner = workflow.sequence(parse)
        outer = workflow.parallel(fetch, inner)

        assert len(workflow.roots) == 1
        assert inner.parent is outer
        assert outer.children[1] is inner

    def test_splice_chain(self, workflow: Workflow) -> None:
        """Test passing the tail of a chain moves the whole chain."""
        head = workflow.sequence(parse)
        tail = head.sequence(store)
        outer = workflow.parallel(fetch, tail)

        chain = outer.children[1]
        assert len(workflow.roots) == 1
        assert isinstance(chain, SequentialGroup)
        assert chain.children == (head, tail)

    def test_node_cannot_be_adopted_twice(self, workflow: Workflow) -> None:
        """Test a node already spliced somewhere cannot be spliced again."""
        inner = workflow.sequence(parse)
        workflow.parallel(inner)

        with pytest.raises(WorkflowConstructionError):
            workflow.parallel(inner)

    def test_chain_after_consumed_node(self, workflow: Workflow) -> None:
        """Test a node cannot be chained after while being consumed."""
        group = workflow.sequence(fetch)

        with pytest.raises(WorkflowConstructionError):
            group.sequence(group)

    def test_adopt_into_own_subtree(self, workflow: Workflow) -> None:
        """Test adoption refuses to create a cycle."""
        outer = workflow.sequence(workflow.sequence(fetch))
        inner = outer.children[0]

        with pytest.raises(WorkflowConstructionError):
            workflow.adopt(outer, inner)

    def test_ambiguous_root(self, workflow: Workflow) -> None:
        """Test formalizing fails while more than one root floats."""
        workflow.sequence(fetch)
        workflow.sequence(parse)

        with pytest.raises(AmbiguousRootError) as exc_info:
            workflow.status()

        assert exc_info.value.root_count == 2

    @pytest.mark.asyncio
    async def test_ambiguous_root_on_run(self, workflow: Workflow) -> None:
        """Test running fails while more than one root floats."""
        workflow.sequence(fetch)
        workflow.parallel(parse)

        with pytest.raises(AmbiguousRootError):
            await workflow.run()


@pytest.mark.unit
class TestTaskClasses:
    """Tests for expanding task classes."""

    def test_attribute_decomposition(self, workflow: Workflow) -> None:
        """Test a class body member list expands into bound leaves."""
        group = workflow.sequence(Importer).children[0]

        assert isinstance(group, SequentialGroup)
        assert group.id() == "Importer"
        assert group.name == "Import"
        assert [child.id() for child in group.children] == ["Importer.load", "Importer.save"]

    def test_provider_decomposition(self, workflow: Workflow) -> None:
        """Test a TaskProvider expands according to its decomposition."""
        assert isinstance(Fanout(), TaskProvider)
        assert not isinstance(Importer(), TaskProvider)

        group = workflow.parallel(Fanout).children[0]

        assert isinstance(group, ParallelGroup)
        assert group.id() == "Fanout"
        assert group.name == "Fan out"
        assert [child.id() for child in group.children] == ["Fanout.left", "Fanout.right"]

    def test_instance_members_and_non_string_name(self, workflow: Workflow) -> None:
        """Test members assigned in __init__ and a non string name attribute."""

        class Report:
            name = 3

            def __init__(self) -> None:
                self.parallel = (self.render,)

            def render(self, value: Any) -> str:
                return "report"

        group = workflow.sequence(Report).children[0]

        assert isinstance(group, ParallelGroup)
        assert group.name is None
        assert group.children[0].id() == "Report.render"

    def test_missing_members(self, workflow: Workflow) -> None:
        """Test a class without member lists is rejected."""

        class Empty:
            pass

        with pytest.raises(TaskClassError, match="Empty") as exc_info:
            workflow.sequence(Empty)

        assert exc_info.value.class_name == "Empty"

    def test_both_member_lists(self, workflow: Workflow) -> None:
        """Test a class with both member lists is rejected."""

        class Both:
            sequence = [fetch]
            parallel = [parse]

        with pytest.raises(TaskClassError, match="both"):
            workflow.sequence(Both)

    def test_constructor_arguments(self, workflow: Workflow) -> None:
        """Test a class needing more than the emitter to be built is rejected."""

        class NeedsConfig:
            sequence = [fetch]

            def __init__(self, emit_message: Any, config: dict[str, Any]) -> None:
                self.config = config

        with pytest.raises(TaskClassError, match="instantiated"):
            workflow.sequence(NeedsConfig)

    def test_non_callable_member(self, workflow: Workflow) -> None:
        """Test member lists may only hold callables."""

        class Broken:
            sequence = ["fetch"]

        with pytest.raises(TaskClassError, match="not callable"):
            workflow.sequence(Broken)

    def test_provider_must_return_decomposition(self, workflow: Workflow) -> None:
        """Test decompose() results are validated."""

        class Loose:
            def decompose(self) -> list[Any]:
                return [fetch]

        with pytest.raises(TaskClassError, match="Decomposition"):
            workflow.sequence(Loose)

    @pytest.mark.asyncio
    async def test_members_bound_to_instance(self, workflow: Workflow) -> None:
        """Test expanded members run as methods of one instance."""
        workflow.sequence(Importer)
        assert await workflow.run(["start"]) == ["start", "load", "save"]

        workflow = Workflow()
        workflow.sequence(Fanout)
        assert sorted(await workflow.run(10)) == [9, 11]

    @pytest.mark.asyncio
    async def test_constructor_receives_emitter(self, workflow: Workflow) -> None:
        """Test a constructor taking one argument is handed a bound emitter."""

        class Archive:
            name = "Archive"

            def __init__(self, emit_message: Any) -> None:
                self.emit_message = emit_message
                self.sequence = [self.pack, self.upload]

            def pack(self, value: Any) -> Any:
                self.emit_message("packing")
                return value

            def upload(self, value: Any) -> Any:
                self.emit_message.workflow.disable("Archive.upload")
                self.emit_message("uploading")
                return value

        workflow.sequence(fetch, Archive)
        status = workflow.status()

        assert await workflow.run("data") == "data"
        assert status.find("Archive").message == "uploading"
        assert status.find("Archive.upload").lifecycle is Lifecycle.COMPLETE
        assert workflow.is_disabled("Archive.upload")

    def test_unbound_emitter(self) -> None:
        """Test an emitter used before its task exists fails clearly."""
        emitter = MessageEmitter()

        with pytest.raises(RuntimeError, match="not bound"):
            emitter("too early")
        with pytest.raises(RuntimeError, match="not bound"):
            _ = emitter.workflow


@pytest.mark.unit
class TestNestedWorkflows:
    """Tests for embedding one workflow into another."""

    def test_embed_workflow_instance(self, workflow: Workflow) -> None:
        """Test a Workflow item is inlined and linked to its host."""
        nested = Workflow(id="nested")
        nested.sequence(parse, store)

        host_group = workflow.sequence(fetch, nested)

        inlined = host_group.children[1]
        assert nested.parent_workflow is workflow
        assert nested.roots == []
        assert inlined.id() == "nested"
        assert inlined.parent is host_group
        assert inlined.workflow is nested

    def test_embed_node_of_other_workflow(self, workflow: Workflow) -> None:
        """Test passing a node built on another workflow embeds that workflow."""
        nested = Workflow()
        node = nested.sequence(parse).id("parsing")

        host_group = workflow.parallel(fetch, node)

        assert host_group.children[1] is node
        assert node.id() == "parsing"
        assert nested.parent_workflow is workflow

    def test_embedded_root_keeps_own_id(self, workflow: Workflow) -> None:
        """Test the nested workflow id only fills in a missing root id."""
        nested = Workflow(id="outer_name")
        nested.sequence(parse).id("own")

        host_group = workflow.sequence(nested)

        assert host_group.children[0].id() == "own"

    def test_embed_self(self, workflow: Workflow) -> None:
        """Test a workflow cannot embed itself."""
        workflow.sequence(fetch)

        with pytest.raises(WorkflowConstructionError):
            workflow.sequence(workflow)

    def test_embed_ambiguous(self, workflow: Workflow) -> None:
        """Test a nested workflow must reduce to one root."""
        nested = Workflow()
        nested.sequence(fetch)
        nested.sequence(parse)

        with pytest.raises(AmbiguousRootError):
            workflow.sequence(nested)

    @pytest.mark.asyncio
    async def test_run_embedded(self, workflow: Workflow) -> None:
        """Test values flow through an embedded workflow."""
        nested = Workflow()
        nested.sequence(lambda value: value * 3, lambda value: value + 1)

        workflow.sequence(lambda value: value + 1, nested, lambda value: value * 2)

        assert await workflow.run(1) == 14


@pytest.mark.unit
@pytest.mark.asyncio
class TestCallableArity:
    """Tests for invoking callables with as many arguments as they accept."""

    async def test_no_arguments(self, workflow: Workflow) -> None:
        """Test a callable taking nothing is called without arguments."""
        workflow.sequence(lambda: "constant")

        assert await workflow.run("ignored") == "constant"

    async def test_input_and_emitter(self, workflow: Workflow) -> None:
        """Test a two argument callable receives the emitter."""
        received: list[Any] = []

        def task(value: Any, emit_message: Any) -> Any:
            received.append(emit_message)
            return value

        workflow.sequence(task)
        await workflow.run(1)

        assert isinstance(received[0], MessageEmitter)
        assert received[0].workflow is workflow

    async def test_var_positional(self, workflow: Workflow) -> None:
        """Test *args callables receive both arguments."""
        workflow.sequence(lambda *args: len(args))

        assert await workflow.run("x") == 2

    async def test_callable_object(self, workflow: Workflow) -> None:
        """Test instances with __call__ are wrapped as leaves."""

        class Scale:
            __name__ = "scale"

            def __call__(self, value: int) -> int:
                return value * 5

        group = workflow.sequence(Scale())

        assert group.children[0].id() == "scale"
        assert await workflow.run(2) == 10
