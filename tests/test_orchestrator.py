# test_orchestrator.py
import asyncio

import pytest

from precedent import (
    Orchestrator,
    OrchestratorOptions,
    orchestrate,
    Ok,
    Error,
    InvalidInputError,
    CircularDependencyError,
    OrchestratorError,
)
from conftest import Node


# Validating options

def test_valid_options_do_not_raise(record):
    Orchestrator(root={"deps": []}, dependencies="deps", handler=record)


@pytest.mark.parametrize("root", [False, None, 42, "root", b"root"])
def test_non_object_root_is_rejected(root, record):
    with pytest.raises(InvalidInputError, match="Expected `root` to be of type `object`"):
        Orchestrator(root=root, dependencies="deps", handler=record)


def test_non_callable_handler_is_rejected():
    with pytest.raises(InvalidInputError, match="Expected `handler` to be of type `Callable`"):
        Orchestrator(root={"deps": []}, dependencies="deps", handler=False)


def test_invalid_dependencies_key_is_rejected(record):
    with pytest.raises(InvalidInputError, match="Expected `dependencies`"):
        Orchestrator(root={"deps": []}, dependencies=False, handler=record)


def test_root_without_dependencies_is_rejected(record):
    with pytest.raises(InvalidInputError, match="`root dependencies`"):
        Orchestrator(root={"other": []}, dependencies="deps", handler=record)


def test_root_with_non_sequence_dependencies_is_rejected(record):
    with pytest.raises(InvalidInputError, match="`root dependencies` to be of type `Sequence`"):
        Orchestrator(root={"deps": {"a", "b"}}, dependencies="deps", handler=record)


def test_invalid_input_is_a_type_error(record):
    with pytest.raises(TypeError):
        Orchestrator(root=None, dependencies="deps", handler=record)


def test_from_options(baz_graph, record):
    _, _, baz = baz_graph
    o = Orchestrator.from_options(
        OrchestratorOptions(root=baz, dependencies="deps", handler=record)
    )
    assert o.root is baz
    assert len(o.registry) == 3


# Circular dependencies

def test_two_node_cycle_fails_at_construction(calls, record):
    foo = Node("foo")
    bar = Node("bar", [foo])
    foo.deps.append(bar)

    with pytest.raises(CircularDependencyError) as excinfo:
        Orchestrator(root=foo, dependencies="deps", handler=record)

    assert excinfo.value.dependent is bar
    assert excinfo.value.dependency is foo
    assert isinstance(excinfo.value, OrchestratorError)
    assert calls == []


def test_cycle_between_mappings_fails_at_construction(record):
    foo = {"name": "foo", "deps": []}
    bar = {"name": "bar", "deps": [foo]}
    foo["deps"].append(bar)

    with pytest.raises(CircularDependencyError):
        Orchestrator(root=foo, dependencies="deps", handler=record)


# Working with objects, mappings and functions

@pytest.mark.asyncio
async def test_objects_run_in_dependency_order():
    results = []

    class Service:
        def __init__(self, name, depends_on=()):
            self.name = name
            self.depends_on = list(depends_on)

        def setup(self):
            results.append(self.name)

    foo = Service("foo")
    bar = Service("bar", [foo])
    baz = Service("baz", [foo, bar])

    o = Orchestrator(root=baz, dependencies="depends_on", handler=lambda node: node.setup())
    await o.start()

    assert results == ["foo", "bar", "baz"]


@pytest.mark.asyncio
async def test_mappings_run_in_dependency_order():
    results = []
    foo = {"label": "foo", "deps": []}
    bar = {"label": "bar", "deps": [foo]}
    baz = {"label": "baz", "deps": [foo, bar]}

    await orchestrate(baz, dependencies="deps", handler=lambda node: results.append(node["label"]))

    assert results == ["foo", "bar", "baz"]


@pytest.mark.asyncio
async def test_functions_run_in_dependency_order():
    results = []

    def foo():
        results.append("foo")

    def bar():
        results.append("bar")

    def baz():
        results.append("baz")

    foo.depends_on = []
    bar.depends_on = [foo]
    baz.depends_on = [foo, bar]

    o = Orchestrator(root=baz, dependencies="depends_on", handler=lambda node: node())
    await o.start()

    assert results == ["foo", "bar", "baz"]


@pytest.mark.asyncio
async def test_async_handlers_are_awaited():
    results = []

    async def handler(node):
        await asyncio.sleep(0.01 if node.label == "foo" else 0)
        results.append(node.label)

    foo = Node("foo")
    bar = Node("bar", [foo])
    baz = Node("baz", [foo, bar])

    await Orchestrator(root=baz, dependencies="deps", handler=handler).start()

    assert results == ["foo", "bar", "baz"]


@pytest.mark.asyncio
async def test_custom_accessor(calls, record):
    leaf = Node("leaf")
    root = Node("root")
    children = {id(root): [leaf], id(leaf): []}

    o = Orchestrator(
        root=root,
        dependencies=lambda node: children[id(node)],
        handler=record,
    )
    await o.start()

    assert calls == ["leaf", "root"]


def test_custom_accessor_is_read_once_per_entity(record):
    leaf = Node("leaf")
    root = Node("root", [leaf])
    reads = []

    def accessor(node):
        reads.append(node.label)
        return node.deps

    Orchestrator(root=root, dependencies=accessor, handler=record)

    assert reads == ["root", "leaf"]


@pytest.mark.asyncio
async def test_entities_without_the_key_have_no_dependencies(calls):
    leaf = object()
    root = {"deps": [leaf]}

    await orchestrate(root, dependencies="deps", handler=lambda node: calls.append(node))

    assert calls == [leaf, root]


def test_non_sequence_dependencies_below_root_are_rejected(record):
    child = Node("child")
    child.deps = "not-a-list"

    with pytest.raises(InvalidInputError, match="dependencies of Node\\('child'\\)"):
        Orchestrator(root=Node("root", [child]), dependencies="deps", handler=record)


# Execution outcomes

def test_construction_invokes_no_handler(baz_graph, calls, record):
    _, _, baz = baz_graph
    Orchestrator(root=baz, dependencies="deps", handler=record)
    assert calls == []


@pytest.mark.asyncio
async def test_diamond_runs_shared_dependency_once(diamond, calls, record):
    top, *_ = diamond
    await Orchestrator(root=top, dependencies="deps", handler=record).start()

    assert calls.count("bottom") == 1
    assert sorted(calls) == ["bottom", "left", "right", "top"]
    assert calls[0] == "bottom"
    assert calls[-1] == "top"


@pytest.mark.asyncio
async def test_start_raises_handler_error_verbatim(baz_graph):
    _, _, baz = baz_graph
    boom = RuntimeError("boom")

    async def handler(node):
        if node.label == "bar":
            raise boom

    with pytest.raises(RuntimeError) as excinfo:
        await Orchestrator(root=baz, dependencies="deps", handler=handler).start()

    assert excinfo.value is boom


@pytest.mark.asyncio
async def test_run_returns_result(baz_graph):
    _, _, baz = baz_graph
    boom = ValueError("boom")

    def failing(node):
        if node.label == "foo":
            raise boom

    ok = await Orchestrator(root=baz, dependencies="deps", handler=lambda n: None).run()
    failed = await Orchestrator(root=baz, dependencies="deps", handler=failing).run()

    assert isinstance(ok, Ok)
    assert isinstance(failed, Error)
    assert failed.error is boom


@pytest.mark.asyncio
async def test_start_can_be_repeated(baz_graph, calls, record):
    _, _, baz = baz_graph
    o = Orchestrator(root=baz, dependencies="deps", handler=record)

    await o.start()
    await o.start()

    assert calls == ["foo", "bar", "baz", "foo", "bar", "baz"]


def test_order_and_stats(baz_graph, record):
    foo, bar, baz = baz_graph
    o = Orchestrator(root=baz, dependencies="deps", handler=record)

    assert o.order == (foo, bar, baz)
    assert o.stats().task_count == 3
    assert "tasks=3" in repr(o)
