# conftest.py
import pytest


class Node:
    """Plain object entity: label plus a `deps` list."""

    def __init__(self, label, deps=()):
        self.label = label
        self.deps = list(deps)

    def __repr__(self):
        return f"Node({self.label!r})"


@pytest.fixture
def calls():
    """Labels in the order handlers ran."""
    return []


@pytest.fixture
def record(calls):
    """Sync handler appending each node's label."""
    def handler(node):
        calls.append(node.label)
    return handler


@pytest.fixture
def baz_graph():
    """baz -> [foo, bar], bar -> [foo]."""
    foo = Node("foo")
    bar = Node("bar", [foo])
    baz = Node("baz", [foo, bar])
    return foo, bar, baz


@pytest.fixture
def diamond():
    """top -> [left, right], left -> [bottom], right -> [bottom]."""
    bottom = Node("bottom")
    left = Node("left", [bottom])
    right = Node("right", [bottom])
    top = Node("top", [left, right])
    return top, left, right, bottom
