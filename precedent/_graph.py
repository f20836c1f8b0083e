"""
Graph builder — walks the dependency relation from a root entity.

Produces an immutable TaskRegistry: every distinct entity gets one Task,
registered only after all of its dependencies have tasks.

    registry = build(root, KeyAccessor("depends_on"), handler)
    registry[registry.root].dependencies  # -> (0, 1)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from graphlib import CycleError, TopologicalSorter
from types import MappingProxyType
from typing import Any
from collections.abc import Callable, Iterator, Mapping

from precedent._errors import CircularDependencyError, describe
from precedent._identity import IdentityRegistry
from precedent._types import Entity, TaskId, Handler, DependencyAccessor
from precedent._validate import read_dependencies

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Task
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Task:
    """
    One node of the graph.

    `dependencies` are the direct dependencies declared by `entity` at
    discovery time, in declared order. `invoke` calls the handler with
    `entity`.
    """

    id: TaskId
    entity: Entity
    dependencies: tuple[TaskId, ...]
    invoke: Callable[[], Any]


# ═══════════════════════════════════════════════════════════════════════════════
# TaskRegistry — read-only view of the built graph
# ═══════════════════════════════════════════════════════════════════════════════


class TaskRegistry(Mapping[TaskId, Task]):
    """Immutable TaskId -> Task mapping with the root id and edge set."""

    __slots__ = ("_root", "_tasks", "_edges", "_dependents")

    def __init__(
        self,
        root: TaskId,
        tasks: Mapping[TaskId, Task],
        edges: frozenset[tuple[TaskId, TaskId]],
    ) -> None:
        self._root = root
        self._tasks = MappingProxyType(dict(tasks))
        self._edges = edges

        dependents: dict[TaskId, list[TaskId]] = {task_id: [] for task_id in tasks}
        for task_id in sorted(tasks):
            for dependency_id in dict.fromkeys(tasks[task_id].dependencies):
                dependents[dependency_id].append(task_id)
        self._dependents = {k: tuple(v) for k, v in dependents.items()}

    @property
    def root(self) -> TaskId:
        return self._root

    @property
    def edges(self) -> frozenset[tuple[TaskId, TaskId]]:
        """(dependent, dependency) pairs."""
        return self._edges

    def dependents(self, task_id: TaskId) -> tuple[TaskId, ...]:
        """Tasks that declare `task_id` as a direct dependency."""
        return self._dependents[task_id]

    def __getitem__(self, task_id: TaskId) -> Task:
        return self._tasks[task_id]

    def __iter__(self) -> Iterator[TaskId]:
        return iter(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __repr__(self) -> str:
        return f"TaskRegistry(root={self._root}, tasks={len(self)}, edges={len(self._edges)})"


# ═══════════════════════════════════════════════════════════════════════════════
# build() — depth-first, memoized
# ═══════════════════════════════════════════════════════════════════════════════


def build(
    root: Entity,
    accessor: DependencyAccessor,
    handler: Handler,
) -> TaskRegistry:
    """
    Build the task registry for `root`.

    Raises InvalidInputError when an entity's dependencies are not a
    sequence, CircularDependencyError as soon as an edge closes a cycle.
    """
    return _Builder(accessor, handler).build(root)


class _Builder:
    __slots__ = ("_accessor", "_handler", "_identities", "_graph", "_edges", "_tasks")

    def __init__(self, accessor: DependencyAccessor, handler: Handler) -> None:
        self._accessor = accessor
        self._handler = handler
        self._identities = IdentityRegistry()
        # dependent -> dependencies, the shape graphlib expects
        self._graph: dict[TaskId, set[TaskId]] = {}
        self._edges: set[tuple[TaskId, TaskId]] = set()
        self._tasks: dict[TaskId, Task] = {}

    def build(self, root: Entity) -> TaskRegistry:
        root_id = self._visit(root)
        logger.debug(
            f"Built graph for {describe(root)}: "
            f"{len(self._tasks)} tasks, {len(self._edges)} edges"
        )
        return TaskRegistry(root_id, self._tasks, frozenset(self._edges))

    def _visit(self, entity: Entity) -> TaskId:
        task_id = self._identities.id_for(entity)
        if task_id in self._tasks:
            return task_id

        dependencies = read_dependencies(
            entity, self._accessor, name=f"dependencies of {describe(entity)}"
        )

        dependency_ids: list[TaskId] = []
        for dependency in dependencies:
            dependency_id = self._identities.id_for(dependency)
            self._add_edge(task_id, dependency_id)
            self._visit(dependency)
            dependency_ids.append(dependency_id)

        self._tasks[task_id] = Task(
            id=task_id,
            entity=entity,
            dependencies=tuple(dependency_ids),
            invoke=partial(self._handler, entity),
        )
        logger.debug(f"Registered task {task_id} for {describe(entity)} -> {dependency_ids}")
        return task_id

    def _add_edge(self, dependent_id: TaskId, dependency_id: TaskId) -> None:
        self._graph.setdefault(dependent_id, set()).add(dependency_id)
        self._edges.add((dependent_id, dependency_id))

        try:
            TopologicalSorter(self._graph).prepare()
        except CycleError as exc:
            cycle = [self._identities.entity(i) for i in exc.args[1]]
            raise CircularDependencyError(
                self._identities.entity(dependent_id),
                self._identities.entity(dependency_id),
                cycle,
            ) from None


__all__ = ("Task", "TaskRegistry", "build")
