"""
Graph analysis — static inspection without execution.
"""

from __future__ import annotations

from dataclasses import dataclass
from graphlib import TopologicalSorter

from precedent._graph import TaskRegistry
from precedent._types import Entity, TaskId

# ═══════════════════════════════════════════════════════════════════════════════
# GraphStats — Analysis Result
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class GraphStats:
    """Statistics about a built dependency graph."""
    task_count: int
    edge_count: int
    max_depth: int
    leaf_count: int
    parallel_groups: int


# ═══════════════════════════════════════════════════════════════════════════════
# analyze() — Analyze Graph Structure
# ═══════════════════════════════════════════════════════════════════════════════

def analyze(registry: TaskRegistry) -> GraphStats:
    """
    Analyze a built task registry.

    Example:
        stats = analyze(orchestrator.registry)
        print(f"Tasks: {stats.task_count}, Parallel groups: {stats.parallel_groups}")
    """
    order = _static_order(registry)
    depth: dict[TaskId, int] = {}
    height: dict[TaskId, int] = {}

    # Dependency-first: every dependency has its height before its dependents
    for task_id in order:
        deps = registry[task_id].dependencies
        height[task_id] = 1 + max((height[d] for d in deps), default=-1)

    # Root-first for depth
    for task_id in reversed(order):
        if task_id == registry.root:
            depth[task_id] = 0
        for dep in registry[task_id].dependencies:
            depth[dep] = max(depth.get(dep, 0), depth[task_id] + 1)

    leaves = [t for t in registry if not registry[t].dependencies]

    return GraphStats(
        task_count=len(registry),
        edge_count=len(registry.edges),
        max_depth=max(depth.values(), default=0),
        leaf_count=len(leaves),
        # Tasks of equal height have no path between them and can run together
        parallel_groups=len(set(height.values())),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# topological_order() — Dependency-first entities
# ═══════════════════════════════════════════════════════════════════════════════

def topological_order(registry: TaskRegistry) -> tuple[Entity, ...]:
    """Entities in the order a sequential executor would run them."""
    return tuple(registry[t].entity for t in _static_order(registry))


def _static_order(registry: TaskRegistry) -> list[TaskId]:
    sorter: TopologicalSorter[TaskId] = TopologicalSorter()
    for task_id in sorted(registry):
        sorter.add(task_id, *registry[task_id].dependencies)
    sorter.prepare()

    order: list[TaskId] = []
    while sorter.is_active():
        ready = sorted(sorter.get_ready())
        order.extend(ready)
        sorter.done(*ready)
    return order


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("GraphStats", "analyze", "topological_order")
