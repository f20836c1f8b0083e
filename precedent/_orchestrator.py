"""
Orchestrator — build once, start many times.

Construction validates the options and builds the whole graph
synchronously. Nothing runs until start() or run() is awaited.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from kungfu import Ok, Error

from precedent._analyze import GraphStats, analyze, topological_order
from precedent._errors import describe
from precedent._graph import TaskRegistry, build
from precedent._run import execute
from precedent._types import Entity, DependencyAccessor, Handler, Outcome
from precedent._validate import (
    validate_root,
    validate_handler,
    resolve_accessor,
    require_root_dependencies,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# OrchestratorOptions
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class OrchestratorOptions:
    """
    Construction options.

    root:          entity to build the graph for. Must declare its
                   dependencies (possibly none) under `dependencies`.
    dependencies:  name of the key/attribute listing an entity's
                   dependencies, or a callable returning them.
    handler:       invoked once per entity; sync or async.
    """

    root: Entity
    dependencies: str | DependencyAccessor
    handler: Handler


# ═══════════════════════════════════════════════════════════════════════════════
# Orchestrator
# ═══════════════════════════════════════════════════════════════════════════════


class Orchestrator:
    """
    Runs a handler for every entity of a dependency graph, dependencies first.

    Example:
        foo = {"deps": []}
        bar = {"deps": [foo]}
        baz = {"deps": [foo, bar]}

        o = Orchestrator(root=baz, dependencies="deps", handler=setup)
        await o.start()  # setup(foo), setup(bar), setup(baz)
    """

    __slots__ = ("_root", "_accessor", "_handler", "_registry")

    def __init__(
        self,
        *,
        root: Entity,
        dependencies: str | DependencyAccessor,
        handler: Handler,
    ) -> None:
        self._root = validate_root(root)
        self._accessor = resolve_accessor(dependencies)
        self._handler = validate_handler(handler)

        require_root_dependencies(self._root, self._accessor)
        self._registry = build(self._root, self._accessor, self._handler)

    @classmethod
    def from_options(cls, options: OrchestratorOptions) -> Orchestrator:
        return cls(
            root=options.root,
            dependencies=options.dependencies,
            handler=options.handler,
        )

    @property
    def root(self) -> Entity:
        return self._root

    @property
    def registry(self) -> TaskRegistry:
        return self._registry

    @property
    def order(self) -> tuple[Entity, ...]:
        """Entities, dependencies first."""
        return topological_order(self._registry)

    def stats(self) -> GraphStats:
        return analyze(self._registry)

    async def run(self) -> Outcome:
        """Execute the graph. Returns Ok(None) or Error(first handler error)."""
        logger.debug(f"Starting orchestration of {describe(self._root)} ({len(self._registry)} tasks)")
        return await execute(self._registry)

    async def start(self) -> None:
        """Execute the graph, raising the first handler error as is."""
        match await self.run():
            case Ok(_):
                return None
            case Error(exc):
                raise exc

    def __repr__(self) -> str:
        return f"Orchestrator(root={describe(self._root)}, tasks={len(self._registry)})"


# ═══════════════════════════════════════════════════════════════════════════════
# orchestrate — One-shot
# ═══════════════════════════════════════════════════════════════════════════════


async def orchestrate(
    root: Entity,
    *,
    dependencies: str | DependencyAccessor,
    handler: Handler,
) -> None:
    """
    One-shot orchestration. Shortest API.

    Example:
        await orchestrate(app, dependencies="requires", handler=lambda s: s.setup())
    """
    await Orchestrator(root=root, dependencies=dependencies, handler=handler).start()


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("OrchestratorOptions", "Orchestrator", "orchestrate")
