"""
Errors raised while constructing an orchestrator.

Handler failures are never wrapped: whatever a handler raises is the
outcome of the execution, unchanged.
"""

from __future__ import annotations

from collections.abc import Sequence

from precedent._types import Entity

# ═══════════════════════════════════════════════════════════════════════════════
# Construction Errors
# ═══════════════════════════════════════════════════════════════════════════════


class OrchestratorError(Exception):
    """Base class for construction failures."""


class InvalidInputError(OrchestratorError, TypeError):
    """Construction parameters have the wrong shape."""

    def __init__(self, name: str, expected: str, value: object) -> None:
        self.name = name
        self.expected = expected
        self.value = value
        super().__init__(
            f"Expected `{name}` to be of type `{expected}`, "
            f"got `{type(value).__name__}`"
        )


class CircularDependencyError(OrchestratorError):
    """
    A dependency edge would close a cycle.

    `cycle` lists the entities along the loop, starting and ending with
    the same entity.
    """

    def __init__(
        self,
        dependent: Entity,
        dependency: Entity,
        cycle: Sequence[Entity],
    ) -> None:
        self.dependent = dependent
        self.dependency = dependency
        self.cycle = tuple(cycle)
        path = " -> ".join(describe(e) for e in self.cycle)
        super().__init__(
            f"Circular dependency detected: {describe(dependent)} "
            f"depends on {describe(dependency)} ({path})"
        )


HandlerError = Exception
"""Anything a handler raises. Surfaced verbatim, never wrapped."""


def describe(entity: Entity) -> str:
    """Short human-readable label for an entity."""
    name = getattr(entity, "__qualname__", None)
    if isinstance(name, str):
        return name
    text = repr(entity)
    return text if len(text) <= 60 else text[:57] + "..."


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "OrchestratorError",
    "InvalidInputError",
    "CircularDependencyError",
    "HandlerError",
    "describe",
)
