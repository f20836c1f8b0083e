"""
Core types for precedent.

Re-exports from kungfu + custom type aliases.
"""

from __future__ import annotations

from typing import Any
from collections.abc import Awaitable, Callable, Sequence

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Graph Vocabulary
# ═══════════════════════════════════════════════════════════════════════════════

type Entity = Any
"""Caller-supplied node: an object, a mapping or a callable."""

type TaskId = int
"""Position of an entity in the identity registry."""

type Handler = Callable[[Entity], Any | Awaitable[Any]]
"""Invoked once per entity. May return a value or an awaitable."""

type DependencyAccessor = Callable[[Entity], Sequence[Entity]]
"""Reads the direct dependencies declared by an entity."""

type Outcome = Result[None, Exception]
"""Result of a whole execution: Ok(None) or the first handler error."""

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Type aliases
    "Entity",
    "TaskId",
    "Handler",
    "DependencyAccessor",
    "Outcome",
)
