"""
precedent — run a handler over a dependency graph, dependencies first.

    from precedent import Orchestrator

    o = Orchestrator(root=app, dependencies="requires", handler=setup)
    await o.start()   # every entity once, never before its dependencies

    match await o.run():   # same, as a kungfu Result
        case Ok(_): ...
        case Error(exc): ...
"""

from precedent import lift
from precedent._types import (
    Result,
    Ok,
    Error,
    Entity,
    TaskId,
    Handler,
    DependencyAccessor,
    Outcome,
)
from precedent._errors import (
    OrchestratorError,
    InvalidInputError,
    CircularDependencyError,
    HandlerError,
)
from precedent._validate import KeyAccessor
from precedent._graph import Task, TaskRegistry, build
from precedent._run import execute
from precedent._analyze import GraphStats, analyze, topological_order
from precedent._orchestrator import (
    OrchestratorOptions,
    Orchestrator,
    orchestrate,
)

__version__ = "0.1.0"

__all__ = (
    "lift",
    # Types
    "Result",
    "Ok",
    "Error",
    "Entity",
    "TaskId",
    "Handler",
    "DependencyAccessor",
    "Outcome",
    # Errors
    "OrchestratorError",
    "InvalidInputError",
    "CircularDependencyError",
    "HandlerError",
    # Graph
    "KeyAccessor",
    "Task",
    "TaskRegistry",
    "build",
    "execute",
    "GraphStats",
    "analyze",
    "topological_order",
    # Orchestrator
    "OrchestratorOptions",
    "Orchestrator",
    "orchestrate",
)
