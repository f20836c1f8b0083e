"""
Construction-parameter validation.

Turns the user-facing `dependencies` option into a DependencyAccessor and
checks every value read through it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final
from collections.abc import Mapping, Sequence

from precedent._errors import InvalidInputError
from precedent._types import Entity, DependencyAccessor, Handler

_SCALARS: Final = (bool, int, float, complex, str, bytes, bytearray)
_MISSING: Final = object()


# ═══════════════════════════════════════════════════════════════════════════════
# KeyAccessor — dependencies stored under a name
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class KeyAccessor:
    """
    Reads dependencies stored under `key`.

    Mappings are read with item access, everything else (objects,
    functions, classes) with attribute access. A missing key means
    "no dependencies".
    """

    key: str

    def __call__(self, entity: Entity) -> Sequence[Entity]:
        value = self.lookup(entity)
        return () if value is _MISSING else value

    def lookup(self, entity: Entity) -> Any:
        if isinstance(entity, Mapping):
            return entity.get(self.key, _MISSING)
        return getattr(entity, self.key, _MISSING)


# ═══════════════════════════════════════════════════════════════════════════════
# Option checks
# ═══════════════════════════════════════════════════════════════════════════════


def validate_root(root: object) -> Entity:
    if root is None or isinstance(root, _SCALARS):
        raise InvalidInputError("root", "object", root)
    return root


def validate_handler(handler: object) -> Handler:
    if not callable(handler):
        raise InvalidInputError("handler", "Callable", handler)
    return handler


def resolve_accessor(dependencies: object) -> DependencyAccessor:
    """
    Build the accessor for the `dependencies` option.

        resolve_accessor("depends_on")          # key / attribute name
        resolve_accessor(lambda n: n.children)  # explicit accessor
    """
    match dependencies:
        case str() as key:
            return KeyAccessor(key)
        case _ if callable(dependencies):
            return dependencies
        case _:
            raise InvalidInputError("dependencies", "str | Callable", dependencies)


def require_root_dependencies(root: Entity, accessor: DependencyAccessor) -> None:
    """The root must declare its dependencies explicitly, even if empty."""
    if not isinstance(accessor, KeyAccessor):
        # Callable accessors are read once, by the builder
        return
    value = accessor.lookup(root)
    if value is _MISSING:
        raise InvalidInputError("root dependencies", "Sequence", None)
    if not is_sequence(value):
        raise InvalidInputError("root dependencies", "Sequence", value)


def read_dependencies(
    entity: Entity,
    accessor: DependencyAccessor,
    *,
    name: str = "dependencies",
) -> Sequence[Entity]:
    value = accessor(entity)
    if not is_sequence(value):
        raise InvalidInputError(name, "Sequence", value)
    return value


def is_sequence(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


__all__ = (
    "KeyAccessor",
    "validate_root",
    "validate_handler",
    "resolve_accessor",
    "require_root_dependencies",
    "read_dependencies",
    "is_sequence",
)
