"""
Identity registry — stable integer handles for arbitrary entities.

Entities may be unhashable (dicts, lists, namespaces), so they cannot be
used as dict keys directly. The registry keeps an append-only arena and
hands out positions in it.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterator

from precedent._types import Entity, TaskId


class IdentityRegistry:
    """
    Append-only arena of distinct entities.

    Hashable entities are the same node when they compare equal (their
    own __eq__/__hash__). Unhashable entities are mutable containers whose
    value may change after discovery; they are the same node only when
    they are the same object.
    """

    __slots__ = ("_arena", "_by_value", "_by_ref")

    def __init__(self) -> None:
        self._arena: list[Entity] = []
        self._by_value: dict[Hashable, TaskId] = {}
        # id() is stable: the arena keeps every entity alive
        self._by_ref: dict[int, TaskId] = {}

    def id_for(self, entity: Entity) -> TaskId:
        """Return the handle for `entity`, registering it on first sight."""
        found = self.find(entity)
        if found is not None:
            return found

        task_id = len(self._arena)
        self._arena.append(entity)
        if _hashable(entity):
            self._by_value[entity] = task_id
        else:
            self._by_ref[id(entity)] = task_id
        return task_id

    def find(self, entity: Entity) -> TaskId | None:
        if _hashable(entity):
            return self._by_value.get(entity)
        return self._by_ref.get(id(entity))

    def entity(self, task_id: TaskId) -> Entity:
        return self._arena[task_id]

    def __contains__(self, entity: object) -> bool:
        return self.find(entity) is not None

    def __len__(self) -> int:
        return len(self._arena)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self._arena)


def _hashable(value: object) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


__all__ = ("IdentityRegistry",)
