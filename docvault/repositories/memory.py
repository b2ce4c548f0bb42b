"""
In-memory repository.

A non-persistent, insertion-ordered collection. State lives only as long as
the repository object.
"""

from __future__ import annotations

import copy
from typing import Generic

from .base import Repository, T


class InMemoryRepository(Repository[T], Generic[T]):
    """
    Repository backed by an insertion-ordered dict.

    Entities are deep-copied on the way in and out, so callers can never
    mutate stored state without going through ``replace``.
    """

    def __init__(self) -> None:
        self._items: dict[str, T] = {}

    async def get(self, id: str) -> T | None:
        item = self._items.get(id)
        return copy.deepcopy(item) if item is not None else None

    async def list(self) -> list[T]:
        return [copy.deepcopy(item) for item in self._items.values()]

    async def add(self, entity: T) -> str:
        if not entity.id:
            raise ValueError("Entity must have an ID before it is stored")
        if entity.id in self._items:
            raise ValueError(f"Entity with ID '{entity.id}' already exists")
        self._items[entity.id] = copy.deepcopy(entity)
        return entity.id

    async def replace(self, id: str, entity: T) -> bool:
        if id not in self._items:
            return False
        self._items[id] = copy.deepcopy(entity)
        return True

    async def delete(self, id: str) -> bool:
        return self._items.pop(id, None) is not None

    async def count(self) -> int:
        return len(self._items)

    async def clear(self) -> None:
        self._items.clear()
