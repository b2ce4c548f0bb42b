"""
Abstract Repository Pattern

Defines the repository interface that abstracts data access operations, so
the document store works with any backing collection.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, TypeVar


@dataclass
class Entity:
    """
    Base class for domain entities.

    All entities have an ID and timestamps. Subclass this for your domain models.

    Example:
        @dataclass
        class Document(Entity):
            title: str = ""
            owner_id: str = ""
    """

    id: str | None = None
    created_at: datetime | None = field(default=None)
    updated_at: datetime | None = field(default=None)


T = TypeVar("T", bound=Entity)


class Repository(ABC, Generic[T]):
    """
    Abstract repository interface for data access.

    Implementations must keep insertion order for ``list`` and must not hand
    out references to stored entities.
    """

    @abstractmethod
    async def get(self, id: str) -> T | None:
        """
        Get a single entity by ID.

        Returns:
            Entity if found, None otherwise
        """

    @abstractmethod
    async def list(self) -> list[T]:
        """Return all entities in insertion order."""

    @abstractmethod
    async def add(self, entity: T) -> str:
        """
        Add a new entity.

        Returns:
            ID of the stored entity

        Raises:
            ValueError: If the entity has no ID or the ID is already stored
        """

    @abstractmethod
    async def replace(self, id: str, entity: T) -> bool:
        """
        Replace an existing entity, keeping its position.

        Returns:
            True if entity was replaced, False if not found
        """

    @abstractmethod
    async def delete(self, id: str) -> bool:
        """
        Delete an entity by ID.

        Returns:
            True if entity was deleted, False if not found
        """

    @abstractmethod
    async def count(self) -> int:
        """Count stored entities."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every entity."""
