"""
DocVault Repository Pattern

Provides the abstract repository interface and the in-memory implementation
the document store runs on.

Usage:
    from docvault.repositories import InMemoryRepository

    repo: Repository[Document] = InMemoryRepository()
    await repo.add(document)
"""

from .base import Entity, Repository
from .memory import InMemoryRepository

__all__ = [
    "Repository",
    "Entity",
    "InMemoryRepository",
]
