"""
Document entity.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..auth.types import DocumentAttrs
from ..repositories.base import Entity


@dataclass
class Document(Entity):
    """
    A stored document.

    ``id``, ``owner_id`` and ``created_at`` are assigned by the store at
    creation and never change; ``updated_at`` is refreshed on every update.
    """

    title: str = ""
    content: str = ""
    owner_id: str = ""
    is_public: bool = False

    @property
    def attrs(self) -> DocumentAttrs:
        """Attributes the authorization decider evaluates for this document."""
        return DocumentAttrs(id=self.id, owner_id=self.owner_id, is_public=self.is_public)

    def to_public_dict(self) -> dict[str, Any]:
        """Serialize with the field names the presentation layer uses."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "ownerId": self.owner_id,
            "isPublic": self.is_public,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
