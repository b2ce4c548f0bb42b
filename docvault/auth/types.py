"""
Authorization Types

Subjects, actions, resource types and the per-resource attribute variants
the decider evaluates.

This module is part of DocVault.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Role(str, Enum):
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


class Action(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    ACCESS = "access"


class ResourceType(str, Enum):
    DOCUMENT = "document"
    ADMIN_PANEL = "admin_panel"


MUTATING_ACTIONS = frozenset({Action.CREATE, Action.UPDATE, Action.DELETE})


@dataclass(frozen=True)
class Subject:
    """The acting user, as supplied by the identity layer."""

    id: str
    role: Role


@dataclass(frozen=True)
class DocumentAttrs:
    """
    Attributes of a document resource.

    With neither ``id`` nor ``owner_id`` set, the attributes describe
    documents in general, which is how ``create`` is checked.
    """

    id: str | None = None
    owner_id: str | None = None
    is_public: bool = False

    @property
    def is_specific(self) -> bool:
        return self.id is not None or self.owner_id is not None

    def to_dict(self) -> dict:
        data: dict = {"isPublic": self.is_public}
        if self.id is not None:
            data["id"] = self.id
        if self.owner_id is not None:
            data["ownerId"] = self.owner_id
        return data


@dataclass(frozen=True)
class AdminPanelAttrs:
    """The admin panel carries no attributes."""

    def to_dict(self) -> dict:
        return {}


ResourceAttrs = Union[DocumentAttrs, AdminPanelAttrs]

_ATTRS_BY_TYPE = {
    ResourceType.DOCUMENT: DocumentAttrs,
    ResourceType.ADMIN_PANEL: AdminPanelAttrs,
}


def default_attrs(resource_type: ResourceType) -> ResourceAttrs:
    """Return the empty attribute variant for a resource type."""
    return _ATTRS_BY_TYPE[ResourceType(resource_type)]()


def attrs_match(resource_type: ResourceType, attrs: ResourceAttrs) -> bool:
    """Check that an attribute variant belongs to the given resource type."""
    return isinstance(attrs, _ATTRS_BY_TYPE[ResourceType(resource_type)])


@dataclass(frozen=True)
class Decision:
    """
    Result of one authorization check.

    Decisions are computed on every call and never cached.
    """

    allowed: bool
    reason: str

    def __bool__(self) -> bool:
        return self.allowed

    @classmethod
    def allow(cls, reason: str) -> Decision:
        return cls(True, reason)

    @classmethod
    def deny(cls, reason: str) -> Decision:
        return cls(False, reason)
