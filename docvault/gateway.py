"""
Document Gateway

The in-process boundary the presentation layer calls. Subjects arrive as
IDs and are resolved through the user directory before the store or the
authorization provider sees them.

Usage:
    gateway = DocumentGateway(store, directory, local_rules)
    docs = await gateway.list_documents("viewer-id")
    if gateway.has_permission("editor", "create", "document"):
        ...

This module is part of DocVault.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .auth.provider import LocalRuleProvider
from .auth.types import Action, ResourceAttrs, ResourceType, Role, Subject
from .auth.users import UserDirectory
from .documents.models import Document
from .documents.store import DocumentStore
from .exceptions import ValidationError
from .observability.logging import set_subject_context


def _document_fields(data: Mapping[str, Any]) -> tuple[Any, Any, Any]:
    """Pick title/content/isPublic out of form data; the store checks their types."""
    if not isinstance(data, Mapping):
        raise ValidationError("Document data must be a mapping")
    return (
        data.get("title"),
        data.get("content"),
        data.get("isPublic", data.get("is_public", False)),
    )


class DocumentGateway:
    """
    Boundary contract between the presentation layer and the core.

    Args:
        store: Authorization-gated document store
        directory: Resolves subject IDs to subjects
        local_rules: Synchronous rule evaluator for UI affordances
    """

    def __init__(
        self,
        store: DocumentStore,
        directory: UserDirectory,
        local_rules: LocalRuleProvider | None = None,
    ):
        self._store = store
        self._directory = directory
        self._local = local_rules or LocalRuleProvider()

    def _subject(self, subject_id: str) -> Subject:
        subject = self._directory.resolve_subject(subject_id)
        set_subject_context(subject.id, subject.role.value)
        return subject

    async def list_documents(self, subject_id: str) -> list[Document]:
        return await self._store.list(self._subject(subject_id))

    async def get_document(self, subject_id: str, document_id: str) -> Document | None:
        return await self._store.get(self._subject(subject_id), document_id)

    async def create_document(self, subject_id: str, data: Mapping[str, Any]) -> Document:
        subject = self._subject(subject_id)
        title, content, is_public = _document_fields(data)
        return await self._store.create(subject, title, content, is_public)

    async def update_document(
        self, subject_id: str, document_id: str, data: Mapping[str, Any]
    ) -> Document:
        subject = self._subject(subject_id)
        title, content, is_public = _document_fields(data)
        return await self._store.update(subject, document_id, title, content, is_public)

    async def delete_document(self, subject_id: str, document_id: str) -> dict[str, Any]:
        return await self._store.delete(self._subject(subject_id), document_id)

    async def check_permission(
        self,
        subject_id: str,
        action: Action | str,
        resource_type: ResourceType | str,
        attrs: ResourceAttrs | None = None,
    ) -> bool:
        """Authoritative check through the store's configured provider."""
        subject = self._subject(subject_id)
        return await self._store.authz.check(subject, action, resource_type, attrs)

    def has_permission(
        self,
        role: Role | str,
        action: Action | str,
        resource_type: ResourceType | str,
        attrs: ResourceAttrs | None = None,
        subject_id: str | None = None,
    ) -> bool:
        """Synchronous local check, for deciding which controls to render."""
        return self._local.has_permission(role, action, resource_type, attrs, subject_id)
