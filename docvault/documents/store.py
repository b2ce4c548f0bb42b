"""
Document Store

An in-memory, non-persistent collection of documents where every operation
is gated by the authorization provider before it returns or mutates state.

All operations run under a single mutation lock: creates, updates and
deletes are serialized against each other and against in-flight reads, so
readers see either the state before or after a mutation, never a mix.

This module is part of DocVault.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import time
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from ..auth.base import BaseAuthorizationProvider
from ..auth.types import Action, DocumentAttrs, ResourceType, Subject
from ..constants import DOCUMENTS_PATH, MAX_TITLE_LENGTH
from ..exceptions import NotFoundError, PermissionDeniedError, ValidationError
from ..observability.logging import get_logger, log_operation
from ..observability.metrics import timed_operation
from ..repositories.base import Repository
from ..repositories.memory import InMemoryRepository
from .models import Document
from .notifications import ChangeNotifier, DocumentsChanged
from .seeding import SEED_DOCUMENTS, build_seed_documents

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clean_fields(title: Any, content: Any, is_public: Any) -> tuple[str, str, bool]:
    """Check field types and trim the title; content is kept as given."""
    if title is not None and not isinstance(title, str):
        raise ValidationError("title must be a string", field="title")
    if content is not None and not isinstance(content, str):
        raise ValidationError("content must be a string", field="content")
    if not isinstance(is_public, bool):
        raise ValidationError("isPublic must be a boolean", field="isPublic")
    return _clean_title(title), content or "", is_public


def _clean_title(title: str | None) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValidationError("Title is required", field="title")
    if len(cleaned) > MAX_TITLE_LENGTH:
        raise ValidationError(
            f"Title must be at most {MAX_TITLE_LENGTH} characters", field="title"
        )
    return cleaned


class DocumentStore:
    """
    Authorization-gated document collection.

    Args:
        authz: Provider consulted before every read or mutation
        repository: Backing collection (a fresh in-memory one by default)
        notifier: Receives a DocumentsChanged event after each mutation
        clock: Returns the current time; injectable for tests
        seed: Load the seed documents on the first operation
    """

    def __init__(
        self,
        authz: BaseAuthorizationProvider,
        repository: Repository[Document] | None = None,
        notifier: ChangeNotifier | None = None,
        clock: Callable[[], datetime] = _utcnow,
        seed: bool = True,
        seed_data: tuple[dict[str, Any], ...] = SEED_DOCUMENTS,
    ):
        self._authz = authz
        self._repository: Repository[Document] = repository or InMemoryRepository()
        self._notifier = notifier or ChangeNotifier()
        self._clock = clock
        self._seed_data = seed_data if seed else ()
        self._seeded = False
        self._issued_ids: set[str] = set()
        self._lock = asyncio.Lock()

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    @property
    def authz(self) -> BaseAuthorizationProvider:
        return self._authz

    # ------------------------------------------------------------------
    # Internals (callers hold the lock)
    # ------------------------------------------------------------------

    async def _ensure_seeded(self) -> None:
        if self._seeded:
            return
        for document in build_seed_documents(self._clock(), self._seed_data):
            await self._repository.add(document)
            self._issued_ids.add(document.id)
        self._seeded = True
        if self._seed_data:
            logger.info(f"Document store seeded with {len(self._seed_data)} documents")

    def _new_id(self) -> str:
        document_id = uuid.uuid4().hex
        while document_id in self._issued_ids:
            document_id = uuid.uuid4().hex
        self._issued_ids.add(document_id)
        return document_id

    async def _require(self, document_id: str) -> Document:
        document = await self._repository.get(document_id)
        if document is None:
            logger.warning(f"Document {document_id} not found")
            raise NotFoundError("Document not found", resource_id=document_id)
        return document

    async def _authorize(
        self, subject: Subject, action: Action, attrs: DocumentAttrs, message: str
    ) -> None:
        decision = await self._authz.decide(subject, action, ResourceType.DOCUMENT, attrs)
        if not decision:
            logger.warning(
                f"User {subject.id} ({subject.role.value}) denied {action.value} "
                f"on document {attrs.id or '*'}: {decision.reason}"
            )
            raise PermissionDeniedError(
                message, subject_id=subject.id, action=action.value, resource_id=attrs.id
            )

    async def _publish(
        self, operation: str, document_id: str, occurred_at: datetime, *paths: str
    ) -> None:
        await self._notifier.publish(
            DocumentsChanged(
                operation=operation,
                document_id=document_id,
                occurred_at=occurred_at,
                paths=(DOCUMENTS_PATH, *paths),
            )
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    @timed_operation("documents.list")
    async def list(self, subject: Subject) -> list[Document]:
        """
        Return every document ``subject`` may read, in insertion order.

        Visibility is decided per document on every call; nothing is cached.
        """
        async with self._lock:
            await self._ensure_seeded()
            visible = []
            for document in await self._repository.list():
                decision = await self._authz.decide(
                    subject, Action.READ, ResourceType.DOCUMENT, document.attrs
                )
                if decision:
                    visible.append(document)
        logger.debug(f"User {subject.id} can see {len(visible)} documents")
        return visible

    @timed_operation("documents.get")
    async def get(self, subject: Subject, document_id: str) -> Document | None:
        """
        Fetch one document.

        A document the subject may not read is reported exactly like a
        missing one (None), so its existence is not disclosed.
        """
        async with self._lock:
            await self._ensure_seeded()
            document = await self._repository.get(document_id)
            if document is None:
                return None
            decision = await self._authz.decide(
                subject, Action.READ, ResourceType.DOCUMENT, document.attrs
            )
        if not decision:
            logger.debug(f"User {subject.id} does not have access to document {document_id}")
            return None
        return document

    @timed_operation("documents.create")
    async def create(
        self, subject: Subject, title: str, content: str = "", is_public: bool = False
    ) -> Document:
        """
        Create a document owned by ``subject``.

        Raises:
            ValidationError: If a field has the wrong type or the title is empty
            PermissionDeniedError: If the subject may not create documents
        """
        start = time.perf_counter()
        title, content, is_public = _clean_fields(title, content, is_public)
        async with self._lock:
            await self._ensure_seeded()
            await self._authorize(
                subject,
                Action.CREATE,
                DocumentAttrs(is_public=is_public),
                "You do not have permission to create documents",
            )
            now = self._clock()
            document = Document(
                id=self._new_id(),
                title=title,
                content=content,
                owner_id=subject.id,
                is_public=is_public,
                created_at=now,
                updated_at=now,
            )
            await self._repository.add(document)
            total = await self._repository.count()

        log_operation(
            logger,
            "documents.create",
            duration_ms=(time.perf_counter() - start) * 1000,
            document_id=document.id,
            document_count=total,
        )
        await self._publish("create", document.id, document.created_at)
        return document

    @timed_operation("documents.update")
    async def update(
        self,
        subject: Subject,
        document_id: str,
        title: str,
        content: str = "",
        is_public: bool = False,
    ) -> Document:
        """
        Replace a document's title, content and visibility.

        ``id``, ``owner_id`` and ``created_at`` are kept; ``updated_at`` is
        refreshed.

        Raises:
            NotFoundError: If no document has this ID
            PermissionDeniedError: If the subject may not update it
            ValidationError: If a field has the wrong type or the new title is empty
        """
        start = time.perf_counter()
        async with self._lock:
            await self._ensure_seeded()
            current = await self._require(document_id)
            await self._authorize(
                subject,
                Action.UPDATE,
                current.attrs,
                "You do not have permission to update this document",
            )
            title, content, is_public = _clean_fields(title, content, is_public)
            updated = dataclasses.replace(
                current,
                title=title,
                content=content,
                is_public=is_public,
                updated_at=self._clock(),
            )
            await self._repository.replace(document_id, updated)

        log_operation(
            logger,
            "documents.update",
            duration_ms=(time.perf_counter() - start) * 1000,
            document_id=document_id,
        )
        await self._publish(
            "update", document_id, updated.updated_at, f"{DOCUMENTS_PATH}/{document_id}"
        )
        return updated

    @timed_operation("documents.delete")
    async def delete(self, subject: Subject, document_id: str) -> dict[str, Any]:
        """
        Permanently remove a document.

        Raises:
            NotFoundError: If no document has this ID
            PermissionDeniedError: If the subject may not delete it
        """
        start = time.perf_counter()
        async with self._lock:
            await self._ensure_seeded()
            current = await self._require(document_id)
            await self._authorize(
                subject,
                Action.DELETE,
                current.attrs,
                "You do not have permission to delete this document",
            )
            await self._repository.delete(document_id)
            deleted_at = self._clock()
            remaining = await self._repository.count()

        log_operation(
            logger,
            "documents.delete",
            duration_ms=(time.perf_counter() - start) * 1000,
            document_id=document_id,
            document_count=remaining,
        )
        await self._publish(
            "delete", document_id, deleted_at, f"{DOCUMENTS_PATH}/{document_id}"
        )
        return {"success": True, "message": "Document deleted successfully"}

    async def count(self) -> int:
        """Number of stored documents, regardless of visibility."""
        async with self._lock:
            await self._ensure_seeded()
            return await self._repository.count()

    async def reset(self) -> None:
        """Discard every document and restore the seed documents."""
        async with self._lock:
            await self._repository.clear()
            self._seeded = False
            await self._ensure_seeded()
        logger.info("Document store reset to seed documents")
