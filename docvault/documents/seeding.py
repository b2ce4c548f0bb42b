"""
Seed documents.

The store holds no state across restarts: every new store starts from these
documents, and ``DocumentStore.reset`` restores them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from .models import Document

SEED_DOCUMENTS: tuple[dict[str, Any], ...] = (
    {
        "id": "1",
        "title": "Getting Started Guide",
        "content": "This is a guide to help you get started with our document management system.",
        "owner_id": "admin-id",
        "is_public": True,
    },
    {
        "id": "2",
        "title": "Security Policy",
        "content": "This document outlines our security policies and procedures.",
        "owner_id": "admin-id",
        "is_public": False,
    },
    {
        "id": "3",
        "title": "User Manual",
        "content": "A comprehensive guide for users of our system.",
        "owner_id": "user-id",
        "is_public": True,
    },
)


def build_seed_documents(
    now: datetime, seed_data: tuple[dict[str, Any], ...] = SEED_DOCUMENTS
) -> list[Document]:
    """Build fresh Document records for the seed data, stamped with ``now``."""
    return [Document(created_at=now, updated_at=now, **data) for data in seed_data]
