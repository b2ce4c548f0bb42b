"""
Documents

The authorization-gated document store, its entity and change notifications.
"""

from .models import Document
from .notifications import ChangeNotifier, DocumentsChanged
from .seeding import SEED_DOCUMENTS, build_seed_documents
from .store import DocumentStore

__all__ = [
    "Document",
    "DocumentStore",
    "ChangeNotifier",
    "DocumentsChanged",
    "SEED_DOCUMENTS",
    "build_seed_documents",
]
