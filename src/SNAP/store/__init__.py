# src/SNAP/store/__init__.py
from __future__ import annotations

from SNAP.core.config import Settings

from .base import DocumentSnapshot, DocumentStore, OrderedQuery, Subscription, order_documents
from .memory import InMemoryDocumentStore


def build_store(cfg: Settings) -> DocumentStore:
    """Pick the store backend named by SNAP_STORE_BACKEND."""
    if cfg.STORE_BACKEND == "firestore":
        # imported lazily so the memory backend runs without Google credentials
        from .firestore import FirestoreDocumentStore

        return FirestoreDocumentStore.from_settings(cfg)
    return InMemoryDocumentStore()


__all__ = [
    "DocumentSnapshot",
    "DocumentStore",
    "OrderedQuery",
    "Subscription",
    "order_documents",
    "InMemoryDocumentStore",
    "build_store",
]
