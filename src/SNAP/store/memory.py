# src/SNAP/store/memory.py
from __future__ import annotations

import copy
import secrets
import string
from typing import Any, Dict, List, Optional, Set

from SNAP.app_logger import get_logger
from SNAP.exceptions import DocumentNotFound, StoreError

from .base import (
    DocumentSnapshot,
    DocumentStore,
    OrderedQuery,
    SnapshotCallback,
    Subscription,
    order_documents,
)

log = get_logger("store.memory")

_ID_ALPHABET = string.ascii_letters + string.digits
_ID_LENGTH = 20


def new_document_id() -> str:
    """20-char alphanumeric id, same shape as Firestore auto ids."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))


class _MemorySubscription(Subscription):
    def __init__(self, store: "InMemoryDocumentStore", query: OrderedQuery, callback: SnapshotCallback):
        self._store = store
        self.query = query
        self.callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if self._active:
            self._active = False
            self._store._watchers.discard(self)
            log.debug("unsubscribed from %s", self.query.collection)

    def deliver(self, docs: List[DocumentSnapshot]) -> None:
        if self._active:
            self.callback(order_documents(docs, self.query.order_by, self.query.descending))


class InMemoryDocumentStore(DocumentStore):
    """
    Dict-backed store for local development and tests.

    Every write fans a fresh snapshot out to the watchers of that collection
    synchronously, before the write coroutine returns. Set `fail_writes` to
    make every write raise StoreError.
    """

    def __init__(self, seed: Optional[Dict[str, Dict[str, Dict[str, Any]]]] = None) -> None:
        self._data: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._watchers: Set[_MemorySubscription] = set()
        self.fail_writes: bool = False
        self.write_count = 0
        for collection, docs in (seed or {}).items():
            self._data[collection] = {doc_id: copy.deepcopy(d) for doc_id, d in docs.items()}

    # ------------------------------------------------------------------ reads
    def documents(self, collection: str) -> Dict[str, Dict[str, Any]]:
        """Deep copy of a collection, keyed by id (test/inspection helper)."""
        return copy.deepcopy(self._data.get(collection, {}))

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        doc = self._data.get(collection, {}).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def _snapshot(self, collection: str) -> List[DocumentSnapshot]:
        return [
            DocumentSnapshot(id=doc_id, data=copy.deepcopy(data))
            for doc_id, data in self._data.get(collection, {}).items()
        ]

    def _notify(self, collection: str) -> None:
        docs = self._snapshot(collection)
        for sub in list(self._watchers):
            if sub.query.collection == collection:
                sub.deliver(docs)

    def _check_writable(self, collection: str, operation: str) -> None:
        if self.fail_writes:
            raise StoreError("Simulated write failure", collection=collection, operation=operation)

    # ----------------------------------------------------------------- writes
    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        self._check_writable(collection, "add")
        doc_id = new_document_id()
        self._data.setdefault(collection, {})[doc_id] = copy.deepcopy(data)
        self.write_count += 1
        log.debug("add %s/%s", collection, doc_id)
        self._notify(collection)
        return doc_id

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        self._check_writable(collection, "update")
        docs = self._data.get(collection, {})
        if doc_id not in docs:
            raise DocumentNotFound(collection, doc_id)
        docs[doc_id].update(copy.deepcopy(data))
        self.write_count += 1
        log.debug("update %s/%s keys=%s", collection, doc_id, sorted(data))
        self._notify(collection)

    async def delete(self, collection: str, doc_id: str) -> None:
        self._check_writable(collection, "delete")
        removed = self._data.get(collection, {}).pop(doc_id, None)
        self.write_count += 1
        log.debug("delete %s/%s (existed=%s)", collection, doc_id, removed is not None)
        self._notify(collection)

    # ---------------------------------------------------------------- queries
    def watch(self, query: OrderedQuery, callback: SnapshotCallback) -> Subscription:
        sub = _MemorySubscription(self, query, callback)
        self._watchers.add(sub)
        log.debug("watch %s order_by=%s desc=%s", query.collection, query.order_by, query.descending)
        sub.deliver(self._snapshot(query.collection))
        return sub

    @property
    def watcher_count(self) -> int:
        return len(self._watchers)

    async def close(self) -> None:
        for sub in list(self._watchers):
            sub.unsubscribe()
