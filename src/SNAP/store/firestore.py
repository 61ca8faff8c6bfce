# src/SNAP/store/firestore.py
from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, List

from google.api_core.exceptions import GoogleAPICallError, NotFound
from google.cloud import firestore
from google.oauth2 import service_account

from SNAP.app_logger import get_logger
from SNAP.core.config import Settings
from SNAP.exceptions import DocumentNotFound, StoreError

from .base import DocumentSnapshot, DocumentStore, OrderedQuery, SnapshotCallback, Subscription

log = get_logger("store.firestore")


# ------------------------
# Credentials / client
# ------------------------
def _credentials(cfg: Settings):
    """
    Service-account credentials from inline JSON or a JSON file path.
    Returns None to fall back to Application Default Credentials.
    """
    if cfg.FIREBASE_SA_JSON:
        info = json.loads(cfg.FIREBASE_SA_JSON)
        return service_account.Credentials.from_service_account_info(info)
    if cfg.FIREBASE_SA_JSON_PATH:
        return service_account.Credentials.from_service_account_file(cfg.FIREBASE_SA_JSON_PATH)
    return None


def build_client(cfg: Settings) -> firestore.Client:
    creds = _credentials(cfg)
    log.info(
        "Firestore client: project=%s credentials=%s",
        cfg.FIREBASE_PROJECT_ID,
        "service_account" if creds else "application_default",
    )
    return firestore.Client(project=cfg.FIREBASE_PROJECT_ID, credentials=creds)


async def _to_thread(fn, *args, **kwargs):
    """Run a blocking Firestore call on a worker thread."""
    return await asyncio.to_thread(fn, *args, **kwargs)


class _FirestoreSubscription(Subscription):
    def __init__(self, collection: str, callback: SnapshotCallback):
        self._watch = None
        self._collection = collection
        self._callback = callback
        self._active = True

    def attach(self, watch) -> None:
        self._watch = watch

    def deliver(self, snaps: List[DocumentSnapshot]) -> None:
        # snapshots queued before unsubscribe() must not reach the subscriber
        if self._active:
            self._callback(snaps)

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if self._active:
            self._active = False
            if self._watch is not None:
                self._watch.unsubscribe()
            log.debug("unsubscribed from %s", self._collection)


class FirestoreDocumentStore(DocumentStore):
    """
    Cloud Firestore backed store.

    Snapshot callbacks arrive on the Firestore watch thread; they are handed to
    the event loop that opened the query so subscribers only ever run there.
    """

    def __init__(self, client: firestore.Client) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, cfg: Settings) -> "FirestoreDocumentStore":
        return cls(build_client(cfg))

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        try:
            _update_time, ref = await _to_thread(self._client.collection(collection).add, data)
        except GoogleAPICallError as e:
            raise StoreError(f"add failed: {e}", collection=collection, operation="add", cause=e) from e
        log.debug("add %s/%s", collection, ref.id)
        return ref.id

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        ref = self._client.collection(collection).document(doc_id)
        try:
            await _to_thread(ref.update, data)
        except NotFound as e:
            raise DocumentNotFound(collection, doc_id) from e
        except GoogleAPICallError as e:
            raise StoreError(
                f"update failed: {e}", collection=collection, doc_id=doc_id, operation="update", cause=e
            ) from e

    async def delete(self, collection: str, doc_id: str) -> None:
        ref = self._client.collection(collection).document(doc_id)
        try:
            await _to_thread(ref.delete)
        except GoogleAPICallError as e:
            raise StoreError(
                f"delete failed: {e}", collection=collection, doc_id=doc_id, operation="delete", cause=e
            ) from e

    def watch(self, query: OrderedQuery, callback: SnapshotCallback) -> Subscription:
        loop = asyncio.get_running_loop()
        direction = firestore.Query.DESCENDING if query.descending else firestore.Query.ASCENDING
        fs_query = self._client.collection(query.collection).order_by(query.order_by, direction=direction)

        sub = _FirestoreSubscription(query.collection, callback)

        def _on_snapshot(docs, _changes, _read_time) -> None:
            snaps: List[DocumentSnapshot] = [
                DocumentSnapshot(id=d.id, data=d.to_dict() or {}) for d in docs
            ]
            loop.call_soon_threadsafe(sub.deliver, snaps)

        sub.attach(fs_query.on_snapshot(_on_snapshot))
        log.info("watching %s order_by=%s desc=%s", query.collection, query.order_by, query.descending)
        return sub

    async def close(self) -> None:
        close = getattr(self._client, "close", None)
        if close is not None:
            await _to_thread(close)
