# src/SNAP/sync/layer.py
from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Callable, Dict, List, Optional, Tuple

from SNAP.app_logger import get_logger
from SNAP.exceptions import DocumentShapeError
from SNAP.schemas import Appointment, Entity, Expense, MealLog, SchoolEvent, Student, WeeklyGoal
from SNAP.store.base import DocumentSnapshot, DocumentStore, OrderedQuery, Subscription

from .collection import SyncedCollection
from .normalize import inject_id, normalize_student

log = get_logger("sync")


@dataclass(frozen=True)
class CollectionSpec:
    key: str
    collection: str
    order_by: str
    descending: bool
    normalize: Callable[[DocumentSnapshot], Entity]

    @property
    def query(self) -> OrderedQuery:
        return OrderedQuery(self.collection, self.order_by, self.descending)


def _passthrough(model, collection: str) -> Callable[[DocumentSnapshot], Entity]:
    return partial(inject_id, model, collection)


COLLECTION_SPECS: Tuple[CollectionSpec, ...] = (
    CollectionSpec("students", "students", "fullName", False, normalize_student),
    CollectionSpec("logs", "logs", "date", True, _passthrough(MealLog, "logs")),
    CollectionSpec("appointments", "appointments", "date", False, _passthrough(Appointment, "appointments")),
    CollectionSpec("goals", "goals", "createdAt", False, _passthrough(WeeklyGoal, "goals")),
    CollectionSpec("expenses", "expenses", "date", True, _passthrough(Expense, "expenses")),
    CollectionSpec("events", "events", "date", False, _passthrough(SchoolEvent, "events")),
)

SPECS_BY_KEY: Dict[str, CollectionSpec] = {s.key: s for s in COLLECTION_SPECS}


class RealtimeSync:
    """
    Mirrors the six store collections into in-memory snapshots.

    Each change notification rebuilds the whole collection from the delivered
    snapshot (full replace). `stop()` tears the subscriptions down and empties
    every collection, which is what happens when the session ends.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._subscriptions: List[Subscription] = []
        self.collections: Dict[str, SyncedCollection] = {
            spec.key: SyncedCollection(spec.key) for spec in COLLECTION_SPECS
        }

    # ---- typed accessors ----
    @property
    def students(self) -> SyncedCollection[Student]:
        return self.collections["students"]

    @property
    def logs(self) -> SyncedCollection[MealLog]:
        return self.collections["logs"]

    @property
    def appointments(self) -> SyncedCollection[Appointment]:
        return self.collections["appointments"]

    @property
    def goals(self) -> SyncedCollection[WeeklyGoal]:
        return self.collections["goals"]

    @property
    def expenses(self) -> SyncedCollection[Expense]:
        return self.collections["expenses"]

    @property
    def events(self) -> SyncedCollection[SchoolEvent]:
        return self.collections["events"]

    @property
    def running(self) -> bool:
        return bool(self._subscriptions)

    # ---- lifecycle ----
    def start(self) -> None:
        if self.running:
            return
        for spec in COLLECTION_SPECS:
            sub = self._store.watch(spec.query, partial(self._on_snapshot, spec))
            self._subscriptions.append(sub)
        log.info("sync started: %s", ", ".join(s.collection for s in COLLECTION_SPECS))

    def stop(self) -> None:
        subs, self._subscriptions = self._subscriptions, []
        for sub in subs:
            sub.unsubscribe()
        for coll in self.collections.values():
            if coll.items:
                coll.clear()
        if subs:
            log.info("sync stopped")

    # ---- snapshot handling ----
    def _on_snapshot(self, spec: CollectionSpec, docs: List[DocumentSnapshot]) -> None:
        items: List[Entity] = []
        rejected: List[str] = []
        for doc in docs:
            try:
                items.append(spec.normalize(doc))
            except DocumentShapeError as e:
                log.error("dropping document from %s: %s", spec.collection, e.message)
                rejected.append(doc.id)
        self.collections[spec.key].publish(items, rejected)

    def collection(self, key: str) -> Optional[SyncedCollection]:
        return self.collections.get(key)
