# src/SNAP/sync/collection.py
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

from SNAP.app_logger import get_logger

log = get_logger("sync.collection")

T = TypeVar("T")

Listener = Callable[["CollectionSnapshot[T]"], None]
Predicate = Callable[["CollectionSnapshot[T]"], bool]


@dataclass(frozen=True)
class CollectionSnapshot(Generic[T]):
    """
    Immutable, versioned materialization of one collection.

    `rejected` lists ids of stored documents that could not be turned into
    entities for this version.
    """

    name: str
    version: int = 0
    items: Tuple[T, ...] = ()
    rejected: Tuple[str, ...] = field(default=())

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def get(self, item_id: str) -> Optional[T]:
        return next((i for i in self.items if getattr(i, "id", None) == item_id), None)

    def ids(self) -> List[str]:
        return [getattr(i, "id") for i in self.items]


class SyncedCollection(Generic[T]):
    """
    Owner of the current snapshot of one collection.

    Only the sync layer publishes; everybody else reads `snapshot` / `items`,
    subscribes to new versions, or awaits a version that satisfies a predicate.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._snapshot: CollectionSnapshot[T] = CollectionSnapshot(name=name)
        self._listeners: List[Listener] = []
        self._waiters: List[Tuple[Predicate, "asyncio.Future[CollectionSnapshot[T]]"]] = []

    # ---- reads ----
    @property
    def snapshot(self) -> CollectionSnapshot[T]:
        return self._snapshot

    @property
    def items(self) -> Tuple[T, ...]:
        return self._snapshot.items

    @property
    def version(self) -> int:
        return self._snapshot.version

    def get(self, item_id: str) -> Optional[T]:
        return self._snapshot.get(item_id)

    # ---- writes (sync layer only) ----
    def publish(self, items: Sequence[T], rejected: Sequence[str] = ()) -> CollectionSnapshot[T]:
        snap = CollectionSnapshot(
            name=self.name,
            version=self._snapshot.version + 1,
            items=tuple(items),
            rejected=tuple(rejected),
        )
        self._snapshot = snap
        log.debug("%s -> v%s (%s items)", self.name, snap.version, len(snap.items))
        self._fan_out(snap)
        return snap

    def clear(self) -> CollectionSnapshot[T]:
        return self.publish(())

    def _fan_out(self, snap: CollectionSnapshot[T]) -> None:
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                # one broken consumer must not starve the others
                log.exception("listener failed on %s v%s", self.name, snap.version)

        pending = []
        for predicate, fut in self._waiters:
            if fut.done():
                continue
            try:
                ok = predicate(snap)
            except Exception as e:
                fut.set_exception(e)
                continue
            if ok:
                fut.set_result(snap)
            else:
                pending.append((predicate, fut))
        self._waiters = pending

    # ---- subscriptions ----
    def subscribe(self, listener: Listener, *, replay: bool = False) -> Callable[[], None]:
        """Register `listener`; returns a callable that removes it."""
        self._listeners.append(listener)
        if replay:
            listener(self._snapshot)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def wait_for(self, predicate: Predicate, timeout: Optional[float] = None) -> CollectionSnapshot[T]:
        """Return the first snapshot (current one included) satisfying `predicate`."""
        if predicate(self._snapshot):
            return self._snapshot
        fut: "asyncio.Future[CollectionSnapshot[T]]" = asyncio.get_running_loop().create_future()
        self._waiters.append((predicate, fut))
        try:
            return await asyncio.wait_for(fut, timeout)
        finally:
            self._waiters = [(p, f) for p, f in self._waiters if f is not fut]
