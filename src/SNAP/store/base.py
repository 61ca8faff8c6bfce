# src/SNAP/store/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence


@dataclass(frozen=True)
class DocumentSnapshot:
    """One stored document as delivered by a live query."""

    id: str
    data: Dict[str, Any] = field(default_factory=dict)


SnapshotCallback = Callable[[List[DocumentSnapshot]], None]


@dataclass(frozen=True)
class OrderedQuery:
    collection: str
    order_by: str
    descending: bool = False


class Subscription(ABC):
    """Handle returned by `DocumentStore.watch`."""

    @abstractmethod
    def unsubscribe(self) -> None:
        ...

    @property
    @abstractmethod
    def active(self) -> bool:
        ...


class DocumentStore(ABC):
    """
    Collection-oriented document database with ordered live queries.

    Writes are coroutines; `watch` delivers a complete ordered snapshot to the
    callback right away and again after every change to the collection.
    """

    @abstractmethod
    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        """Create a document and return its store-assigned id."""

    @abstractmethod
    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Merge `data` into an existing document. Raises DocumentNotFound."""

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document; deleting a missing id is a no-op."""

    @abstractmethod
    def watch(self, query: OrderedQuery, callback: SnapshotCallback) -> Subscription:
        """Open a live ordered query on `query.collection`."""

    async def close(self) -> None:
        return None


# ---------------------------------------------------------------------------
# Ordering helpers shared by store implementations
# ---------------------------------------------------------------------------

_MISSING = object()


def get_path(data: Dict[str, Any], path: str) -> Any:
    """Resolve a dotted field path, returning a sentinel when absent."""
    cur: Any = data
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return _MISSING
        cur = cur[part]
    return cur


def order_documents(docs: Sequence[DocumentSnapshot], order_by: str, descending: bool = False) -> List[DocumentSnapshot]:
    """
    Apply Firestore ordering semantics: documents without the order field are
    left out of the result, ties break on document id.
    """
    present = [d for d in docs if get_path(d.data, order_by) is not _MISSING]

    def _key(d: DocumentSnapshot):
        value = get_path(d.data, order_by)
        # None sorts first, then numbers, then strings, then anything else
        if value is None:
            rank = 0
        elif isinstance(value, bool):
            rank = 1
        elif isinstance(value, (int, float)):
            rank = 2
        elif isinstance(value, str):
            rank = 3
        else:
            rank, value = 4, repr(value)
        return (rank, value if value is not None else 0)

    ordered = sorted(present, key=lambda d: d.id)
    return sorted(ordered, key=_key, reverse=descending)
