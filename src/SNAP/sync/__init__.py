from .collection import CollectionSnapshot, SyncedCollection
from .layer import COLLECTION_SPECS, CollectionSpec, RealtimeSync
from .normalize import STUDENT_DEFAULTS, MEDICAL_DEFAULTS, normalize_student, inject_id

__all__ = [
    "CollectionSnapshot",
    "SyncedCollection",
    "COLLECTION_SPECS",
    "CollectionSpec",
    "RealtimeSync",
    "STUDENT_DEFAULTS",
    "MEDICAL_DEFAULTS",
    "normalize_student",
    "inject_id",
]
