# src/SNAP/tests/test_sync.py
import asyncio

import pytest

from SNAP.store import InMemoryDocumentStore
from SNAP.sync import RealtimeSync, STUDENT_DEFAULTS
from SNAP.sync.normalize import student_document

pytestmark = pytest.mark.anyio


def test_student_document_fills_every_default():
    doc = student_document({"fullName": "Lia", "shift": ""})
    assert doc["fullName"] == "Lia"
    assert doc["shift"] == "Matutino"
    for key in STUDENT_DEFAULTS:
        assert key in doc
    assert doc["medical"] == {
        "hasRestriction": False,
        "allergies": [],
        "intolerances": [],
        "medicalNotes": "",
        "bloodType": "",
    }


async def test_sparse_student_document_becomes_complete_student():
    store = InMemoryDocumentStore(seed={"students": {"s1": {"fullName": None, "id": "stale"}}})
    sync = RealtimeSync(store)
    sync.start()
    (student,) = sync.students.items
    assert student.id == "s1"
    assert student.full_name == "Sem Nome"
    assert student.gender == "M"
    assert student.height_cm == 0
    assert student.medical.allergies == []
    assert student.medical.has_restriction is False


async def test_legacy_student_values_fall_back_instead_of_rejecting():
    store = InMemoryDocumentStore(seed={"students": {
        "s1": {"fullName": "Caio", "medical": {"allergies": [{"name": "Amendoim"}, "Leite", {"severity": "Grave"}]}},
        "s2": {"fullName": "Duda", "shift": "Noturno", "heightCm": "95"},
        "s3": {"fullName": "Enzo", "gender": "m", "weightKg": "n/a"},
    }})
    sync = RealtimeSync(store)
    sync.start()

    snap = sync.students.snapshot
    assert snap.rejected == ()
    caio, duda, enzo = snap.items
    assert [(a.name, a.severity.value) for a in caio.medical.allergies] == [
        ("Amendoim", "Leve"), ("Leite", "Leve"), ("", "Grave"),
    ]
    assert all(a.id for a in caio.medical.allergies)
    assert (duda.shift, duda.height_cm) == ("Matutino", 95)
    assert (enzo.gender, enzo.weight_kg) == ("M", 0)


async def test_collections_follow_their_ordering(store, sync):
    await store.add("students", {"fullName": "Bia"})
    await store.add("students", {"fullName": "Ana"})
    await store.add("expenses", {"description": "a", "amount": 10, "date": "2024-03-01"})
    await store.add("expenses", {"description": "b", "amount": 20, "date": "2024-03-20"})

    assert [s.full_name for s in sync.students.items] == ["Ana", "Bia"]
    assert [e.description for e in sync.expenses.items] == ["b", "a"]


async def test_malformed_document_is_rejected_not_fatal(store, sync):
    good = await store.add("logs", {
        "studentId": "s1", "date": "2024-03-01T12:00:00Z", "mealType": "Almoço",
        "consumptionPercentage": 80, "mood": "Happy",
    })
    bad = await store.add("logs", {"studentId": "s1", "date": "2024-03-02T12:00:00Z"})

    snap = sync.logs.snapshot
    assert snap.ids() == [good]
    assert snap.rejected == (bad,)


async def test_every_notification_is_a_new_version(store, sync):
    before = sync.goals.version
    await store.add("goals", {"text": "x", "createdAt": "2024-01-01T00:00:00Z"})
    assert sync.goals.version == before + 1


async def test_stop_clears_collections_and_unsubscribes(store):
    sync = RealtimeSync(store)
    sync.start()
    sync.start()
    assert store.watcher_count == 6

    await store.add("students", {"fullName": "Ana"})
    assert len(sync.students.items) == 1

    sync.stop()
    assert not sync.running
    assert store.watcher_count == 0
    assert sync.students.items == ()


async def test_wait_for_resolves_on_matching_snapshot(store, sync):
    waiter = asyncio.create_task(sync.goals.wait_for(lambda snap: len(snap) == 1, timeout=1))
    await asyncio.sleep(0)
    assert not waiter.done()
    await store.add("goals", {"text": "x", "createdAt": "2024-01-01T00:00:00Z"})
    snap = await waiter
    assert len(snap) == 1


async def test_listener_failure_does_not_block_others(store, sync):
    seen = []

    def broken(_snap):
        raise RuntimeError("boom")

    sync.goals.subscribe(broken)
    sync.goals.subscribe(lambda snap: seen.append(snap.version))
    await store.add("goals", {"text": "x", "createdAt": "2024-01-01T00:00:00Z"})
    assert seen == [sync.goals.version]
