# src/SNAP/tests/test_dispatch.py
import datetime as dt
from urllib.parse import parse_qs, urlsplit

import pytest

from SNAP.gateway import CONFIRM_RESEND, EventDispatcher, build_message, international_phone, resolve_recipients
from SNAP.schemas import DispatchStatus, EventAudience, EventStatus

pytestmark = pytest.mark.anyio


@pytest.fixture
def dispatcher(gateway):
    return EventDispatcher(gateway, delay_bounds=(0.0, 0.0))


async def _stored_event(gateway, sync, event):
    event_id = await gateway.add_event(event)
    return sync.events.get(event_id)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("(11) 98765-4321", "5511987654321"),
        ("11 3333-4444", "551133334444"),
        ("+55 11 98765-4321", "5511987654321"),
    ],
)
def test_international_phone(raw, expected):
    assert international_phone(raw) == expected


def test_resolve_recipients(make_student, make_event):
    a = make_student("A", school_class="Berçário")
    b = make_student("B", school_class="Maternal I")
    assert resolve_recipients(make_event(), [a, b]) == [a, b]
    assert resolve_recipients(make_event(audience=EventAudience.CLASS, target_id="Berçário"), [a, b]) == [a]
    assert resolve_recipients(make_event(audience=EventAudience.STUDENT, target_id=b.id), [a, b]) == [b]


async def test_global_dispatch_to_ten_students(store, sync, gateway, dispatcher, make_student, make_event):
    students = [make_student(f"Aluno {i:02d}") for i in range(10)]
    event = await _stored_event(gateway, sync, make_event())
    assert (event.status, event.whatsapp_status) == (EventStatus.DRAFT, DispatchStatus.PENDING)

    seen = []
    sync.events.subscribe(lambda snap: seen.append(snap.get(event.id).whatsapp_status))
    progress = []

    result = await dispatcher.dispatch(event, students, on_progress=progress.append)

    assert result.stats.model_dump() == {"total": 10, "success": 10, "failed": 0}
    assert seen == [DispatchStatus.SENDING, DispatchStatus.COMPLETED]
    assert progress[-1] == 100 and progress == sorted(progress) and len(progress) == 10

    stored = sync.events.get(event.id)
    assert stored.status == EventStatus.PUBLISHED
    assert stored.whatsapp_status == DispatchStatus.COMPLETED
    assert stored.delivery_stats.success == 10


async def test_failed_sends_are_counted(gateway, sync, make_student, make_event):
    async def flaky(student, _event):
        return not student.full_name.endswith("1")

    dispatcher = EventDispatcher(gateway, sender=flaky, delay_bounds=(0.0, 0.0))
    event = await _stored_event(gateway, sync, make_event())
    result = await dispatcher.dispatch(event, [make_student(f"S{i}") for i in range(3)])
    assert result.stats.model_dump() == {"total": 3, "success": 2, "failed": 1}


async def test_single_student_event_builds_whatsapp_link(gateway, sync, make_student, make_event):
    opened = []
    dispatcher = EventDispatcher(gateway, open_link=opened.append, delay_bounds=(0.0, 0.0))
    student = make_student("Ana")
    event = await _stored_event(
        gateway, sync,
        make_event(audience=EventAudience.STUDENT, target_id=student.id, date=dt.date(2024, 6, 15)),
    )

    result = await dispatcher.dispatch(event, [student, make_student("Outro")])

    assert opened == [result.link]
    parts = urlsplit(result.link)
    assert parts.netloc == "wa.me"
    assert parts.path == "/5511987654321"
    text = parse_qs(parts.query)["text"][0]
    assert text == build_message(student, event, "Escola Berçário Pintando 7")
    assert "15/06/2024 às 09:00" in text
    assert result.stats.model_dump() == {"total": 1, "success": 1, "failed": 0}
    assert result.progress == [100]


async def test_student_without_phone_sends_nothing(gateway, sync, dispatcher, make_student, make_event):
    student = make_student("Sem Fone", contact_phone="")
    event = await _stored_event(gateway, sync, make_event(audience=EventAudience.STUDENT, target_id=student.id))
    result = await dispatcher.dispatch(event, [student])
    assert result.link is None
    assert result.stats.model_dump() == {"total": 1, "success": 0, "failed": 1}


async def test_resend_needs_confirmation(gateway, sync, dispatcher, make_student, make_event):
    event = await _stored_event(gateway, sync, make_event())
    await dispatcher.dispatch(event, [make_student()])
    completed = sync.events.get(event.id)

    prompts = []
    declined = await dispatcher.dispatch(completed, [make_student()], confirm=lambda p: prompts.append(p) or False)
    assert declined is None
    assert prompts == [CONFIRM_RESEND]

    again = await dispatcher.dispatch(completed, [make_student(), make_student("B")], confirm=lambda _p: True)
    assert again.stats.total == 2
