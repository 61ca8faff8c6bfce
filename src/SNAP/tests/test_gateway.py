# src/SNAP/tests/test_gateway.py
import pytest

from SNAP.gateway import ALERT_STUDENT_CREATE_FAILED, CONFIRM_DELETE_EXPENSE, DomainGateway
from SNAP.schemas import MedicalRecord, WeeklyGoal

pytestmark = pytest.mark.anyio


async def test_add_student_sets_restriction_flag_and_drops_temp_id(store, sync, gateway, make_student, peanut_allergy):
    student = make_student(medical=peanut_allergy)
    new_id = await gateway.add_student(student)

    assert new_id and new_id != student.id
    stored = store.get("students", new_id)
    assert "id" not in stored
    assert stored["medical"]["hasRestriction"] is True
    assert sync.students.get(new_id).medical.has_restriction is True


async def test_emptying_allergies_clears_restriction_flag(store, sync, gateway, make_student, peanut_allergy):
    new_id = await gateway.add_student(make_student(medical=peanut_allergy))
    current = sync.students.get(new_id)

    ok = await gateway.update_student(current.model_copy(update={"medical": MedicalRecord(has_restriction=True)}))
    assert ok is True
    assert store.get("students", new_id)["medical"]["hasRestriction"] is False


async def test_toggle_goal_twice_restores_value(store, sync, gateway):
    goal_id = await gateway.add_goal(WeeklyGoal(text="Oferecer legumes"))
    original = sync.goals.get(goal_id).completed

    await gateway.toggle_goal(goal_id, sync.goals.get(goal_id).completed)
    assert sync.goals.get(goal_id).completed is (not original)

    await gateway.toggle_goal(goal_id, sync.goals.get(goal_id).completed)
    assert sync.goals.get(goal_id).completed is original


async def test_toggle_with_stale_value_writes_negation_of_what_caller_saw(store, sync, gateway):
    goal_id = await gateway.add_goal(WeeklyGoal(text="x"))
    await gateway.toggle_goal(goal_id, False)
    await gateway.toggle_goal(goal_id, False)
    assert store.get("goals", goal_id)["completed"] is True


async def test_declined_delete_leaves_document(store, sync, make_expense):
    prompts = []

    def decline(prompt):
        prompts.append(prompt)
        return False

    gateway = DomainGateway(store, confirm=decline)
    expense_id = await gateway.add_expense(make_expense())

    assert await gateway.delete_expense(expense_id) is False
    assert prompts == [CONFIRM_DELETE_EXPENSE]
    assert sync.expenses.get(expense_id) is not None

    assert await gateway.delete_expense(expense_id, confirm=lambda _p: True) is True
    assert sync.expenses.get(expense_id) is None


async def test_failed_student_create_alerts_and_returns_none(store, make_student):
    alerts = []
    gateway = DomainGateway(store, alert=alerts.append)
    store.fail_writes = True

    assert await gateway.add_student(make_student()) is None
    assert alerts == [ALERT_STUDENT_CREATE_FAILED]


async def test_other_failed_writes_do_not_alert(store, make_expense):
    alerts = []
    gateway = DomainGateway(store, alert=alerts.append)
    store.fail_writes = True

    assert await gateway.add_expense(make_expense()) is None
    assert await gateway.delete_appointment("a1") is False
    assert alerts == []


async def test_writes_need_not_be_awaited(store, sync, gateway):
    gateway.add_goal(WeeklyGoal(text="fire and forget"))
    await gateway.drain()
    assert [g.text for g in sync.goals.items] == ["fire and forget"]
