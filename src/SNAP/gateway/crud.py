# src/SNAP/gateway/crud.py
from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Coroutine, Dict, Optional, Set

from SNAP.app_logger import get_logger
from SNAP.schemas import Appointment, Entity, Expense, MealLog, SchoolEvent, Student, WeeklyGoal
from SNAP.store.base import DocumentStore

log = get_logger("gateway")

Confirm = Callable[[str], bool]
Alert = Callable[[str], None]

CONFIRM_DELETE_STUDENT = "Tem certeza que deseja remover este aluno?"
CONFIRM_DELETE_EXPENSE = "Tem certeza que deseja excluir esta despesa?"
CONFIRM_DELETE_EVENT = "Tem certeza que deseja excluir este evento?"
ALERT_STUDENT_CREATE_FAILED = "Erro ao salvar aluno. Verifique sua conexão e tente novamente."


def always_confirm(_prompt: str) -> bool:
    return True


def _log_alert(message: str) -> None:
    log.warning("alert: %s", message)


class DomainGateway:
    """
    Create/update/delete per entity type.

    Every write is dispatched as a task and returned straight away: callers do
    not have to wait, the next sync snapshot is the confirmation. Awaiting the
    task gives the new id for creates and True/False for updates and deletes.
    Failures are logged and never retried; a failed student creation also
    raises the blocking alert.
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        confirm: Optional[Confirm] = None,
        alert: Optional[Alert] = None,
    ) -> None:
        self._store = store
        self.confirm: Confirm = confirm or always_confirm
        self.alert: Alert = alert or _log_alert
        self._pending: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # dispatch plumbing
    # ------------------------------------------------------------------
    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> "asyncio.Task[Any]":
        task = asyncio.get_running_loop().create_task(coro)
        # keep a strong reference until the write settles
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    @staticmethod
    def _resolved(value: Any) -> "asyncio.Future[Any]":
        fut = asyncio.get_running_loop().create_future()
        fut.set_result(value)
        return fut

    async def drain(self) -> None:
        """Wait for every write dispatched so far."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def _create(self, collection: str, entity: Entity, *, alert_message: Optional[str] = None) -> Optional[str]:
        data = entity.to_document()
        try:
            doc_id = await self._store.add(collection, data)
        except Exception:
            log.exception("create in %s failed", collection)
            if alert_message:
                self.alert(alert_message)
            return None
        log.info("created %s/%s (temp id %s dropped)", collection, doc_id, entity.id)
        return doc_id

    async def _update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> bool:
        try:
            await self._store.update(collection, doc_id, data)
        except Exception:
            log.exception("update %s/%s failed", collection, doc_id)
            return False
        log.info("updated %s/%s", collection, doc_id)
        return True

    async def _delete(self, collection: str, doc_id: str) -> bool:
        try:
            await self._store.delete(collection, doc_id)
        except Exception:
            log.exception("delete %s/%s failed", collection, doc_id)
            return False
        log.info("deleted %s/%s", collection, doc_id)
        return True

    def _confirmed_delete(self, collection: str, doc_id: str, prompt: str, confirm: Optional[Confirm]) -> Awaitable[bool]:
        if not (confirm or self.confirm)(prompt):
            log.info("delete %s/%s declined", collection, doc_id)
            return self._resolved(False)
        return self._spawn(self._delete(collection, doc_id))

    # ------------------------------------------------------------------
    # students
    # ------------------------------------------------------------------
    def add_student(self, student: Student) -> Awaitable[Optional[str]]:
        return self._spawn(
            self._create("students", student.with_restriction_flag(), alert_message=ALERT_STUDENT_CREATE_FAILED)
        )

    def update_student(self, student: Student) -> Awaitable[bool]:
        flagged = student.with_restriction_flag()
        return self._spawn(self._update("students", student.id, flagged.to_document()))

    def delete_student(self, student_id: str, *, confirm: Optional[Confirm] = None) -> Awaitable[bool]:
        return self._confirmed_delete("students", student_id, CONFIRM_DELETE_STUDENT, confirm)

    # ------------------------------------------------------------------
    # meal logs (create only)
    # ------------------------------------------------------------------
    def add_log(self, meal_log: MealLog) -> Awaitable[Optional[str]]:
        return self._spawn(self._create("logs", meal_log))

    # ------------------------------------------------------------------
    # appointments
    # ------------------------------------------------------------------
    def add_appointment(self, appointment: Appointment) -> Awaitable[Optional[str]]:
        return self._spawn(self._create("appointments", appointment))

    def delete_appointment(self, appointment_id: str) -> Awaitable[bool]:
        return self._spawn(self._delete("appointments", appointment_id))

    # ------------------------------------------------------------------
    # weekly goals
    # ------------------------------------------------------------------
    def add_goal(self, goal: WeeklyGoal) -> Awaitable[Optional[str]]:
        return self._spawn(self._create("goals", goal))

    def toggle_goal(self, goal_id: str, completed: bool) -> Awaitable[bool]:
        # flips the value the caller rendered; the store is not re-read
        return self._spawn(self._update("goals", goal_id, {"completed": not completed}))

    def delete_goal(self, goal_id: str) -> Awaitable[bool]:
        return self._spawn(self._delete("goals", goal_id))

    # ------------------------------------------------------------------
    # expenses
    # ------------------------------------------------------------------
    def add_expense(self, expense: Expense) -> Awaitable[Optional[str]]:
        return self._spawn(self._create("expenses", expense))

    def update_expense(self, expense: Expense) -> Awaitable[bool]:
        return self._spawn(self._update("expenses", expense.id, expense.to_document()))

    def delete_expense(self, expense_id: str, *, confirm: Optional[Confirm] = None) -> Awaitable[bool]:
        return self._confirmed_delete("expenses", expense_id, CONFIRM_DELETE_EXPENSE, confirm)

    # ------------------------------------------------------------------
    # school events
    # ------------------------------------------------------------------
    def add_event(self, event: SchoolEvent) -> Awaitable[Optional[str]]:
        return self._spawn(self._create("events", event))

    def update_event(self, event: SchoolEvent) -> Awaitable[bool]:
        return self._spawn(self._update("events", event.id, event.to_document()))

    def delete_event(self, event_id: str, *, confirm: Optional[Confirm] = None) -> Awaitable[bool]:
        return self._confirmed_delete("events", event_id, CONFIRM_DELETE_EVENT, confirm)
