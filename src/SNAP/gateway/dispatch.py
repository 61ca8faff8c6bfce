# src/SNAP/gateway/dispatch.py
from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from SNAP.app_logger import get_logger
from SNAP.schemas import (
    DeliveryStats,
    DispatchStatus,
    EventAudience,
    EventStatus,
    SchoolEvent,
    Student,
)

from .crud import Confirm, DomainGateway
from .whatsapp import build_link

log = get_logger("gateway.dispatch")

CONFIRM_RESEND = "Este evento já foi enviado. Deseja reenviar?"

Sender = Callable[[Student, SchoolEvent], Awaitable[bool]]
LinkOpener = Callable[[str], None]
Progress = Callable[[int], None]


async def simulated_send(student: Student, event: SchoolEvent) -> bool:
    """Stand-in for a bulk messaging API: every send succeeds."""
    return True


def resolve_recipients(event: SchoolEvent, students: Sequence[Student]) -> List[Student]:
    if event.audience == EventAudience.GLOBAL:
        return list(students)
    if event.audience == EventAudience.CLASS:
        return [s for s in students if s.school_class == event.target_id]
    return [s for s in students if s.id == event.target_id]


@dataclass
class DispatchResult:
    event: SchoolEvent
    recipients: int
    link: Optional[str] = None
    progress: List[int] = field(default_factory=list)

    @property
    def stats(self) -> DeliveryStats:
        return self.event.delivery_stats


class EventDispatcher:
    """
    Publishes an event and broadcasts it to its audience.

    Status goes PUBLISHED/SENDING before the first send and
    PUBLISHED/COMPLETED with the delivery statistics after the last one.
    Recipients are processed one by one; statistics are only written at the
    end, so a run that dies half way leaves no statistics behind.
    """

    def __init__(
        self,
        gateway: DomainGateway,
        *,
        sender: Sender = simulated_send,
        open_link: Optional[LinkOpener] = None,
        school_name: str = "Escola Berçário Pintando 7",
        whatsapp_base_url: str = "https://wa.me",
        country_code: str = "55",
        delay_bounds: Tuple[float, float] = (0.1, 0.3),
        rng: Optional[random.Random] = None,
    ) -> None:
        self._gateway = gateway
        self._sender = sender
        self._open_link = open_link
        self.school_name = school_name
        self.whatsapp_base_url = whatsapp_base_url
        self.country_code = country_code
        self.delay_bounds = delay_bounds
        self._rng = rng or random.Random()

    async def _pause(self) -> None:
        lo, hi = self.delay_bounds
        if hi > 0:
            await asyncio.sleep(self._rng.uniform(lo, hi))

    async def dispatch(
        self,
        event: SchoolEvent,
        students: Sequence[Student],
        *,
        confirm: Optional[Confirm] = None,
        on_progress: Optional[Progress] = None,
    ) -> Optional[DispatchResult]:
        if event.whatsapp_status == DispatchStatus.COMPLETED:
            if not (confirm or self._gateway.confirm)(CONFIRM_RESEND):
                log.info("resend of event %s declined", event.id)
                return None

        recipients = resolve_recipients(event, students)
        total = len(recipients) or 1
        progress: List[int] = []

        def _report(pct: int) -> None:
            progress.append(pct)
            if on_progress:
                on_progress(pct)

        sending = event.model_copy(update={
            "status": EventStatus.PUBLISHED,
            "whatsapp_status": DispatchStatus.SENDING,
        })
        await self._gateway.update_event(sending)
        log.info("dispatching event %s to %s recipient(s) (%s)", event.id, len(recipients), event.audience.value)

        success = 0
        link: Optional[str] = None
        if event.audience == EventAudience.STUDENT and len(recipients) == 1:
            student = recipients[0]
            if student.contact_phone:
                link = build_link(
                    student,
                    event,
                    school_name=self.school_name,
                    base_url=self.whatsapp_base_url,
                    country_code=self.country_code,
                )
                if self._open_link:
                    self._open_link(link)
                success = 1
                _report(100)
            else:
                log.warning("student %s has no contact phone; nothing sent", student.id)
        else:
            for i, student in enumerate(recipients):
                await self._pause()
                if await self._sender(student, event):
                    success += 1
                else:
                    log.warning("send to guardian of %s failed", student.id)
                _report(round((i + 1) / total * 100))

        completed = event.model_copy(update={
            "status": EventStatus.PUBLISHED,
            "whatsapp_status": DispatchStatus.COMPLETED,
            "delivery_stats": DeliveryStats(
                total=len(recipients),
                success=success,
                failed=len(recipients) - success,
            ),
        })
        await self._gateway.update_event(completed)
        log.info(
            "event %s dispatched: total=%s success=%s failed=%s",
            event.id, len(recipients), success, len(recipients) - success,
        )
        return DispatchResult(event=completed, recipients=len(recipients), link=link, progress=progress)
