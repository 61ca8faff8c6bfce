# src/SNAP/api/routers/events.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from SNAP.gateway import CONFIRM_DELETE_EVENT, CONFIRM_RESEND
from SNAP.schemas import APIModel, DeliveryStats, SchoolEvent

from ..context import AppContext
from ..deps import confirmed_delete, created, get_context, require_user, written

router = APIRouter(prefix="/events", tags=["events"], dependencies=[Depends(require_user)])


class DispatchOut(APIModel):
    event: SchoolEvent
    recipients: int
    stats: DeliveryStats
    link: Optional[str] = None
    progress: List[int] = []


@router.get("", response_model=List[SchoolEvent])
async def list_events(ctx: AppContext = Depends(get_context)):
    return list(ctx.sync.events.items)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_event(body: SchoolEvent, ctx: AppContext = Depends(get_context)):
    return await created(ctx.gateway.add_event(body))


@router.put("/{event_id}")
async def update_event(event_id: str, body: SchoolEvent, ctx: AppContext = Depends(get_context)):
    return await written(ctx.gateway.update_event(body.model_copy(update={"id": event_id})))


@router.delete("/{event_id}")
async def delete_event(event_id: str, confirm: bool = False, ctx: AppContext = Depends(get_context)):
    write = ctx.gateway.delete_event(event_id, confirm=lambda _prompt: confirm)
    return await confirmed_delete(write, confirm, CONFIRM_DELETE_EVENT)


@router.post("/{event_id}/dispatch", response_model=DispatchOut)
async def dispatch_event(event_id: str, confirm: bool = False, ctx: AppContext = Depends(get_context)):
    """Publish and broadcast; re-sending a completed event needs `?confirm=true`."""
    event = ctx.sync.events.get(event_id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    result = await ctx.dispatcher.dispatch(event, ctx.sync.students.items, confirm=lambda _prompt: confirm)
    if result is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=CONFIRM_RESEND)
    return DispatchOut(
        event=result.event,
        recipients=result.recipients,
        stats=result.stats,
        link=result.link,
        progress=result.progress,
    )
