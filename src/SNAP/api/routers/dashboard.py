# src/SNAP/api/routers/dashboard.py
from __future__ import annotations

import datetime as dt
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from SNAP.dashboard import (
    WEEKDAY_LABELS,
    bucket_by_day,
    event_kpis,
    expenses_by_category,
    filter_expenses,
    month_grid,
    month_over_month_change,
    month_total,
    monthly_trend,
    previous_month,
    restriction_summary,
    top_category,
)
from SNAP.schemas import APIModel, Appointment, Expense, SchoolEvent

from ..context import AppContext
from ..deps import get_context, require_user

router = APIRouter(prefix="/dashboard", tags=["dashboard"], dependencies=[Depends(require_user)])


class SummaryOut(APIModel):
    total_students: int
    with_restrictions: int
    without_restrictions: int
    severe: int
    meal_logs: int
    pending_goals: int


class TrendPoint(APIModel):
    month: str
    label: str
    total: float


class ExpensesOut(APIModel):
    month: str
    total: float
    previous_month: str
    previous_total: float
    change_percent: float
    by_category: Dict[str, float]
    top_category: Optional[str] = None
    top_category_total: float = 0
    trend: List[TrendPoint]
    items: List[Expense]


class CalendarDay(APIModel):
    date: dt.date
    events: List[SchoolEvent] = []
    appointments: List[Appointment] = []


class CalendarOut(APIModel):
    year: int
    month: int
    label: str
    leading_blanks: int
    weekdays: List[str]
    days: List[CalendarDay]


class EventsOut(APIModel):
    published: int
    messages_sent: int
    total_recipients: int


def _this_month() -> str:
    return dt.date.today().isoformat()[:7]


@router.get("/summary", response_model=SummaryOut)
async def summary(ctx: AppContext = Depends(get_context)):
    rs = restriction_summary(ctx.sync.students.items)
    return SummaryOut(
        total_students=rs.total,
        with_restrictions=rs.with_restrictions,
        without_restrictions=rs.without_restrictions,
        severe=rs.severe,
        meal_logs=len(ctx.sync.logs.items),
        pending_goals=sum(1 for g in ctx.sync.goals.items if not g.completed),
    )


@router.get("/expenses", response_model=ExpensesOut)
async def expenses(
    month: Optional[str] = Query(default=None, pattern=r"^\d{4}-\d{2}$"),
    q: str = "",
    ctx: AppContext = Depends(get_context),
):
    month = month or _this_month()
    # the search narrows every figure, totals and trend included
    matched = filter_expenses(ctx.sync.expenses.items, search=q)
    items = filter_expenses(matched, month)
    top = top_category(items)
    prior = previous_month(month)
    return ExpensesOut(
        month=month,
        total=month_total(matched, month),
        previous_month=prior,
        previous_total=month_total(matched, prior),
        change_percent=month_over_month_change(matched, month),
        by_category=expenses_by_category(items),
        top_category=top[0] if top else None,
        top_category_total=top[1] if top else 0,
        trend=[TrendPoint(month=p.month, label=p.label, total=p.total) for p in monthly_trend(matched, month)],
        items=items,
    )


@router.get("/calendar", response_model=CalendarOut)
async def calendar(
    year: Optional[int] = Query(default=None, ge=1900, le=9999),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    ctx: AppContext = Depends(get_context),
):
    today = dt.date.today()
    grid = month_grid(year or today.year, month or today.month)
    events = bucket_by_day(ctx.sync.events.items, lambda e: e.date)
    appointments = bucket_by_day(ctx.sync.appointments.items, lambda a: a.date)
    return CalendarOut(
        year=grid.year,
        month=grid.month,
        label=grid.label,
        leading_blanks=grid.leading_blanks,
        weekdays=list(WEEKDAY_LABELS),
        days=[
            CalendarDay(date=d, events=events.get(d, []), appointments=appointments.get(d, []))
            for d in grid.dates()
        ],
    )


@router.get("/events", response_model=EventsOut)
async def events(ctx: AppContext = Depends(get_context)):
    kpis = event_kpis(ctx.sync.events.items)
    return EventsOut(
        published=kpis.published,
        messages_sent=kpis.messages_sent,
        total_recipients=kpis.total_recipients,
    )
