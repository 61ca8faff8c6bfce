# src/SNAP/dashboard/metrics.py
from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from SNAP.schemas import (
    AllergySeverity,
    EventStatus,
    Expense,
    ExpenseCategory,
    MealLog,
    SchoolEvent,
    Student,
)

from .calendar import MONTH_ABBREVIATIONS

HISTORY_WINDOW = 7


@dataclass(frozen=True)
class RestrictionSummary:
    total: int
    with_restrictions: int
    without_restrictions: int
    severe: int


@dataclass(frozen=True)
class MonthTotal:
    month: str  # YYYY-MM
    label: str
    total: float


@dataclass(frozen=True)
class EventKPIs:
    published: int
    messages_sent: int
    total_recipients: int


# ---- students ----
def has_restriction(student: Student) -> bool:
    return student.medical.has_restriction or bool(student.medical.allergies)


def restriction_summary(students: Sequence[Student]) -> RestrictionSummary:
    restricted = sum(1 for s in students if has_restriction(s))
    severe = sum(
        1 for s in students
        if any(a.severity == AllergySeverity.SEVERE for a in s.medical.allergies)
    )
    return RestrictionSummary(
        total=len(students),
        with_restrictions=restricted,
        without_restrictions=len(students) - restricted,
        severe=severe,
    )


def filter_students(students: Iterable[Student], query: str = "") -> List[Student]:
    """Case-insensitive match on name or class."""
    q = (query or "").strip().lower()
    if not q:
        return list(students)
    return [s for s in students if q in s.full_name.lower() or q in s.school_class.lower()]


def student_meal_history(logs: Iterable[MealLog], student_id: str) -> Tuple[List[MealLog], List[int]]:
    """
    Logs of one student, newest first, plus the consumption percentages of
    the last seven logs in chronological order (chart series).
    """
    history = sorted((l for l in logs if l.student_id == student_id), key=lambda l: l.date, reverse=True)
    series = [l.consumption_percentage for l in reversed(history[:HISTORY_WINDOW])]
    return history, series


# ---- expenses ----
def filter_expenses(expenses: Iterable[Expense], month: Optional[str] = None, search: str = "") -> List[Expense]:
    q = (search or "").strip().lower()
    out = [
        e for e in expenses
        if (not month or e.month == month)
        and (not q or q in e.description.lower() or q in e.supplier.lower())
    ]
    return sorted(out, key=lambda e: e.date, reverse=True)


def month_total(expenses: Iterable[Expense], month: str) -> float:
    return round(sum(e.amount for e in expenses if e.month == month), 2)


def previous_month(month: str) -> str:
    year, mon = (int(p) for p in month.split("-"))
    if mon == 1:
        return f"{year - 1:04d}-12"
    return f"{year:04d}-{mon - 1:02d}"


def month_over_month_change(expenses: Sequence[Expense], month: str) -> float:
    """Percentage change against the previous month; 0 when there is nothing to compare to."""
    current = month_total(expenses, month)
    prior = month_total(expenses, previous_month(month))
    if prior == 0:
        return 0.0
    return (current - prior) / prior * 100


def expenses_by_category(expenses: Iterable[Expense]) -> Dict[str, float]:
    totals: Dict[str, float] = {}
    for e in expenses:
        key = (e.category or ExpenseCategory.OTHER).value
        totals[key] = totals.get(key, 0.0) + e.amount
    return {k: round(v, 2) for k, v in totals.items()}


def top_category(expenses: Iterable[Expense]) -> Optional[Tuple[str, float]]:
    totals = expenses_by_category(expenses)
    if not totals:
        return None
    return max(totals.items(), key=lambda kv: kv[1])


def monthly_trend(expenses: Sequence[Expense], end_month: str, months: int = 6) -> List[MonthTotal]:
    keys: List[str] = [end_month]
    while len(keys) < months:
        keys.append(previous_month(keys[-1]))
    totals: "OrderedDict[str, float]" = OrderedDict((k, 0.0) for k in reversed(keys))
    for e in expenses:
        if e.month in totals:
            totals[e.month] += e.amount
    return [
        MonthTotal(month=k, label=MONTH_ABBREVIATIONS[int(k[5:7]) - 1], total=round(v, 2))
        for k, v in totals.items()
    ]


# ---- events ----
def event_kpis(events: Iterable[SchoolEvent]) -> EventKPIs:
    published = sent = recipients = 0
    for ev in events:
        if ev.status == EventStatus.PUBLISHED:
            published += 1
        sent += ev.delivery_stats.success
        recipients += ev.delivery_stats.total
    return EventKPIs(published=published, messages_sent=sent, total_recipients=recipients)
