# src/SNAP/dashboard/calendar.py
from __future__ import annotations

import calendar as _calendar
import datetime as dt
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, TypeVar

T = TypeVar("T")

MONTH_NAMES = (
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
)
MONTH_ABBREVIATIONS = tuple(name[:3].lower() for name in MONTH_NAMES)
WEEKDAY_LABELS = ("Dom", "Seg", "Ter", "Qua", "Qui", "Sex", "Sáb")


@dataclass(frozen=True)
class MonthGrid:
    year: int
    month: int
    days: int
    leading_blanks: int

    @property
    def label(self) -> str:
        return month_label(self.year, self.month)

    def dates(self) -> List[dt.date]:
        return [dt.date(self.year, self.month, d) for d in range(1, self.days + 1)]


def month_grid(year: int, month: int) -> MonthGrid:
    """Day cells of a Sunday-first month view."""
    first_weekday, days = _calendar.monthrange(year, month)
    # monthrange counts Monday as 0
    return MonthGrid(year=year, month=month, days=days, leading_blanks=(first_weekday + 1) % 7)


def month_label(year: int, month: int) -> str:
    return f"{MONTH_NAMES[month - 1]} {year}"


def as_date(value) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    return value


def bucket_by_day(items: Iterable[T], date_of: Callable[[T], object]) -> Dict[dt.date, List[T]]:
    buckets: Dict[dt.date, List[T]] = defaultdict(list)
    for item in items:
        buckets[as_date(date_of(item))].append(item)
    return dict(buckets)
