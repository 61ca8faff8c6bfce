from .calendar import MONTH_NAMES, WEEKDAY_LABELS, MonthGrid, bucket_by_day, month_grid, month_label
from .metrics import (
    EventKPIs,
    MonthTotal,
    RestrictionSummary,
    event_kpis,
    expenses_by_category,
    filter_expenses,
    filter_students,
    has_restriction,
    month_over_month_change,
    month_total,
    monthly_trend,
    previous_month,
    restriction_summary,
    student_meal_history,
    top_category,
)

__all__ = [
    "MONTH_NAMES", "WEEKDAY_LABELS", "MonthGrid", "bucket_by_day", "month_grid", "month_label",
    "EventKPIs", "MonthTotal", "RestrictionSummary",
    "event_kpis", "expenses_by_category", "filter_expenses", "filter_students", "has_restriction",
    "month_over_month_change", "month_total", "monthly_trend", "previous_month",
    "restriction_summary", "student_meal_history", "top_category",
]
