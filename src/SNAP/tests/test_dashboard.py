# src/SNAP/tests/test_dashboard.py
import datetime as dt

import pytest

from SNAP.dashboard import (
    bucket_by_day,
    event_kpis,
    expenses_by_category,
    filter_expenses,
    filter_students,
    month_grid,
    month_over_month_change,
    month_total,
    monthly_trend,
    previous_month,
    restriction_summary,
    student_meal_history,
    top_category,
)
from SNAP.schemas import (
    Allergy,
    AllergySeverity,
    DeliveryStats,
    EventStatus,
    Expense,
    ExpenseCategory,
    MealLog,
    MealType,
    MedicalRecord,
)


@pytest.mark.parametrize(
    "year, month, days, blanks",
    [
        (2024, 2, 29, 4),   # Thursday
        (2024, 4, 30, 1),   # Monday
        (2024, 9, 30, 0),   # Sunday
        (2023, 2, 28, 3),   # Wednesday
    ],
)
def test_month_grid(year, month, days, blanks):
    grid = month_grid(year, month)
    assert grid.days == days
    assert grid.leading_blanks == blanks
    assert len(grid.dates()) == days


def test_month_grid_label_is_portuguese():
    assert month_grid(2024, 3).label == "Março 2024"


def test_march_expense_appears_in_march_view(make_expense):
    expense = make_expense(150.0, "2024-03-15", category=ExpenseCategory.FOOD)
    others = [make_expense(99.0, "2024-04-01")]

    view = filter_expenses([expense, *others], month="2024-03")
    assert view == [expense]
    assert month_total([expense, *others], "2024-03") == 150.00
    assert expenses_by_category(view) == {"Alimentação": 150.0}


def test_expense_search_and_ordering(make_expense):
    a = make_expense(10, "2024-03-01", description="Gás", supplier="Ultragaz")
    b = make_expense(20, "2024-03-20", description="Frutas", supplier="Ceasa")
    assert filter_expenses([a, b], month="2024-03") == [b, a]
    assert filter_expenses([a, b], search="ultra") == [a]
    assert filter_expenses([a, b], search="FRUT") == [b]


def test_month_over_month_change(make_expense):
    feb = make_expense(100, "2024-02-10")
    mar = make_expense(150, "2024-03-10")
    assert month_over_month_change([mar], "2024-03") == 0
    assert month_over_month_change([feb, mar], "2024-03") == pytest.approx(50.0)


def test_previous_month_wraps_year():
    assert previous_month("2024-01") == "2023-12"
    assert previous_month("2024-10") == "2024-09"


def test_missing_category_counts_as_other():
    expense = Expense.model_validate({"description": "Diversos", "amount": 30, "date": "2024-03-02"})
    assert expenses_by_category([expense]) == {"Outros": 30.0}


def test_top_category_and_trend(make_expense):
    items = [
        make_expense(50, "2024-03-01", category=ExpenseCategory.FOOD),
        make_expense(80, "2024-03-02", category=ExpenseCategory.SALARIES),
        make_expense(40, "2024-01-05", category=ExpenseCategory.FOOD),
    ]
    assert top_category(items) == ("Alimentação", 90.0)
    assert top_category([]) is None

    trend = monthly_trend(items, "2024-03")
    assert [p.month for p in trend] == ["2023-10", "2023-11", "2023-12", "2024-01", "2024-02", "2024-03"]
    assert [p.total for p in trend][-3:] == [40.0, 0.0, 130.0]
    assert trend[-1].label == "mar"


def test_restriction_summary(make_student):
    students = [
        make_student("A", medical=MedicalRecord(allergies=[Allergy(name="Leite", severity=AllergySeverity.SEVERE)])),
        make_student("B", medical=MedicalRecord(has_restriction=True)),
        make_student("C"),
    ]
    s = restriction_summary(students)
    assert (s.total, s.with_restrictions, s.without_restrictions, s.severe) == (3, 2, 1, 1)


def test_filter_students_by_name_or_class(make_student):
    ana = make_student("Ana Lima", school_class="Berçário")
    beto = make_student("Beto", school_class="Maternal II")
    assert filter_students([ana, beto], "ANA") == [ana]
    assert filter_students([ana, beto], "maternal") == [beto]
    assert filter_students([ana, beto], "") == [ana, beto]


def test_event_kpis(make_event):
    events = [
        make_event(status=EventStatus.PUBLISHED, delivery_stats=DeliveryStats(total=10, success=9, failed=1)),
        make_event(status=EventStatus.DRAFT),
    ]
    k = event_kpis(events)
    assert (k.published, k.messages_sent, k.total_recipients) == (1, 9, 10)


def test_student_meal_history_series_is_last_seven_chronological():
    base = dt.datetime(2024, 3, 1, 12, tzinfo=dt.timezone.utc)
    logs = [
        MealLog(student_id="s1", date=base + dt.timedelta(days=i), meal_type=MealType.LUNCH,
                consumption_percentage=i * 10, mood="Happy")
        for i in range(9)
    ]
    logs.append(MealLog(student_id="s2", date=base, meal_type=MealType.SNACK, consumption_percentage=5, mood="Fussy"))

    history, series = student_meal_history(logs, "s1")
    assert len(history) == 9
    assert history[0].consumption_percentage == 80
    assert series == [20, 30, 40, 50, 60, 70, 80]


def test_bucket_by_day_uses_calendar_date(make_event):
    e1 = make_event(date=dt.date(2024, 6, 15))
    e2 = make_event(date=dt.date(2024, 6, 15))
    e3 = make_event(date=dt.date(2024, 6, 16))
    buckets = bucket_by_day([e1, e2, e3], lambda e: e.date)
    assert buckets[dt.date(2024, 6, 15)] == [e1, e2]
    assert buckets[dt.date(2024, 6, 16)] == [e3]
