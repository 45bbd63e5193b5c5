from datetime import date, datetime

import pytest

import bizmetrics.periods as periods
from bizmetrics.models import Sale

# Wednesday; the week runs from Monday 2025-03-10 to Sunday 2025-03-16.
NOW = datetime(2025, 3, 12, 15, 30)


def test_week_includes_monday_midnight_and_excludes_previous_sunday() -> None:
    """The current week starts on Monday 00:00:00, inclusive."""
    monday = Sale(total=10.0, date=datetime(2025, 3, 10, 0, 0, 0))
    sunday_before = Sale(total=20.0, date=datetime(2025, 3, 9, 23, 59, 59))
    sunday_end = Sale(total=30.0, date=datetime(2025, 3, 16, 23, 59, 59))

    kept = periods.bucket_by_period(
        [monday, sunday_before, sunday_end], "week", now=NOW
    )

    assert kept == [monday, sunday_end]


def test_week_bounds_and_label() -> None:
    period = periods.period_bounds("week", now=NOW)

    assert period.start == datetime(2025, 3, 10)
    assert period.end.date() == date(2025, 3, 16)
    assert period.label == "This week (2025-03-10 → 2025-03-16)"


def test_day_month_year_bounds() -> None:
    day = periods.period_bounds("day", now=NOW)
    month = periods.period_bounds("month", now=NOW)
    year = periods.period_bounds("year", now=NOW)

    assert (day.start, day.end.date()) == (datetime(2025, 3, 12), date(2025, 3, 12))
    assert (month.start, month.end.date()) == (datetime(2025, 3, 1), date(2025, 3, 31))
    assert (year.start, year.end.date()) == (datetime(2025, 1, 1), date(2025, 12, 31))
    assert month.label == "This month (2025-03)"
    assert year.label == "This year (2025)"


@pytest.mark.parametrize(
    "now,first,last,label",
    [
        (datetime(2025, 2, 28), date(2025, 1, 1), date(2025, 3, 31), "Q1 2025"),
        (datetime(2025, 5, 20), date(2025, 4, 1), date(2025, 6, 30), "Q2 2025"),
        (datetime(2025, 7, 1), date(2025, 7, 1), date(2025, 9, 30), "Q3 2025"),
        (datetime(2025, 12, 31), date(2025, 10, 1), date(2025, 12, 31), "Q4 2025"),
    ],
)
def test_quarter_bounds(now, first, last, label) -> None:
    period = periods.period_bounds("quarter", now=now)

    assert period.start == datetime.combine(first, datetime.min.time())
    assert period.end.date() == last
    assert period.label == f"This quarter ({label})"


def test_month_keeps_last_microsecond_of_the_month() -> None:
    inside = Sale(date=datetime(2025, 3, 31, 23, 59, 59, 999999))
    outside = Sale(date=datetime(2025, 4, 1, 0, 0, 0))

    assert periods.bucket_by_period([inside, outside], "month", now=NOW) == [inside]


def test_all_returns_every_record_even_undated() -> None:
    records = [Sale(total=1.0), Sale(total=2.0, date=datetime(2001, 1, 1))]

    assert periods.period_bounds("all") is None
    assert periods.bucket_by_period(records, "all", now=NOW) == records


def test_undated_records_are_excluded_from_filtered_periods() -> None:
    records = [Sale(total=1.0), Sale(total=2.0, date=datetime(2025, 3, 12, 8))]

    assert periods.bucket_by_period(records, "day", now=NOW) == [records[1]]


def test_unknown_period_kind_raises() -> None:
    with pytest.raises(ValueError, match="Unknown period kind"):
        periods.bucket_by_period([], "fortnight")


def test_mappings_and_custom_date_field() -> None:
    rows = [
        {"created_at": "2025-03-11T09:00:00", "amount": 5},
        {"created_at": "2025-02-11T09:00:00", "amount": 7},
        {"amount": 9},
    ]

    kept = periods.bucket_by_period(rows, "month", date_field="created_at", now=NOW)

    assert kept == [rows[0]]


def test_default_reference_time_uses_now(monkeypatch) -> None:
    monkeypatch.setattr(periods, "_now", lambda: NOW)
    records = [Sale(date=datetime(2025, 3, 1)), Sale(date=datetime(2025, 2, 28))]

    assert periods.bucket_by_period(records, "month") == [records[0]]


def test_filter_by_date_range_inclusive_whole_days() -> None:
    records = [
        Sale(date=datetime(2025, 1, 31, 23, 0)),
        Sale(date=datetime(2025, 2, 1, 0, 0)),
        Sale(date=datetime(2025, 2, 15, 23, 59, 59)),
        Sale(date=datetime(2025, 2, 16, 0, 0)),
    ]

    kept = periods.filter_by_date_range(records, date(2025, 2, 1), date(2025, 2, 15))

    assert kept == records[1:3]


def test_filter_by_date_range_without_bounds_keeps_everything() -> None:
    records = [Sale(), Sale(date=datetime(2025, 1, 1))]

    assert periods.filter_by_date_range(records, None, date(2025, 1, 1)) == records


def test_date_range_period_rejects_inverted_bounds() -> None:
    with pytest.raises(ValueError):
        periods.date_range_period(date(2025, 2, 1), date(2025, 1, 1))

    period = periods.date_range_period(date(2025, 1, 1), date(2025, 1, 31))
    assert period.label == "Custom period (2025-01-01 → 2025-01-31)"
    assert period.contains(datetime(2025, 1, 31, 12))
