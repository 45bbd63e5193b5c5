# BizMetrics - Financial reporting engine for small-business management suites
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Period helpers for BizMetrics.

This module defines a Period value object and the helpers used to keep
only the records of a reporting period:

- ``bucket_by_period()``     : records of the current day / week / month /
                               quarter / year (or all records),
- ``filter_by_date_range()`` : records of a custom [start, end] range of
                               whole days.

All boundaries are computed on local calendar dates and are inclusive on
both ends. Weeks run from Monday 00:00:00 to Sunday 23:59:59.999999.
"""

from calendar import monthrange
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Optional, TypeVar

from .models import to_timestamp

R = TypeVar("R")

PERIOD_KINDS: tuple[str, ...] = ("all", "day", "week", "month", "quarter", "year")


@dataclass(frozen=True)
class Period:
    """A reporting window [start, end] (inclusive) with a human-readable label."""

    start: datetime
    end: datetime
    label: str

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


def _now() -> datetime:
    """Return the current local time (isolated for easier testing)."""
    return datetime.now()


def _day_span(first: date, last: date) -> tuple[datetime, datetime]:
    return datetime.combine(first, time.min), datetime.combine(last, time.max)


def period_bounds(period_kind: str, now: Optional[datetime] = None) -> Optional[Period]:
    """
    Return the period of kind ``period_kind`` that contains ``now``.

    Returns None for ``"all"`` (no filtering).

    Raises:
        ValueError: if ``period_kind`` is not one of PERIOD_KINDS.
    """
    if period_kind not in PERIOD_KINDS:
        raise ValueError(
            f"Unknown period kind: {period_kind!r}. "
            f"Expected one of: {', '.join(PERIOD_KINDS)}."
        )
    if period_kind == "all":
        return None

    current = to_timestamp(now) if now is not None else _now()
    if current is None:
        raise ValueError(f"Invalid reference time: {now!r}")
    today = current.date()

    if period_kind == "day":
        start, end = _day_span(today, today)
        label = f"Today ({today.isoformat()})"
    elif period_kind == "week":
        monday = today - timedelta(days=today.weekday())
        sunday = monday + timedelta(days=6)
        start, end = _day_span(monday, sunday)
        label = f"This week ({monday.isoformat()} → {sunday.isoformat()})"
    elif period_kind == "month":
        last_day = monthrange(today.year, today.month)[1]
        start, end = _day_span(
            today.replace(day=1), date(today.year, today.month, last_day)
        )
        label = f"This month ({today.year}-{today.month:02d})"
    elif period_kind == "quarter":
        quarter = (today.month - 1) // 3
        first_month = quarter * 3 + 1
        last_month = first_month + 2
        start, end = _day_span(
            date(today.year, first_month, 1),
            date(today.year, last_month, monthrange(today.year, last_month)[1]),
        )
        label = f"This quarter (Q{quarter + 1} {today.year})"
    else:
        start, end = _day_span(date(today.year, 1, 1), date(today.year, 12, 31))
        label = f"This year ({today.year})"

    return Period(start=start, end=end, label=label)


def record_timestamp(record: Any, date_field: str = "date") -> Optional[datetime]:
    """
    Read the timestamp of a record as a naive local datetime.

    ``record`` may be a model instance (attribute access) or a mapping
    (key access). Returns None when the field is missing or unparseable.
    """
    if isinstance(record, Mapping):
        raw = record.get(date_field)
    else:
        raw = getattr(record, date_field, None)
    return to_timestamp(raw)


def _filter_in_period(
    records: Iterable[R], period: Period, date_field: str
) -> list[R]:
    kept: list[R] = []
    for record in records:
        moment = record_timestamp(record, date_field)
        if moment is not None and period.contains(moment):
            kept.append(record)
    return kept


def bucket_by_period(
    records: Iterable[R],
    period_kind: str,
    date_field: str = "date",
    now: Optional[datetime] = None,
) -> list[R]:
    """
    Keep the records dated within the ``period_kind`` period containing ``now``.

    Parameters
    ----------
    records:
        Sales, expenses or any dated records (objects or mappings).
    period_kind:
        One of 'all', 'day', 'week', 'month', 'quarter', 'year'.
        'all' returns every record, dated or not.
    date_field:
        Name of the timestamp attribute / key.
    now:
        Reference time; defaults to the current local time.

    Returns
    -------
    list
        The matching records, in input order. Records without a usable
        timestamp are excluded from every filtered period.
    """
    period = period_bounds(period_kind, now)
    if period is None:
        return list(records)
    return _filter_in_period(records, period, date_field)


def date_range_period(start: date, end: date) -> Period:
    """
    Build a custom period covering the whole days from ``start`` to ``end``.

    Raises:
        ValueError: if ``end`` is before ``start``.
    """
    if end < start:
        raise ValueError("Custom period end date cannot be before start date.")
    first, last = _day_span(start, end)
    return Period(
        start=first,
        end=last,
        label=f"Custom period ({start.isoformat()} → {end.isoformat()})",
    )


def filter_by_date_range(
    records: Iterable[R],
    start: Optional[date],
    end: Optional[date],
    date_field: str = "date",
) -> list[R]:
    """
    Keep the records dated between ``start`` 00:00 and ``end`` 23:59:59.

    When either bound is missing, no filtering happens.
    """
    if start is None or end is None:
        return list(records)
    return _filter_in_period(records, date_range_period(start, end), date_field)
