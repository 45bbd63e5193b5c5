# BizMetrics - Financial reporting engine for small-business management suites
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Report orchestration for one or several businesses.

This module assembles the engine functions into the outputs consumed by a
presentation layer:

1. Financial summary
   ------------------
   ``build_financial_summary(sales, expenses, products)`` computes every
   metric of the engine once and returns a ``FinancialSummary``.
   ``SUMMARY_MEASURES`` carries the metadata (label, unit) of each field
   so that amounts and percentages can be formatted appropriately.

2. Per-business reports
   ---------------------
   ``summarize_business(records, period_kind, now)`` restricts the sales
   and expenses of a business to a reporting period and summarizes them.
   Products are not dated: the whole catalogue is always used for COGS
   and inventory valuation.

3. Multi-business reports
   -----------------------
   - ``compare_businesses()`` ranks businesses by net profit,
   - ``consolidated_monthly_series()`` merges the records of all
     businesses into shared calendar-month buckets.

Like the engine, nothing here performs I/O or keeps state; records are
provided by a repository (see repository.py).
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from . import engine
from .models import BusinessRecords, Expense, Product, Sale
from .periods import bucket_by_period
from .series import MonthlyPoint, monthly_series


@dataclass(frozen=True)
class MeasureMeta:
    """
    Metadata associated with a summary measure.

    Attributes
    ----------
    key :
        Field name in FinancialSummary (e.g. 'gross_profit').
    label :
        Human-readable label for display.
    unit :
        Either 'amount' (monetary) or 'percent'.
    """

    key: str
    label: str
    unit: str


SUMMARY_MEASURES: tuple[MeasureMeta, ...] = (
    MeasureMeta("revenue", "Revenue", "amount"),
    MeasureMeta("cost_of_goods_sold", "Cost of goods sold", "amount"),
    MeasureMeta("gross_profit", "Gross profit", "amount"),
    MeasureMeta("total_expenses", "Total expenses", "amount"),
    MeasureMeta("operating_expenses", "Operating expenses", "amount"),
    MeasureMeta("one_time_expenses", "One-time expenses", "amount"),
    MeasureMeta("operating_profit", "Operating profit", "amount"),
    MeasureMeta("ebitda", "EBITDA", "amount"),
    MeasureMeta("net_profit", "Net profit", "amount"),
    MeasureMeta("gross_profit_margin", "Gross margin", "percent"),
    MeasureMeta("operating_profit_margin", "Operating margin", "percent"),
    MeasureMeta("net_profit_margin", "Net margin", "percent"),
    MeasureMeta("roi", "Return on investment", "percent"),
    MeasureMeta("inventory_value", "Inventory value (cost)", "amount"),
)


@dataclass(frozen=True)
class FinancialSummary:
    """All financial metrics of one set of records."""

    revenue: float
    cost_of_goods_sold: float
    gross_profit: float
    total_expenses: float
    operating_expenses: float
    one_time_expenses: float
    operating_profit: float
    ebitda: float
    net_profit: float
    gross_profit_margin: float
    operating_profit_margin: float
    net_profit_margin: float
    roi: float
    inventory_value: float

    def as_dict(self) -> dict[str, float]:
        return {meta.key: getattr(self, meta.key) for meta in SUMMARY_MEASURES}


@dataclass(frozen=True)
class BusinessRanking:
    """Revenue and net profit of one business, for comparisons."""

    business_id: str
    name: str
    revenue: float
    net_profit: float


def build_financial_summary(
    sales: Sequence[Sale],
    expenses: Sequence[Expense],
    products: Sequence[Product],
) -> FinancialSummary:
    """
    Compute every engine metric for the given records.

    Each value comes from the corresponding engine function, which holds
    the only definition of that metric.
    """
    return FinancialSummary(
        revenue=engine.total_sales_revenue(sales),
        cost_of_goods_sold=engine.cost_of_goods_sold(sales, products),
        gross_profit=engine.gross_profit(sales, products),
        total_expenses=engine.total_expenses(expenses),
        operating_expenses=engine.operating_expenses(expenses),
        one_time_expenses=engine.one_time_expenses(expenses),
        operating_profit=engine.operating_profit(sales, expenses, products),
        ebitda=engine.ebitda(sales, expenses, products),
        net_profit=engine.net_profit(sales, expenses, products),
        gross_profit_margin=engine.gross_profit_margin(sales, products),
        operating_profit_margin=engine.operating_profit_margin(
            sales, expenses, products
        ),
        net_profit_margin=engine.net_profit_margin(sales, expenses, products),
        roi=engine.roi(sales, expenses, products),
        inventory_value=engine.inventory_value(products),
    )


def _records_in_period(
    records: BusinessRecords, period_kind: str, now: Optional[datetime]
) -> tuple[list[Sale], list[Expense]]:
    sales = bucket_by_period(records.sales, period_kind, now=now)
    expenses = bucket_by_period(records.expenses, period_kind, now=now)
    return sales, expenses


def summarize_business(
    records: BusinessRecords,
    period_kind: str = "all",
    now: Optional[datetime] = None,
) -> FinancialSummary:
    """Financial summary of one business restricted to a reporting period."""
    sales, expenses = _records_in_period(records, period_kind, now)
    return build_financial_summary(sales, expenses, records.products)


def compare_businesses(
    businesses: Iterable[BusinessRecords],
    period_kind: str = "all",
    now: Optional[datetime] = None,
    limit: Optional[int] = None,
) -> list[BusinessRanking]:
    """
    Rank businesses by net profit (descending) over a reporting period.

    Net profit uses the engine definition (gross profit minus all
    expenses) for every business.
    """
    rankings: list[BusinessRanking] = []
    for records in businesses:
        sales, expenses = _records_in_period(records, period_kind, now)
        rankings.append(
            BusinessRanking(
                business_id=records.business_id,
                name=records.name or records.business_id,
                revenue=engine.total_sales_revenue(sales),
                net_profit=engine.net_profit(sales, expenses, records.products),
            )
        )
    rankings.sort(key=lambda r: r.net_profit, reverse=True)
    return rankings if limit is None else rankings[:limit]


def consolidated_monthly_series(
    businesses: Iterable[BusinessRecords],
    period_kind: str = "all",
    now: Optional[datetime] = None,
) -> list[MonthlyPoint]:
    """Monthly series of several businesses merged into shared month buckets."""
    all_sales: list[Sale] = []
    all_expenses: list[Expense] = []
    for records in businesses:
        sales, expenses = _records_in_period(records, period_kind, now)
        all_sales.extend(sales)
        all_expenses.extend(expenses)
    return monthly_series(all_sales, all_expenses)
