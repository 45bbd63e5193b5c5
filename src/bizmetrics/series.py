# BizMetrics - Financial reporting engine for small-business management suites
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Time series and product analytics for BizMetrics.

This module groups records into calendar months and products:

- ``monthly_series(sales, expenses)``
    revenue / expenses / profit per calendar month, ascending.
- ``sales_trends(sales)``
    number of sales and revenue per calendar month, ascending.
- ``best_selling_products(sales, limit)``
    products ranked by revenue.
- ``product_profits(sales, products, sort_by, limit)``
    products ranked by profit (revenue - cost) or by quantity sold.

Months are keyed by the year and month of each record's local date and
labelled ``YYYY-MM``. Records without a usable date are skipped. Like the
engine, these functions are pure and never raise for inconsistent
records.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Optional

from .engine import index_products, unit_cost
from .models import Expense, Product, Sale, to_amount
from .periods import record_timestamp

UNKNOWN_PRODUCT = "Unknown product"

PROFIT_SORT_KEYS: tuple[str, ...] = ("profit", "quantity")


@dataclass(frozen=True)
class MonthlyPoint:
    """Revenue, expenses and profit of one calendar month."""

    period: str
    year: int
    month: int
    revenue: float
    expenses: float
    profit: float


@dataclass(frozen=True)
class SalesTrendPoint:
    """Number of sales and revenue of one calendar month."""

    period: str
    count: int
    revenue: float


@dataclass(frozen=True)
class ProductSales:
    """Quantity sold and revenue of one product."""

    product_id: str
    product_name: str
    quantity: float
    revenue: float


@dataclass(frozen=True)
class ProductProfit:
    """Quantity, revenue, cost and profit of one product."""

    product_id: str
    product_name: str
    quantity: float
    revenue: float
    cost: float
    profit: float


def _month_key(record) -> Optional[tuple[int, int]]:
    moment = record_timestamp(record)
    if moment is None:
        return None
    return moment.year, moment.month


def _label(key: tuple[int, int]) -> str:
    return f"{key[0]}-{key[1]:02d}"


def monthly_series(
    sales: Iterable[Sale], expenses: Iterable[Expense]
) -> list[MonthlyPoint]:
    """
    Build the revenue / expenses / profit series per calendar month.

    A month that only has sales (or only expenses) gets 0 for the other
    series. The result is sorted chronologically (ascending).
    """
    revenue: dict[tuple[int, int], float] = {}
    spent: dict[tuple[int, int], float] = {}

    for sale in sales:
        key = _month_key(sale)
        if key is not None:
            revenue[key] = revenue.get(key, 0.0) + to_amount(sale.total)

    for expense in expenses:
        key = _month_key(expense)
        if key is not None:
            spent[key] = spent.get(key, 0.0) + to_amount(expense.amount)

    points: list[MonthlyPoint] = []
    for key in sorted(set(revenue) | set(spent)):
        month_revenue = revenue.get(key, 0.0)
        month_expenses = spent.get(key, 0.0)
        points.append(
            MonthlyPoint(
                period=_label(key),
                year=key[0],
                month=key[1],
                revenue=month_revenue,
                expenses=month_expenses,
                profit=month_revenue - month_expenses,
            )
        )
    return points


def sales_trends(sales: Iterable[Sale]) -> list[SalesTrendPoint]:
    """Number of sales and revenue per calendar month, ascending."""
    counts: dict[tuple[int, int], int] = {}
    revenue: dict[tuple[int, int], float] = {}
    for sale in sales:
        key = _month_key(sale)
        if key is None:
            continue
        counts[key] = counts.get(key, 0) + 1
        revenue[key] = revenue.get(key, 0.0) + to_amount(sale.total)

    return [
        SalesTrendPoint(period=_label(key), count=counts[key], revenue=revenue[key])
        for key in sorted(counts)
    ]


def best_selling_products(
    sales: Iterable[Sale], limit: Optional[int] = 10
) -> list[ProductSales]:
    """
    Rank products by revenue (descending).

    Sales without a product id are ignored. The product name is taken
    from the first sale that carries one.
    """
    names: dict[str, str] = {}
    quantities: dict[str, float] = {}
    revenue: dict[str, float] = {}

    for sale in sales:
        if sale.product_id is None:
            continue
        pid = sale.product_id
        if pid not in names or (names[pid] == UNKNOWN_PRODUCT and sale.product_name):
            names[pid] = sale.product_name or UNKNOWN_PRODUCT
        quantities[pid] = quantities.get(pid, 0.0) + to_amount(sale.quantity)
        revenue[pid] = revenue.get(pid, 0.0) + to_amount(sale.total)

    ranked = sorted(
        (
            ProductSales(
                product_id=pid,
                product_name=names[pid],
                quantity=quantities[pid],
                revenue=revenue[pid],
            )
            for pid in names
        ),
        key=lambda p: p.revenue,
        reverse=True,
    )
    return ranked if limit is None else ranked[:limit]


def product_profits(
    sales: Iterable[Sale],
    products: Sequence[Product],
    sort_by: str = "profit",
    limit: Optional[int] = 15,
) -> list[ProductProfit]:
    """
    Rank products by profit or by quantity sold.

    The cost of a sale is ``unit_cost(product) * quantity``; sales of an
    unknown product have no cost. Products are named after the product
    record when known, otherwise after the sale.

    Raises:
        ValueError: if ``sort_by`` is not 'profit' or 'quantity'.
    """
    if sort_by not in PROFIT_SORT_KEYS:
        raise ValueError(
            f"Unknown sort key: {sort_by!r}. "
            f"Expected one of: {', '.join(PROFIT_SORT_KEYS)}."
        )

    by_id = index_products(products)
    names: dict[str, str] = {}
    quantities: dict[str, float] = {}
    revenue: dict[str, float] = {}
    costs: dict[str, float] = {}

    for sale in sales:
        if sale.product_id is None:
            continue
        pid = sale.product_id
        product = by_id.get(pid)
        quantity = to_amount(sale.quantity)

        if pid not in names:
            if product is not None and product.name:
                names[pid] = product.name
            else:
                names[pid] = sale.product_name or UNKNOWN_PRODUCT

        quantities[pid] = quantities.get(pid, 0.0) + quantity
        revenue[pid] = revenue.get(pid, 0.0) + to_amount(sale.total)
        cost = 0.0
        if product is not None and quantity > 0:
            cost = unit_cost(product) * quantity
        costs[pid] = costs.get(pid, 0.0) + cost

    rows = [
        ProductProfit(
            product_id=pid,
            product_name=names[pid],
            quantity=quantities[pid],
            revenue=revenue[pid],
            cost=costs[pid],
            profit=revenue[pid] - costs[pid],
        )
        for pid in names
    ]
    rows.sort(key=lambda p: getattr(p, sort_by), reverse=True)
    return rows if limit is None else rows[:limit]
