# BizMetrics - Financial reporting engine for small-business management suites
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Core financial aggregation engine for BizMetrics.

This module holds the single authoritative definition of every financial
metric derived from the records of one business:

1. Revenue and costs
   ------------------
   - ``total_sales_revenue(sales)``     : Σ sale.total
   - ``total_expenses(expenses)``       : Σ expense.amount
   - ``cost_of_goods_sold(sales, products)``
       Σ unit_cost(product) * sale.quantity over the sales whose product
       can be resolved. The unit cost falls back from ``cost_price`` to
       ``wholesale_price`` when the cost price is not set.

2. Expense classification
   -----------------------
   Every expense belongs to exactly one bucket:
   - CAPITAL   : one-time / investment spend,
   - OPERATING : recurring spend (everything else).
   An explicit ``Expense.kind`` wins; otherwise the category text is
   matched against ``CAPITAL_EXPENSE_KEYWORDS``.

3. Profits, margins and ROI
   -------------------------
   gross     = revenue - COGS
   operating = gross - operating expenses   (EBITDA is an alias)
   net       = gross - all expenses
   margins   = profit / revenue * 100        (0 when revenue is 0)
   ROI       = net / one-time expenses * 100 (0 when one-time is 0)

4. Inventory
   ----------
   Stock valuation at cost (same fallback chain as COGS), at retail and at
   wholesale prices, plus the low-stock listing.

Notes
-----
Every function here is pure: inputs are never mutated, nothing is cached,
and no exception is raised for inconsistent records. A sale pointing to
an unknown product simply contributes 0 to COGS, which keeps reports
available on partially inconsistent data at the cost of understating
COGS. Validation of the records belongs to the data-access boundary
(models.py / io.py).
"""

import unicodedata
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .models import Expense, ExpenseKind, Product, Sale, to_amount

# Categories containing one of these keywords are capital / one-time spend.
# Matching is done on the accent-folded, lower-cased category.
CAPITAL_EXPENSE_KEYWORDS: tuple[str, ...] = (
    "capital",
    "investment",
    "ponctuel",
    "one-time",
    "equipment",
    "equipement",
    "materiel",
    "vehicule",
    "machine",
)

# Bucket used by expense_breakdown() for expenses without a category.
OTHER_CATEGORY = "Other"

DEFAULT_LOW_STOCK_THRESHOLD = 10.0


@dataclass(frozen=True)
class InventoryValuation:
    """Value of the stock on hand under the three price references."""

    cost_value: float
    retail_value: float
    wholesale_value: float


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _fold(text: str) -> str:
    """Lower-case ``text`` and strip diacritics ('Matériel' -> 'materiel')."""
    decomposed = unicodedata.normalize("NFKD", text.casefold())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def index_products(products: Iterable[Product]) -> dict[str, Product]:
    """Map product id -> product; the first occurrence of an id wins."""
    index: dict[str, Product] = {}
    for product in products:
        if product.id is not None and product.id not in index:
            index[product.id] = product
    return index


def _percent_of(value: float, base: float) -> float:
    if base == 0:
        return 0.0
    return value / base * 100


# ---------------------------------------------------------------------------
# Revenue, costs and expense buckets
# ---------------------------------------------------------------------------


def total_sales_revenue(sales: Iterable[Sale]) -> float:
    """Total revenue recognized by ``sales``."""
    return sum((to_amount(s.total) for s in sales), 0.0)


def total_expenses(expenses: Iterable[Expense]) -> float:
    """Total amount spent, all categories included."""
    return sum((to_amount(e.amount) for e in expenses), 0.0)


def unit_cost(product: Product) -> float:
    """
    Acquisition cost of one unit of ``product``.

    ``cost_price`` is used when it is strictly positive, otherwise the
    ``wholesale_price``. The result is never negative.
    """
    cost_price = to_amount(product.cost_price)
    if cost_price > 0:
        return cost_price
    return max(to_amount(product.wholesale_price), 0.0)


def cost_of_goods_sold(sales: Iterable[Sale], products: Iterable[Product]) -> float:
    """
    Cost of the units actually sold.

    Sales without a product, with an unknown product id or with a
    non-positive quantity contribute 0.
    """
    by_id = index_products(products)
    cogs = 0.0
    for sale in sales:
        if sale.product_id is None:
            continue
        product = by_id.get(sale.product_id)
        quantity = to_amount(sale.quantity)
        if product is None or quantity <= 0:
            continue
        cogs += unit_cost(product) * quantity
    return cogs


def is_capital_category(category: str) -> bool:
    """Whether a free-text category denotes capital / one-time spend."""
    if not category:
        return False
    folded = _fold(category)
    return any(keyword in folded for keyword in CAPITAL_EXPENSE_KEYWORDS)


def classify_expense(expense: Expense) -> ExpenseKind:
    """Return the bucket of ``expense``; an explicit kind takes precedence."""
    if expense.kind is not None:
        return expense.kind
    if is_capital_category(expense.category):
        return ExpenseKind.CAPITAL
    return ExpenseKind.OPERATING


def operating_expenses(expenses: Iterable[Expense]) -> float:
    """Recurring spend: every expense that is not capital / one-time."""
    return sum(
        (
            to_amount(e.amount)
            for e in expenses
            if classify_expense(e) is ExpenseKind.OPERATING
        ),
        0.0,
    )


def one_time_expenses(expenses: Iterable[Expense]) -> float:
    """Capital / investment spend (complement of operating_expenses)."""
    return sum(
        (
            to_amount(e.amount)
            for e in expenses
            if classify_expense(e) is ExpenseKind.CAPITAL
        ),
        0.0,
    )


def expense_breakdown(expenses: Iterable[Expense]) -> dict[str, float]:
    """Total amount per category; blank categories go to OTHER_CATEGORY."""
    breakdown: dict[str, float] = {}
    for expense in expenses:
        category = expense.category
        if not category or not category.strip():
            category = OTHER_CATEGORY
        breakdown[category] = breakdown.get(category, 0.0) + to_amount(expense.amount)
    return breakdown


# ---------------------------------------------------------------------------
# Profits
# ---------------------------------------------------------------------------


def gross_profit(sales: Sequence[Sale], products: Sequence[Product]) -> float:
    """Revenue minus cost of goods sold (may be negative)."""
    return total_sales_revenue(sales) - cost_of_goods_sold(sales, products)


def operating_profit(
    sales: Sequence[Sale],
    expenses: Sequence[Expense],
    products: Sequence[Product],
) -> float:
    """Gross profit minus operating expenses."""
    return gross_profit(sales, products) - operating_expenses(expenses)


def net_profit(
    sales: Sequence[Sale],
    expenses: Sequence[Expense],
    products: Sequence[Product],
) -> float:
    """Gross profit minus all expenses (operating and one-time)."""
    return gross_profit(sales, products) - total_expenses(expenses)


def ebitda(
    sales: Sequence[Sale],
    expenses: Sequence[Expense],
    products: Sequence[Product],
) -> float:
    """
    Earnings before interest, taxes, depreciation and amortization.

    Interest, taxes and depreciation are not modeled, so this is the
    operating profit.
    """
    return operating_profit(sales, expenses, products)


# ---------------------------------------------------------------------------
# Margins and ROI (percentages)
# ---------------------------------------------------------------------------


def gross_profit_margin(sales: Sequence[Sale], products: Sequence[Product]) -> float:
    return _percent_of(gross_profit(sales, products), total_sales_revenue(sales))


def operating_profit_margin(
    sales: Sequence[Sale],
    expenses: Sequence[Expense],
    products: Sequence[Product],
) -> float:
    return _percent_of(
        operating_profit(sales, expenses, products), total_sales_revenue(sales)
    )


def net_profit_margin(
    sales: Sequence[Sale],
    expenses: Sequence[Expense],
    products: Sequence[Product],
) -> float:
    return _percent_of(
        net_profit(sales, expenses, products), total_sales_revenue(sales)
    )


def roi(
    sales: Sequence[Sale],
    expenses: Sequence[Expense],
    products: Sequence[Product],
) -> float:
    """Return on investment: net profit over one-time expenses, in percent."""
    return _percent_of(
        net_profit(sales, expenses, products), one_time_expenses(expenses)
    )


def markup_percentage(cost_price: float, selling_price: float) -> float:
    """
    Markup of a selling price over a cost price, in percent.

    Returns 0 when either price is not strictly positive.
    """
    cost = to_amount(cost_price)
    selling = to_amount(selling_price)
    if cost <= 0 or selling <= 0:
        return 0.0
    return (selling - cost) / cost * 100


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------


def inventory_value(products: Iterable[Product]) -> float:
    """Stock on hand valued at unit cost."""
    return sum((to_amount(p.stock) * unit_cost(p) for p in products), 0.0)


def inventory_valuation(products: Iterable[Product]) -> InventoryValuation:
    """Stock on hand valued at cost, retail and wholesale prices."""
    cost_value = retail_value = wholesale_value = 0.0
    for product in products:
        stock = to_amount(product.stock)
        cost_value += stock * unit_cost(product)
        retail_value += stock * to_amount(product.retail_price)
        wholesale_value += stock * to_amount(product.wholesale_price)
    return InventoryValuation(
        cost_value=cost_value,
        retail_value=retail_value,
        wholesale_value=wholesale_value,
    )


def low_stock_products(
    products: Iterable[Product],
    threshold: float = DEFAULT_LOW_STOCK_THRESHOLD,
) -> list[Product]:
    """Products whose stock is strictly below ``threshold``, in input order."""
    return [p for p in products if to_amount(p.stock) < threshold]
