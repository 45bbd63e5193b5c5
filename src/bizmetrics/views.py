# BizMetrics - Financial reporting engine for small-business management suites
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
View utilities for BizMetrics.

The engine returns raw numbers; this module turns them into display-ready
values and pandas DataFrames for console tables and CSV exports:

- ``format_currency`` / ``format_percentage`` : string formatting,
- ``summary_to_dataframe``                   : one row per summary measure,
- ``monthly_series_to_dataframe``            : one row per month,
- ``breakdown_to_dataframe``                 : one row per expense category,
- ``rankings_to_dataframe``                  : one row per business,
- ``product_sales_to_dataframe``             : one row per product.

Every builder returns a DataFrame with a stable column order, including
when its input is empty.
"""

from collections.abc import Mapping, Sequence
from dataclasses import asdict, fields
from typing import Union

import pandas as pd

from .models import to_amount
from .reports import SUMMARY_MEASURES, BusinessRanking, FinancialSummary
from .series import MonthlyPoint, ProductProfit, ProductSales


def format_currency(amount: float, currency: str = "FCFA", decimals: int = 0) -> str:
    """
    Format an amount with space-grouped thousands and a currency suffix.

    Example: 1234567.0 -> '1 234 567 FCFA'.
    """
    value = round(to_amount(amount), decimals)
    if value == 0:
        value = 0.0  # avoid '-0'
    text = f"{value:,.{decimals}f}".replace(",", " ")
    return f"{text} {currency}".strip()


def format_percentage(value: float, decimals: int = 2) -> str:
    """Format a percentage, e.g. 12.3456 -> '12.35%'."""
    return f"{to_amount(value):.{decimals}f}%"


def summary_to_dataframe(
    summary: FinancialSummary,
    currency: str = "FCFA",
    percent_decimals: int = 2,
) -> pd.DataFrame:
    """
    Convert a FinancialSummary into a DataFrame.

    Columns: key, label, value, unit, formatted. ``value`` is the raw
    number; ``formatted`` is the display string (currency or percent).
    """
    rows: list[dict[str, object]] = []
    for meta in SUMMARY_MEASURES:
        value = float(getattr(summary, meta.key))
        if meta.unit == "percent":
            formatted = format_percentage(value, percent_decimals)
        else:
            formatted = format_currency(value, currency)
        rows.append(
            {
                "key": meta.key,
                "label": meta.label,
                "value": value,
                "unit": meta.unit,
                "formatted": formatted,
            }
        )
    return pd.DataFrame(rows, columns=["key", "label", "value", "unit", "formatted"])


def monthly_series_to_dataframe(points: Sequence[MonthlyPoint]) -> pd.DataFrame:
    """One row per month: period, revenue, expenses, profit (chronological)."""
    columns = ["period", "revenue", "expenses", "profit"]
    if not points:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame([asdict(p) for p in points])[columns]


def breakdown_to_dataframe(
    breakdown: Mapping[str, float], percent_decimals: int = 2
) -> pd.DataFrame:
    """
    One row per expense category, sorted by amount (descending).

    Columns: category, amount, share (percentage of the total, rounded).
    """
    columns = ["category", "amount", "share"]
    if not breakdown:
        return pd.DataFrame(columns=columns)

    total = sum(breakdown.values())
    df = pd.DataFrame(
        {"category": list(breakdown.keys()), "amount": list(breakdown.values())}
    )
    if total:
        df["share"] = (df["amount"] / total * 100).round(percent_decimals)
    else:
        df["share"] = 0.0
    df = df.sort_values(["amount", "category"], ascending=[False, True], kind="stable")
    return df.reset_index(drop=True)[columns]


def rankings_to_dataframe(rankings: Sequence[BusinessRanking]) -> pd.DataFrame:
    """One row per business: business_id, name, revenue, net_profit."""
    columns = ["business_id", "name", "revenue", "net_profit"]
    if not rankings:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame([asdict(r) for r in rankings])[columns]


def product_sales_to_dataframe(
    rows: Union[Sequence[ProductSales], Sequence[ProductProfit]],
    row_type: Union[type[ProductSales], type[ProductProfit]] = ProductSales,
) -> pd.DataFrame:
    """
    One row per product, keeping the ranking order of ``rows``.

    Columns follow the fields of the row dataclass; ``row_type`` gives
    them when ``rows`` is empty, so that an empty ranking still exports
    the right headers.
    """
    if not rows:
        return pd.DataFrame(columns=[f.name for f in fields(row_type)])
    columns = [f.name for f in fields(rows[0])]
    return pd.DataFrame([asdict(r) for r in rows])[columns]
