# BizMetrics - Financial reporting engine for small-business management suites
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
I/O module for BizMetrics.

This module reads the records of a business from CSV files and normalizes
them into the typed records consumed by the engine (see models.py). It is
the data-access boundary: values are validated here, once.

Expected input formats
----------------------

Column names are case-insensitive and trimmed. The camelCase names used
by the surrounding application (``productId``, ``costPrice``, ...) are
accepted as aliases of the snake_case ones.

1) Sales      : date, total, quantity [, id, product_id, product_name, business_id]
2) Expenses   : date, amount, category [, id, description, kind, business_id]
3) Products   : id, stock [, name, category, cost_price, wholesale_price,
                retail_price, min_stock, business_id]

Normalization rules
-------------------
- empty numeric cells become 0,
- non-numeric values in numeric columns become 0 and are reported as a
  warning,
- unparseable dates become missing (the record is then ignored by period
  filters) and are reported as a warning.

If a file lacks one of the required columns, a clear ValueError is raised.
"""

import logging
import os
from collections.abc import Iterable
from typing import Union

import pandas as pd

from .models import Expense, Product, Sale, to_timestamp

logger = logging.getLogger("bizmetrics.io")

PathLike = Union[str, "os.PathLike[str]"]

_ALIASES = {
    "productid": "product_id",
    "productname": "product_name",
    "businessid": "business_id",
    "costprice": "cost_price",
    "wholesaleprice": "wholesale_price",
    "retailprice": "retail_price",
    "minstock": "min_stock",
}

SALES_REQUIRED = ("date", "total", "quantity")
EXPENSES_REQUIRED = ("date", "amount", "category")
PRODUCTS_REQUIRED = ("id", "stock")

SALES_NUMERIC = ("total", "quantity")
EXPENSES_NUMERIC = ("amount",)
PRODUCTS_NUMERIC = (
    "stock",
    "cost_price",
    "wholesale_price",
    "retail_price",
    "min_stock",
)


def _read_csv(path: PathLike, required: Iterable[str], kind: str) -> pd.DataFrame:
    """Read a CSV as strings, normalize column names and check required ones."""
    df = pd.read_csv(path, dtype=str)

    columns = [str(c).strip().lower() for c in df.columns]
    df.columns = [_ALIASES.get(c, c) for c in columns]

    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(
            f"Invalid {kind} file {path}: missing column(s) {', '.join(missing)}. "
            f"Expected at least: {', '.join(required)} "
            "(column names are case-insensitive)."
        )
    return df


def _coerce_numeric(df: pd.DataFrame, columns: Iterable[str], path: PathLike) -> None:
    for col in columns:
        if col not in df.columns:
            continue
        raw = df[col]
        values = pd.to_numeric(raw.str.strip(), errors="coerce")
        invalid = values.isna() & raw.notna() & (raw.str.strip() != "")
        if invalid.any():
            logger.warning(
                "%s: %d non-numeric value(s) in column '%s' treated as 0",
                path,
                int(invalid.sum()),
                col,
            )
        df[col] = values.fillna(0.0)


def _coerce_dates(df: pd.DataFrame, path: PathLike) -> None:
    raw = df["date"]
    parsed = raw.map(to_timestamp)
    invalid = parsed.isna() & raw.notna()
    if invalid.any():
        logger.warning(
            "%s: %d unparseable date(s), records kept without a date",
            path,
            int(invalid.sum()),
        )
    df["date"] = parsed


def _records(df: pd.DataFrame) -> list[dict]:
    # NaN -> None so that optional fields stay unset.
    return df.astype(object).where(df.notna(), None).to_dict("records")


def read_sales(path: PathLike) -> tuple[Sale, ...]:
    """
    Read sales from a CSV file.

    Raises
    ------
    ValueError
        If the file does not contain the columns: date, total, quantity.
    """
    df = _read_csv(path, SALES_REQUIRED, "sales")
    _coerce_numeric(df, SALES_NUMERIC, path)
    _coerce_dates(df, path)
    sales = tuple(Sale.from_mapping(row) for row in _records(df))
    logger.debug("%s: %d sale(s) read", path, len(sales))
    return sales


def read_expenses(path: PathLike) -> tuple[Expense, ...]:
    """
    Read expenses from a CSV file.

    Raises
    ------
    ValueError
        If the file does not contain the columns: date, amount, category,
        or if a ``kind`` value is neither CAPITAL nor OPERATING.
    """
    df = _read_csv(path, EXPENSES_REQUIRED, "expenses")
    _coerce_numeric(df, EXPENSES_NUMERIC, path)
    _coerce_dates(df, path)
    expenses = tuple(Expense.from_mapping(row) for row in _records(df))
    logger.debug("%s: %d expense(s) read", path, len(expenses))
    return expenses


def read_products(path: PathLike) -> tuple[Product, ...]:
    """
    Read products from a CSV file.

    Raises
    ------
    ValueError
        If the file does not contain the columns: id, stock.
    """
    df = _read_csv(path, PRODUCTS_REQUIRED, "products")
    _coerce_numeric(df, PRODUCTS_NUMERIC, path)
    products = tuple(Product.from_mapping(row) for row in _records(df))
    logger.debug("%s: %d product(s) read", path, len(products))
    return products
