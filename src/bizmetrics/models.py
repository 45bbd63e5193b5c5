# BizMetrics - Financial reporting engine for small-business management suites
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Record types consumed by the BizMetrics engine.

Three read-only entity shapes feed every computation:

- ``Sale``    : revenue recognized for a number of units of a product,
- ``Expense`` : money spent, classified by a free-text category,
- ``Product`` : stock on hand and its price references.

All of them are frozen dataclasses. They are built once at the data-access
boundary (CSV reader, repository, web layer) through ``from_mapping()``,
which is the only place where raw values are coerced:

- missing / null / NaN numeric fields become 0.0,
- timestamps are parsed with pandas (ISO strings, ``datetime``, ``date``,
  ``pd.Timestamp``); unparseable values become ``None``,
- blank identifiers become ``None``.

camelCase keys coming from the surrounding application (``productId``,
``costPrice``, ...) are accepted as aliases of the snake_case fields.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

import pandas as pd


class ExpenseKind(str, Enum):
    """Explicit classification of an expense."""

    CAPITAL = "CAPITAL"
    OPERATING = "OPERATING"


def to_amount(value: Any) -> float:
    """Convert a raw numeric value to float, treating missing values as 0.0."""
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if pd.isna(number):
        return 0.0
    return number


def to_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a raw timestamp into a naive local ``datetime``.

    Timezone-aware values are converted to the local timezone before the
    tzinfo is dropped, so that later calendar comparisons happen on local
    dates. Returns None when the value is missing or cannot be parsed.
    """
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass

    if isinstance(value, pd.Timestamp):
        ts = value.to_pydatetime()
    elif isinstance(value, datetime):
        ts = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = pd.Timestamp(value)
        except (TypeError, ValueError):
            return None
        if pd.isna(parsed):
            return None
        ts = parsed.to_pydatetime()

    if ts.tzinfo is not None:
        ts = ts.astimezone().replace(tzinfo=None)
    return ts


def _to_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    text = str(value).strip()
    return text or None


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the first present value among ``keys`` (aliases)."""
    for key in keys:
        if key in data:
            return data[key]
    return None


@dataclass(frozen=True)
class Sale:
    """A recorded sale."""

    total: float = 0.0
    quantity: float = 0.0
    product_id: Optional[str] = None
    date: Optional[datetime] = None
    id: Optional[str] = None
    product_name: Optional[str] = None
    business_id: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Sale":
        return cls(
            total=to_amount(_pick(data, "total")),
            quantity=to_amount(_pick(data, "quantity")),
            product_id=_to_optional_str(_pick(data, "product_id", "productId")),
            date=to_timestamp(_pick(data, "date")),
            id=_to_optional_str(_pick(data, "id")),
            product_name=_to_optional_str(
                _pick(data, "product_name", "productName")
            ),
            business_id=_to_optional_str(_pick(data, "business_id", "businessId")),
        )


@dataclass(frozen=True)
class Expense:
    """
    A recorded expense.

    ``kind`` is optional: when it is set, it is authoritative for the
    capital / operating split; otherwise the engine infers the kind from
    the free-text ``category``.
    """

    amount: float = 0.0
    category: str = ""
    date: Optional[datetime] = None
    id: Optional[str] = None
    description: str = ""
    business_id: Optional[str] = None
    kind: Optional[ExpenseKind] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Expense":
        raw_kind = _to_optional_str(_pick(data, "kind"))
        kind: Optional[ExpenseKind]
        if raw_kind is None:
            kind = None
        else:
            try:
                kind = ExpenseKind(raw_kind.upper())
            except ValueError as exc:
                raise ValueError(
                    f"Invalid expense kind {raw_kind!r}, expected one of: "
                    f"{', '.join(k.value for k in ExpenseKind)}."
                ) from exc

        return cls(
            amount=to_amount(_pick(data, "amount")),
            category=_to_optional_str(_pick(data, "category")) or "",
            date=to_timestamp(_pick(data, "date")),
            id=_to_optional_str(_pick(data, "id")),
            description=_to_optional_str(_pick(data, "description")) or "",
            business_id=_to_optional_str(_pick(data, "business_id", "businessId")),
            kind=kind,
        )


@dataclass(frozen=True)
class Product:
    """A product with its stock level and price references."""

    id: Optional[str] = None
    stock: float = 0.0
    cost_price: float = 0.0
    wholesale_price: float = 0.0
    retail_price: float = 0.0
    name: str = ""
    category: str = ""
    min_stock: float = 0.0
    business_id: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Product":
        return cls(
            id=_to_optional_str(_pick(data, "id")),
            stock=to_amount(_pick(data, "stock")),
            cost_price=to_amount(_pick(data, "cost_price", "costPrice")),
            wholesale_price=to_amount(
                _pick(data, "wholesale_price", "wholesalePrice")
            ),
            retail_price=to_amount(_pick(data, "retail_price", "retailPrice")),
            name=_to_optional_str(_pick(data, "name")) or "",
            category=_to_optional_str(_pick(data, "category")) or "",
            min_stock=to_amount(_pick(data, "min_stock", "minStock")),
            business_id=_to_optional_str(_pick(data, "business_id", "businessId")),
        )


@dataclass(frozen=True)
class BusinessRecords:
    """The three record containers of one business, as loaded by a repository."""

    business_id: str
    name: str = ""
    sales: tuple[Sale, ...] = ()
    expenses: tuple[Expense, ...] = ()
    products: tuple[Product, ...] = ()
