from datetime import date, datetime

import pandas as pd
import pytest

from bizmetrics.models import (
    Expense,
    ExpenseKind,
    Product,
    Sale,
    to_amount,
    to_timestamp,
)


@pytest.mark.parametrize(
    "raw,expected",
    [(None, 0.0), (float("nan"), 0.0), ("12.5", 12.5), ("abc", 0.0), (3, 3.0)],
)
def test_to_amount(raw, expected) -> None:
    assert to_amount(raw) == expected


def test_to_timestamp_accepts_common_inputs() -> None:
    assert to_timestamp("2025-03-10 08:15:00") == datetime(2025, 3, 10, 8, 15)
    assert to_timestamp(date(2025, 3, 10)) == datetime(2025, 3, 10)
    assert to_timestamp(pd.Timestamp("2025-03-10")) == datetime(2025, 3, 10)
    assert to_timestamp(None) is None
    assert to_timestamp(pd.NaT) is None
    assert to_timestamp("not a date") is None


def test_to_timestamp_drops_timezone() -> None:
    moment = to_timestamp("2025-03-10T08:15:00+00:00")

    assert moment is not None
    assert moment.tzinfo is None


def test_sale_from_mapping_accepts_camel_case() -> None:
    sale = Sale.from_mapping(
        {
            "id": "s1",
            "total": "2500",
            "quantity": 5,
            "productId": "p1",
            "productName": "Rice",
            "businessId": "b1",
            "date": "2025-01-05",
        }
    )

    assert sale == Sale(
        total=2500.0,
        quantity=5.0,
        product_id="p1",
        date=datetime(2025, 1, 5),
        id="s1",
        product_name="Rice",
        business_id="b1",
    )


def test_expense_from_mapping_parses_kind() -> None:
    expense = Expense.from_mapping(
        {"amount": 10, "category": "Loyer", "kind": "capital"}
    )

    assert expense.kind is ExpenseKind.CAPITAL
    assert Expense.from_mapping({"amount": 10, "kind": ""}).kind is None


def test_expense_from_mapping_rejects_unknown_kind() -> None:
    with pytest.raises(ValueError, match="Invalid expense kind"):
        Expense.from_mapping({"amount": 10, "kind": "sometimes"})


def test_product_from_mapping_defaults_missing_prices() -> None:
    product = Product.from_mapping({"id": " p1 ", "stock": None, "retailPrice": 12})

    assert product.id == "p1"
    assert product.stock == 0.0
    assert product.cost_price == 0.0
    assert product.retail_price == 12.0
