from datetime import datetime

import bizmetrics.views as views
from bizmetrics.models import Expense, Product, Sale
from bizmetrics.reports import (
    SUMMARY_MEASURES,
    BusinessRanking,
    build_financial_summary,
)
from bizmetrics.series import (
    ProductProfit,
    ProductSales,
    monthly_series,
    product_profits,
)


def test_format_currency() -> None:
    assert views.format_currency(1234567) == "1 234 567 FCFA"
    assert views.format_currency(1234.5, "XOF", decimals=2) == "1 234.50 XOF"
    assert views.format_currency(-2500) == "-2 500 FCFA"
    assert views.format_currency(-0.4) == "0 FCFA"
    assert views.format_currency(None) == "0 FCFA"


def test_format_percentage() -> None:
    assert views.format_percentage(12.3456) == "12.35%"
    assert views.format_percentage(-100) == "-100.00%"
    assert views.format_percentage(7.26, decimals=1) == "7.3%"


def test_summary_to_dataframe_formats_by_unit() -> None:
    summary = build_financial_summary(
        [Sale(total=2500.0, quantity=5, product_id="p1")],
        [Expense(amount=50.0, category="Loyer")],
        [Product(id="p1", wholesale_price=450.0)],
    )

    df = views.summary_to_dataframe(summary, currency="FCFA")

    assert list(df.columns) == ["key", "label", "value", "unit", "formatted"]
    assert list(df["key"]) == [m.key for m in SUMMARY_MEASURES]
    rows = df.set_index("key")
    assert rows.loc["gross_profit", "formatted"] == "250 FCFA"
    assert rows.loc["net_profit", "value"] == 200.0
    assert rows.loc["net_profit_margin", "formatted"] == "8.00%"


def test_monthly_series_to_dataframe() -> None:
    points = monthly_series(
        [Sale(total=10.0, date=datetime(2025, 1, 3))],
        [Expense(amount=4.0, date=datetime(2025, 2, 3))],
    )

    df = views.monthly_series_to_dataframe(points)

    assert list(df.columns) == ["period", "revenue", "expenses", "profit"]
    assert list(df["period"]) == ["2025-01", "2025-02"]
    assert list(df["profit"]) == [10.0, -4.0]
    assert views.monthly_series_to_dataframe([]).empty


def test_breakdown_to_dataframe_sorted_with_shares() -> None:
    df = views.breakdown_to_dataframe(
        {"Salaire": 75000.0, "Loyer": 200000.0, "Other": 75000.0}
    )

    assert list(df["category"]) == ["Loyer", "Other", "Salaire"]
    assert list(df["share"]) == [57.14, 21.43, 21.43]
    assert list(views.breakdown_to_dataframe({}).columns) == [
        "category",
        "amount",
        "share",
    ]


def test_breakdown_to_dataframe_zero_total() -> None:
    df = views.breakdown_to_dataframe({"Loyer": 0.0})

    assert list(df["share"]) == [0.0]


def test_rankings_and_product_tables() -> None:
    rankings = [BusinessRanking("shop", "Corner Shop", 1000.0, 200.0)]
    df = views.rankings_to_dataframe(rankings)
    assert list(df.columns) == ["business_id", "name", "revenue", "net_profit"]
    assert df.loc[0, "name"] == "Corner Shop"

    profits = product_profits(
        [Sale(total=100.0, quantity=5, product_id="p1")],
        [Product(id="p1", name="Rice", cost_price=10.0)],
    )
    df = views.product_sales_to_dataframe(profits)
    assert df.loc[0, "product_name"] == "Rice"
    assert df.loc[0, "profit"] == 50.0

    assert views.product_sales_to_dataframe([]).empty


def test_empty_product_tables_keep_their_headers() -> None:
    profits = views.product_sales_to_dataframe([], row_type=ProductProfit)
    sellers = views.product_sales_to_dataframe([])

    assert list(profits.columns) == [
        "product_id",
        "product_name",
        "quantity",
        "revenue",
        "cost",
        "profit",
    ]
    assert list(sellers.columns) == [
        "product_id",
        "product_name",
        "quantity",
        "revenue",
    ]
    assert profits.empty


def test_product_table_columns_follow_row_dataclass() -> None:
    rows = [ProductSales("p1", "Rice", 2.0, 20.0)]

    df = views.product_sales_to_dataframe(rows, row_type=ProductProfit)

    assert list(df.columns) == ["product_id", "product_name", "quantity", "revenue"]
