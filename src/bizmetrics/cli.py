# BizMetrics - Financial reporting engine for small-business management suites
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Command-Line Interface (CLI) for BizMetrics.

This module wires together the main building blocks of BizMetrics:

- configuration (currency, data directory, report defaults, display),
- the CSV repository holding the records of each business,
- period filtering,
- the financial engine, series and reports,
- view helpers (tabular rendering and CSV export).

The CLI is intentionally thin: it does not implement any financial logic
itself.

High-level pipeline
-------------------

1) Load ``bizmetrics_config.toml`` (or the file given by ``--config``);
   when no configuration file exists, defaults are used.
2) Open the records repository (``--data-dir`` overrides the configured
   directory) and load the requested businesses (``--business``, all
   businesses by default).
3) Restrict sales and expenses to the reporting period: ``--from/--to``
   (custom range of whole days) or ``--period`` (current day, week,
   month, quarter, year, or all records).
4) Build the requested scope for each business:
   - ``summary``   : revenue, COGS, profits, margins, ROI, inventory value,
   - ``monthly``   : revenue / expenses / profit per month,
   - ``breakdown`` : expenses per category,
   - ``products``  : best sellers, product profits and low stock,
   - ``compare``   : businesses ranked by net profit,
   - ``all``       : everything above.
5) Render as console tables and/or timestamped CSV files.

Example
-------
    bizmetrics --data-dir data/businesses --period month --scope all
"""

import argparse
import logging
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from . import __version__
from .config import (
    DEFAULT_CONFIG_FILE,
    AppConfig,
    default_app_config,
    load_app_config,
)
from .engine import expense_breakdown, low_stock_products
from .models import BusinessRecords
from .periods import (
    PERIOD_KINDS,
    bucket_by_period,
    date_range_period,
    filter_by_date_range,
    period_bounds,
)
from .reports import compare_businesses, summarize_business
from .repository import CsvDirectoryRepository
from .series import (
    ProductProfit,
    best_selling_products,
    monthly_series,
    product_profits,
)
from .views import (
    breakdown_to_dataframe,
    monthly_series_to_dataframe,
    product_sales_to_dataframe,
    rankings_to_dataframe,
    summary_to_dataframe,
)

SCOPES: tuple[str, ...] = (
    "summary",
    "monthly",
    "breakdown",
    "products",
    "compare",
    "all",
)


def _build_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the CLI."""
    ap = argparse.ArgumentParser(
        prog="bizmetrics",
        description=(
            "BizMetrics - Financial reporting for small businesses. "
            "Reads the sales, expenses and products of each business and "
            "renders revenue, costs, profits, margins, ROI and breakdowns."
        ),
    )

    ap.add_argument(
        "--version",
        action="store_true",
        help="Show the installed version of bizmetrics and exit.",
    )
    ap.add_argument(
        "--config",
        dest="config_path",
        help=(
            "Path to the TOML configuration file. "
            f"If omitted, '{DEFAULT_CONFIG_FILE}' in the current directory is "
            "used when it exists, otherwise built-in defaults."
        ),
    )
    ap.add_argument(
        "--data-dir",
        dest="data_dir",
        help="Override the directory holding one sub-directory per business.",
    )
    ap.add_argument(
        "--business",
        dest="businesses",
        action="append",
        metavar="BUSINESS_ID",
        help="Business to report on (repeatable). Defaults to all businesses.",
    )

    # Period selection
    ap.add_argument(
        "--period",
        choices=list(PERIOD_KINDS),
        help=(
            "Reporting period containing today. "
            "If omitted, reports.default_period from the configuration is used."
        ),
    )
    ap.add_argument(
        "--from",
        dest="from_date",
        help="Custom period start date (YYYY-MM-DD). Requires --to.",
    )
    ap.add_argument(
        "--to",
        dest="to_date",
        help="Custom period end date (YYYY-MM-DD). Requires --from.",
    )

    ap.add_argument(
        "--scope",
        choices=list(SCOPES),
        default="summary",
        help="Select what to render (default: summary).",
    )

    # Display options
    ap.add_argument(
        "--display-mode",
        dest="display_mode",
        choices=["table", "csv", "both"],
        help=(
            "Override the display.mode setting from the configuration file. "
            "'table' prints results to stdout, "
            "'csv' writes CSV files only, "
            "'both' does both."
        ),
    )
    ap.add_argument(
        "--output",
        dest="output_dir",
        help="Output directory for CSV files (overrides display.output_dir).",
    )
    ap.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return ap


def _parse_optional_date(value: Optional[str]) -> Optional[date]:
    """
    Parse an optional CLI date argument (YYYY-MM-DD).

    Raises
    ------
    SystemExit
        If the date format is invalid.
    """
    if value is None:
        return None

    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        msg = f"Invalid date format: {value!r}. Expected YYYY-MM-DD."
        raise SystemExit(msg) from exc


def _load_config(config_path: Optional[str]) -> AppConfig:
    if config_path:
        return load_app_config(config_path)
    if Path(DEFAULT_CONFIG_FILE).is_file():
        return load_app_config()
    return default_app_config()


def _restrict_to_range(
    records: BusinessRecords, start: date, end: date
) -> BusinessRecords:
    return replace(
        records,
        sales=tuple(filter_by_date_range(records.sales, start, end)),
        expenses=tuple(filter_by_date_range(records.expenses, start, end)),
    )


def _now() -> datetime:
    """Return the reference time of a run (isolated for easier testing)."""
    return datetime.now()


def _restrict_to_period(
    records: BusinessRecords, period_kind: str, now: datetime
) -> BusinessRecords:
    return replace(
        records,
        sales=tuple(bucket_by_period(records.sales, period_kind, now=now)),
        expenses=tuple(bucket_by_period(records.expenses, period_kind, now=now)),
    )


def _business_tables(
    records: BusinessRecords, scope: str, config: AppConfig
) -> list[tuple[str, str, pd.DataFrame]]:
    """Build (title, file stem, table) triples for one business."""
    tables: list[tuple[str, str, pd.DataFrame]] = []
    label = records.name or records.business_id
    stem = records.business_id

    if scope in {"summary", "all"}:
        summary = summarize_business(records)
        tables.append(
            (
                f"{label} - Financial summary",
                f"{stem}_summary",
                summary_to_dataframe(
                    summary,
                    currency=config.currency,
                    percent_decimals=config.percent_decimals,
                ),
            )
        )

    if scope in {"monthly", "all"}:
        points = monthly_series(records.sales, records.expenses)
        tables.append(
            (
                f"{label} - Monthly series",
                f"{stem}_monthly",
                monthly_series_to_dataframe(points),
            )
        )

    if scope in {"breakdown", "all"}:
        tables.append(
            (
                f"{label} - Expenses by category",
                f"{stem}_expenses_by_category",
                breakdown_to_dataframe(
                    expense_breakdown(records.expenses), config.percent_decimals
                ),
            )
        )

    if scope in {"products", "all"}:
        limit = config.top_products_limit
        tables.append(
            (
                f"{label} - Best-selling products",
                f"{stem}_best_sellers",
                product_sales_to_dataframe(
                    best_selling_products(records.sales, limit=limit)
                ),
            )
        )
        tables.append(
            (
                f"{label} - Product profits",
                f"{stem}_product_profits",
                product_sales_to_dataframe(
                    product_profits(records.sales, records.products, limit=limit),
                    row_type=ProductProfit,
                ),
            )
        )
        low_stock = low_stock_products(records.products, config.low_stock_threshold)
        tables.append(
            (
                f"{label} - Low stock (< {config.low_stock_threshold:g})",
                f"{stem}_low_stock",
                pd.DataFrame(
                    [{"id": p.id, "name": p.name, "stock": p.stock} for p in low_stock],
                    columns=["id", "name", "stock"],
                ),
            )
        )

    return tables


def _render(
    tables: list[tuple[str, str, pd.DataFrame]],
    display_mode: str,
    output_dir: Path,
) -> None:
    if display_mode in {"table", "both"}:
        for title, _, df in tables:
            print()
            print(f"=== {title} ===")
            if df.empty:
                print("(no data)")
            else:
                print(df.to_string(index=False))

    if display_mode in {"csv", "both"}:
        output_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
        for _, stem, df in tables:
            path = output_dir / f"{stem}_{timestamp}.csv"
            df.to_csv(path, index=False)
            print(f"Wrote {path} ({len(df)} rows)")


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the BizMetrics CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"bizmetrics version {__version__}")
        return

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # 1) Configuration
    try:
        config = _load_config(args.config_path)
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))

    data_dir = Path(args.data_dir).resolve() if args.data_dir else config.data_dir

    # 2) Reporting period
    start = _parse_optional_date(args.from_date)
    end = _parse_optional_date(args.to_date)
    if (start is None) != (end is None):
        parser.error("--from and --to must be provided together.")
    period_kind = args.period or config.default_period
    # One reference time for the label and every filter of the run.
    now = _now()

    if start is not None and end is not None:
        try:
            period = date_range_period(start, end)
        except ValueError as exc:
            parser.error(str(exc))
        period_label = period.label
    else:
        bounds = period_bounds(period_kind, now)
        period_label = bounds.label if bounds is not None else "All records"

    # 3) Records
    repository = CsvDirectoryRepository(data_dir)
    business_ids = args.businesses or repository.list_businesses()
    if not business_ids:
        print(f"Warning: no business found in {data_dir}.")
        return

    businesses: list[BusinessRecords] = []
    for business_id in business_ids:
        try:
            records = repository.load(business_id)
        except KeyError as exc:
            parser.error(str(exc.args[0]))
        except ValueError as exc:
            parser.error(f"Cannot read records of {business_id!r}: {exc}")

        if start is not None and end is not None:
            records = _restrict_to_range(records, start, end)
        else:
            records = _restrict_to_period(records, period_kind, now)
        businesses.append(records)

    print(f"Applied period: {period_label}")
    print(f"Businesses: {', '.join(b.business_id for b in businesses)}")

    # 4) Tables
    tables: list[tuple[str, str, pd.DataFrame]] = []
    for records in businesses:
        tables.extend(_business_tables(records, args.scope, config))

    if args.scope in {"compare", "all"}:
        # Records are already restricted to the period.
        rankings = compare_businesses(businesses)
        tables.append(
            (
                "Businesses ranked by net profit",
                "comparison",
                rankings_to_dataframe(rankings),
            )
        )

    # 5) Rendering
    display_mode = args.display_mode or config.display_mode
    output_dir = Path(args.output_dir) if args.output_dir else config.output_dir
    _render(tables, display_mode, output_dir)


if __name__ == "__main__":
    main()
