# BizMetrics - Financial reporting engine for small-business management suites
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Repositories providing the records of each business.

Report callers never reach into a global store: they receive a
``RecordsRepository`` and ask it for the records of one business at a
time. Two implementations are provided:

- ``InMemoryRepository``   : records held by the repository instance itself
                             (tests, embedding in another application),
- ``CsvDirectoryRepository``: one directory per business under a root
                             directory, each holding ``sales.csv``,
                             ``expenses.csv`` and ``products.csv``.

Access control (which user may read which business) is the caller's
responsibility.
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from .io import read_expenses, read_products, read_sales
from .models import BusinessRecords

logger = logging.getLogger("bizmetrics.repository")

SALES_FILE = "sales.csv"
EXPENSES_FILE = "expenses.csv"
PRODUCTS_FILE = "products.csv"


class RecordsRepository(Protocol):
    """Source of business records."""

    def list_businesses(self) -> list[str]:
        """Return the ids of the available businesses, sorted."""
        ...

    def load(self, business_id: str) -> BusinessRecords:
        """Return the records of one business; KeyError if it is unknown."""
        ...


class InMemoryRepository:
    """Repository over records already held in memory."""

    def __init__(self, businesses: Iterable[BusinessRecords] = ()) -> None:
        self._businesses: dict[str, BusinessRecords] = {}
        for records in businesses:
            self.add(records)

    def add(self, records: BusinessRecords) -> None:
        """Register (or replace) the records of a business."""
        self._businesses[records.business_id] = records

    def list_businesses(self) -> list[str]:
        return sorted(self._businesses)

    def load(self, business_id: str) -> BusinessRecords:
        try:
            return self._businesses[business_id]
        except KeyError:
            raise KeyError(f"Unknown business: {business_id!r}") from None


class CsvDirectoryRepository:
    """
    Repository reading ``<root>/<business_id>/{sales,expenses,products}.csv``.

    A missing CSV file yields an empty container for that record type;
    a missing business directory is an unknown business. The optional
    ``name.txt`` file of a business directory holds its display name.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def list_businesses(self) -> list[str]:
        if not self.root.is_dir():
            logger.warning("Data directory not found: %s", self.root)
            return []
        return sorted(p.name for p in self.root.iterdir() if p.is_dir())

    def load(self, business_id: str) -> BusinessRecords:
        directory = self.root / business_id
        if not directory.is_dir():
            raise KeyError(f"Unknown business: {business_id!r} (no {directory})")

        sales_path = directory / SALES_FILE
        expenses_path = directory / EXPENSES_FILE
        products_path = directory / PRODUCTS_FILE
        name_path = directory / "name.txt"

        sales = read_sales(sales_path) if sales_path.is_file() else ()
        expenses = read_expenses(expenses_path) if expenses_path.is_file() else ()
        products = read_products(products_path) if products_path.is_file() else ()
        name = (
            name_path.read_text(encoding="utf-8").strip()
            if name_path.is_file()
            else business_id
        )

        logger.info(
            "Loaded business %s: %d sale(s), %d expense(s), %d product(s)",
            business_id,
            len(sales),
            len(expenses),
            len(products),
        )
        return BusinessRecords(
            business_id=business_id,
            name=name,
            sales=sales,
            expenses=expenses,
            products=products,
        )
