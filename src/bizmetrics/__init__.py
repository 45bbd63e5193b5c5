# BizMetrics - Financial reporting engine for small-business management suites
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
BizMetrics
----------

A Python financial reporting engine for small-business management suites
(shops, restaurants, pharmacies, services). It turns the sales, expenses
and products of a business into business-meaningful metrics.

Main capabilities:
- revenue, cost of goods sold (cost price with wholesale fallback),
- gross / operating / net profit, EBITDA, margins and ROI,
- capital vs. operating expense classification,
- inventory valuation and low-stock detection,
- period filtering (day, week, month, quarter, year, custom range),
- monthly series, sales trends and product rankings,
- multi-business comparison and consolidation,
- CSV-backed repositories and a command-line interface.

BizMetrics separates computation (engine, series, reports), data access
(io, repository), configuration (TOML) and presentation (views, CLI).
The computation modules are pure and hold no state.

Version: 0.1.0

Usage:
    bizmetrics --help
"""

__all__ = ["engine", "models", "periods", "reports", "series", "views"]

__version__ = "0.1.0"
