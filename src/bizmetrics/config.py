# BizMetrics - Financial reporting engine for small-business management suites
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Configuration helpers for BizMetrics.

This module is responsible for:
- loading the application configuration from a TOML file,
- validating it and exposing a typed dataclass used by the CLI.

Expected layout of ``bizmetrics_config.toml``::

    [business]
    currency = "FCFA"

    [data]
    dir = "data/businesses"

    [reports]
    default_period = "month"
    low_stock_threshold = 10
    top_products_limit = 10

    [display]
    mode = "table"
    percent_decimals = 2
    output_dir = "data/output"

Every section is optional; missing values fall back to the defaults above.
Relative paths are resolved against the directory of the TOML file.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib  # type: ignore[import]

from .periods import PERIOD_KINDS

DEFAULT_CONFIG_FILE = "bizmetrics_config.toml"

DISPLAY_MODES: tuple[str, ...] = ("table", "csv", "both")


@dataclass(frozen=True)
class AppConfig:
    """
    Application-wide configuration for BizMetrics.

    This aggregates:
    - the presentation currency,
    - where business records are read from,
    - report defaults (period, low-stock threshold, ranking size),
    - display options for tables and CSV exports.
    """

    currency: str
    data_dir: Path
    default_period: str
    low_stock_threshold: float
    top_products_limit: int
    display_mode: str
    percent_decimals: int
    output_dir: Path


def _load_toml(path: Path) -> dict[str, Any]:
    """
    Load a TOML file and return its content as a dictionary.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if the TOML content cannot be parsed or is not a table.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Failed to parse TOML config file: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Invalid TOML root type in {path}, expected a table.")

    return data


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = raw.get(name) or {}
    if not isinstance(section, Mapping):
        raise ValueError(f"Config section [{name}] must be a table.")
    return section


def _as_int(value: Any, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"Invalid value for '{key}' in the configuration. Expected an integer."
        ) from exc


def _as_float(value: Any, key: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"Invalid value for '{key}' in the configuration. Expected a number."
        ) from exc


def load_app_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load the BizMetrics configuration from a TOML file.

    Parameters
    ----------
    config_path :
        Path to the TOML configuration file. Defaults to
        ``bizmetrics_config.toml`` in the current working directory.

    Returns
    -------
    AppConfig
        Parsed and validated application configuration.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist.
    ValueError
        If the file cannot be parsed or holds invalid values.
    """
    if config_path is None:
        config_file = Path(DEFAULT_CONFIG_FILE).resolve()
    else:
        config_file = Path(config_path).resolve()

    raw = _load_toml(config_file)
    base_dir = config_file.parent

    business_section = _section(raw, "business")
    data_section = _section(raw, "data")
    reports_section = _section(raw, "reports")
    display_section = _section(raw, "display")

    currency = str(business_section.get("currency") or "FCFA")

    data_dir = (base_dir / str(data_section.get("dir") or "data/businesses")).resolve()

    default_period = str(reports_section.get("default_period", "month"))
    if default_period not in PERIOD_KINDS:
        raise ValueError(
            f"Invalid value for 'reports.default_period': {default_period!r}. "
            f"Expected one of: {', '.join(PERIOD_KINDS)}."
        )

    low_stock_threshold = _as_float(
        reports_section.get("low_stock_threshold", 10), "reports.low_stock_threshold"
    )
    top_products_limit = _as_int(
        reports_section.get("top_products_limit", 10), "reports.top_products_limit"
    )
    if top_products_limit <= 0:
        raise ValueError("'reports.top_products_limit' must be a positive integer.")

    display_mode = str(display_section.get("mode", "table"))
    if display_mode not in DISPLAY_MODES:
        raise ValueError(
            f"Invalid value for 'display.mode': {display_mode!r}. "
            f"Expected one of: {', '.join(DISPLAY_MODES)}."
        )

    percent_decimals = _as_int(
        display_section.get("percent_decimals", 2), "display.percent_decimals"
    )
    output_dir = (
        base_dir / str(display_section.get("output_dir") or "data/output")
    ).resolve()

    return AppConfig(
        currency=currency,
        data_dir=data_dir,
        default_period=default_period,
        low_stock_threshold=low_stock_threshold,
        top_products_limit=top_products_limit,
        display_mode=display_mode,
        percent_decimals=percent_decimals,
        output_dir=output_dir,
    )


def default_app_config(base_dir: Optional[Path] = None) -> AppConfig:
    """Configuration used when no TOML file is available."""
    root = (base_dir or Path.cwd()).resolve()
    return AppConfig(
        currency="FCFA",
        data_dir=root / "data" / "businesses",
        default_period="month",
        low_stock_threshold=10.0,
        top_products_limit=10,
        display_mode="table",
        percent_decimals=2,
        output_dir=root / "data" / "output",
    )
