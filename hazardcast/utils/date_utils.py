"""
Date Utilities
==============
Date parsing for CLI arguments and record columns, and day-of-year extraction.
"""

import argparse
from datetime import datetime, date
from typing import Optional, Union

import pandas as pd

MAX_DAY_OF_YEAR = 366


def parse_date_arg(date_str: Optional[str]) -> Optional[datetime]:
    """
    Parse command-line date argument supporting YYYYMMDD or YYYY-MM-DD formats.

    Args:
        date_str: Date string or None

    Returns:
        datetime object or None

    Raises:
        argparse.ArgumentTypeError: If date format is invalid
    """
    if date_str is None:
        return None
    date_str = date_str.replace('-', '')
    try:
        return datetime.strptime(date_str, "%Y%m%d")
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid date format: {date_str}, use YYYYMMDD or YYYY-MM-DD"
        )


def to_date(value: Union[str, date, datetime, pd.Timestamp]) -> date:
    """
    Coerce a date-like value to a calendar date.

    Strings go through pandas so record columns ("2025-07-19",
    "2025/07/19", "07/19/2025") and CLI arguments parse the same way.

    Raises:
        ValueError: If the string cannot be parsed
    """
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    ts = pd.Timestamp(str(value).strip())
    if ts is pd.NaT:
        raise ValueError(f"Unparseable date: {value!r}")
    return ts.date()


def day_of_year(d: Union[str, date, datetime, pd.Timestamp]) -> int:
    """1-indexed day-of-year (Jan 1 -> 1), clamped into [1, 366]."""
    d = to_date(d)
    doy = (d - date(d.year, 1, 1)).days + 1
    return max(1, min(doy, MAX_DAY_OF_YEAR))
