"""
Helper Functions

This module contains utility functions used throughout the plugin.
"""

import re
from datetime import datetime
from typing import Any, Optional

from dateutil import parser as dtparser

from models.errors import UnparsableTimestamp

# Wed May 01 11:59:00.123 2024
TIMESTAMP_TEXT_RE = re.compile(
    r"^[A-Z][a-z]{2} [A-Z][a-z]{2} +\d{1,2} \d{2}:\d{2}:\d{2}(?:\.\d+)? \d{4}$"
)


def parse_ts(x: str) -> datetime:
    """
    Parse a Sphinx log timestamp, e.g. "Wed May 01 11:59:00.123 2024".
    Sphinx writes naive local time, so the result is naive as well.
    Text of any other shape is rejected rather than completed from today.
    """
    text = x.strip()
    if not TIMESTAMP_TEXT_RE.match(text):
        raise UnparsableTimestamp(x)
    try:
        dt = dtparser.parse(text)
    except (ValueError, OverflowError) as exc:
        raise UnparsableTimestamp(x) from exc
    return dt.replace(tzinfo=None)


def safe_int(x: Any) -> Optional[int]:
    """Safely convert to int"""
    try:
        return int(x) if x is not None else None
    except (TypeError, ValueError):
        return None


def format_fixed(value: float, count: int, precision: int) -> str:
    """Fixed-precision text, or a bare "0" when nothing was counted"""
    if not count:
        return "0"
    return f"{value:.{precision}f}"
