"""
Date handling for incoming stock history payloads.

Records carry their trading day as epoch milliseconds in ``date``. Older
clients sent a ``data`` field instead, either as a ``DD/MM/YYYY`` string or as
an epoch number; both shapes are still accepted.
"""

from __future__ import annotations

import math
import re
import time
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

from stocks_api.models.stocks_history import VALUE_FIELDS

LEGACY_DATE_RE = re.compile(r"^\s*(\d{1,2})/(\d{1,2})/(\d{4})\s*$")


def now_millis() -> int:
    return int(time.time() * 1000)


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def parse_legacy_date(value: str) -> Optional[int]:
    """
    Parse ``DD/MM/YYYY`` into epoch millis at local midnight.

    Out-of-range parts roll over like a calendar: ``31/02/2021`` is
    2021-03-03, day 0 is the last day of the previous month and month 13 is
    January of the next year. Years 0-99 map to 1900-1999. Returns None when
    the string does not match or the year is unrepresentable.
    """
    m = LEGACY_DATE_RE.match(value)
    if not m:
        return None
    day, month, year = (int(g) for g in m.groups())
    if year < 100:
        year += 1900
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    try:
        midnight = datetime(year, month, 1) + timedelta(days=day - 1)
        return int(midnight.timestamp() * 1000)
    except (ValueError, OverflowError, OSError):
        return None


def normalize_timestamp(
    raw_date: Any,
    raw_legacy_date: Any,
    now: Optional[Callable[[], int]] = None,
) -> int:
    """
    Resolve a record's epoch-millisecond date.

    Precedence: a numeric ``date``, then the legacy ``data`` field, then the
    current time. Values that cannot be interpreted fall through to the next
    step, so an unparseable ``data`` string ends up as "now".
    """
    if raw_date:
        number = _as_number(raw_date)
        if number is not None and math.isfinite(number):
            return int(number)

    if raw_legacy_date:
        if isinstance(raw_legacy_date, str):
            parsed = parse_legacy_date(raw_legacy_date)
            if parsed is not None:
                return parsed
        else:
            number = _as_number(raw_legacy_date)
            if number is not None and math.isfinite(number):
                return int(number)

    return (now or now_millis)()


def normalize_record(item: Dict[str, Any], now: Optional[Callable[[], int]] = None) -> Dict[str, Any]:
    """Build a storable row from one payload object, ignoring unknown keys."""
    ticker = item.get("ticker")
    if isinstance(ticker, str):
        ticker = ticker.strip().upper()

    row: Dict[str, Any] = {
        "ticker": ticker,
        "date": normalize_timestamp(item.get("date"), item.get("data"), now=now),
    }
    for field in VALUE_FIELDS:
        row[field] = item.get(field)
    return row
