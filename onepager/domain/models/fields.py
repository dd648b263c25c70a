"""Lenient field types shared by the store records.

Rows arrive from the hosted database as loosely typed JSON. A value that
cannot be read as a number becomes ``None`` rather than a validation error,
so every downstream calculation can fall back to its zero default.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator

_TRUE_STRINGS = {"true", "t", "yes", "y", "1", "on"}


def as_number(value: Any) -> float | None:
    """Read a finite float from a row value, or None.

    Booleans are not numbers here, and NaN/inf count as missing.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def as_int(value: Any) -> int | None:
    number = as_number(value)
    return int(number) if number is not None else None


def as_flag(value: Any) -> bool:
    """Truthiness as the dashboard used it: missing means False."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    if isinstance(value, (bool, int, float)):
        return bool(value) and not (isinstance(value, float) and math.isnan(value))
    return False


def as_date(value: Any) -> date | None:
    """Parse an ISO date (or timestamp) column, None when unreadable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def as_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


LenientFloat = Annotated[Optional[float], BeforeValidator(as_number)]
LenientInt = Annotated[Optional[int], BeforeValidator(as_int)]
Flag = Annotated[bool, BeforeValidator(as_flag)]
LenientDate = Annotated[Optional[date], BeforeValidator(as_date)]
LenientText = Annotated[Optional[str], BeforeValidator(as_text)]
