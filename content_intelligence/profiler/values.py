"""
Cell value parsing helpers

Purely structural: decides whether a raw cell is blank, numeric, a
percentage or a calendar date. Never raises on unexpected values.
"""
import logging
import math
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from .taxonomy import CURRENCY_SYMBOLS

logger = logging.getLogger(__name__)

_SYMBOLS = re.escape(CURRENCY_SYMBOLS)
_NUMBER_RE = re.compile(
    rf"^[-+]?\s*(?P<symbol>[{_SYMBOLS}])?\s*[-+]?"
    r"(?P<digits>\d{1,3}(?:,\d{3})+|\d+)?(?P<fraction>\.\d+)?$"
)
_PERCENT_RE = re.compile(r"^[<>≤≥]?\s*[-+]?\d+(?:\.\d+)?\s*[%‰]$")

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{1,2}-\d{1,2}(?:[T ]\d{1,2}:\d{2}(?::\d{2}(?:\.\d+)?)?)?(?:Z|[+-]\d{2}:?\d{2})?$")
_SLASH_DATE_RE = re.compile(r"^\d{1,2}/\d{1,2}/\d{2,4}$")
_DOT_DATE_RE = re.compile(r"^\d{1,2}\.\d{1,2}\.\d{2,4}$")
_COMPACT_YMD_RE = re.compile(r"^\d{4}[./]\d{1,2}[./]\d{1,2}\.?$")
_MONTH_YEAR_RE = re.compile(r"^(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\w*[\s\-/]?\d{2,4}$", re.IGNORECASE)
_YEAR_MONTH_RE = re.compile(r"^\d{4}[\s\-/](jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\w*$", re.IGNORECASE)
_YEAR_QUARTER_RE = re.compile(r"^\d{4}[\s\-]?q[1-4]$", re.IGNORECASE)
_CJK_DATE_RE = re.compile(r"^\d{4}\s*[년年]\s*\d{1,2}\s*[월月](?:\s*\d{1,2}\s*[일日])?$")


def is_blank(value: Any) -> bool:
    """True for None, NaN/NaT and whitespace-only strings"""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # list-like cells are content, not blanks
        return False


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a cell as a number

    Args:
        value: Raw cell value

    Returns:
        Float value, or None when the cell is not numeric
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal, np.integer, np.floating)):
        try:
            number = float(value)
        except OverflowError:
            # ints beyond the float range
            return None
        return number if math.isfinite(number) else None
    if not isinstance(value, str):
        return None

    match = _NUMBER_RE.match(value.strip())
    if not match or not (match.group("digits") or match.group("fraction")):
        return None

    cleaned = value.strip().replace(",", "").replace(" ", "")
    if match.group("symbol"):
        cleaned = cleaned.replace(match.group("symbol"), "")
    try:
        number = float(cleaned)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def has_currency_symbol(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    match = _NUMBER_RE.match(value.strip())
    return bool(match and match.group("symbol"))


def decimal_places(value: Any) -> int:
    """Number of digits after the decimal point as written"""
    if isinstance(value, str):
        text = value.strip().replace(",", "")
        return len(text.split(".", 1)[1]) if "." in text else 0
    if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        return 0
    try:
        exponent = Decimal(repr(float(value))).normalize().as_tuple().exponent
    except (InvalidOperation, TypeError, ValueError):
        return 0
    return max(0, -int(exponent))


def has_cents_precision(value: Any) -> bool:
    """
    Two-decimal amounts. Floats lose trailing zeros (12.50 -> 12.5),
    so a native float with one or two decimals qualifies too.
    """
    places = decimal_places(value)
    if isinstance(value, str):
        return places == 2
    return places in (1, 2)


def is_whole_number(value: Any, number: float) -> bool:
    """Whole numbers: ints and integral floats; strings only when written without a fraction"""
    if isinstance(value, str):
        return "." not in value and float(number).is_integer()
    return float(number).is_integer()


def is_percentage_string(value: Any) -> bool:
    return isinstance(value, str) and bool(_PERCENT_RE.match(value.strip()))


def parse_percentage(value: Any) -> Optional[float]:
    if not is_percentage_string(value):
        return None
    digits = re.sub(r"[^\d.\-+]", "", value)
    try:
        return float(digits)
    except ValueError:
        return None


def is_date_value(value: Any) -> bool:
    """Check whether a single cell holds a calendar date"""
    return bool(date_value_mask([value])[0])


def date_value_mask(values: Sequence[Any]) -> np.ndarray:
    """
    Flag the cells of a column that hold calendar dates

    Native date/datetime/Timestamp values always qualify. Strings qualify
    only in explicit date layouts, and numeric layouts must also resolve
    to a real calendar day. Numeric layouts are parsed together, one
    pd.to_datetime call per day order.

    Args:
        values: Raw cells

    Returns:
        Boolean array aligned with values
    """
    mask = np.zeros(len(values), dtype=bool)
    month_first: Dict[int, str] = {}
    day_first: Dict[int, str] = {}

    for i, value in enumerate(values):
        if isinstance(value, (datetime, date, pd.Timestamp, np.datetime64)):
            mask[i] = not is_blank(value)
            continue
        if not isinstance(value, str):
            continue
        text = value.strip()
        if not text:
            continue
        if (_MONTH_YEAR_RE.match(text) or _YEAR_MONTH_RE.match(text)
                or _YEAR_QUARTER_RE.match(text) or _CJK_DATE_RE.match(text)):
            mask[i] = True
        elif _ISO_DATE_RE.match(text) or _COMPACT_YMD_RE.match(text):
            month_first[i] = text.rstrip(".")
        elif _SLASH_DATE_RE.match(text):
            month_first[i] = text
            day_first[i] = text
        elif _DOT_DATE_RE.match(text):
            day_first[i] = text

    for candidates, dayfirst in ((month_first, False), (day_first, True)):
        if candidates:
            positions = list(candidates)
            mask[positions] = mask[positions] | _resolves(list(candidates.values()), dayfirst)
    return mask


def _resolves(texts: List[str], dayfirst: bool) -> np.ndarray:
    """Which texts parse to a real timestamp"""
    series = pd.Series(texts, dtype=object)
    try:
        parsed = pd.to_datetime(series, errors="coerce", dayfirst=dayfirst, format="mixed", utc=True)
    except (ValueError, TypeError, OverflowError) as e:
        logger.debug(f"Date parsing failed for {len(texts)} values: {e}")
        return np.zeros(len(texts), dtype=bool)
    return parsed.notna().to_numpy(dtype=bool)
