"""
Value Normalizer - Turns free-form spreadsheet cells into numbers
Cells are untrusted: nothing in here raises, bad content degrades to None.
"""

import math
import re
from typing import Any, Optional

from scorecard.models import Operator


_SI = re.compile(r'^SI$', re.IGNORECASE)
_NO = re.compile(r'^NO$', re.IGNORECASE)


def as_string(value: Any) -> str:
    """Cell as stripped text; None becomes an empty string."""
    if value is None:
        return ""
    return str(value).strip()


def _parse_float(text: str) -> Optional[float]:
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def as_number(value: Any) -> Optional[float]:
    """
    Normalize a raw cell to a float, or None when it holds no usable data.

    Rules, in order:
      - None / empty string -> None
      - numbers pass through unchanged
      - "SI" -> 1.0, "NO" -> 0.0 (case-insensitive)
      - "45%" -> 0.45
      - "3,5" -> 3.5 (comma decimal separator)
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None

    text = str(value).strip()
    if not text:
        return None
    if _SI.match(text):
        return 1.0
    if _NO.match(text):
        return 0.0

    if text.endswith('%'):
        number = _parse_float(text[:-1].strip().replace(',', '.'))
        return number / 100 if number is not None else None

    return _parse_float(text.replace(',', '.'))


def detect_operator(text: Any) -> Operator:
    """Find the comparison operator in a cell; defaults to '>='."""
    compact = re.sub(r'\s+', '', as_string(text))
    if '>=' in compact:
        return '>='
    if '<=' in compact:
        return '<='
    if '>' in compact:
        return '>'
    if '<' in compact:
        return '<'
    return '>='
