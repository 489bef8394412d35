"""
Numeric Coercion Service

Turns arbitrary user or stored input into a finite number.
"""

import math
import re

# Plain decimal notation only: no hex, no underscores, no 'nan'/'inf' words
_NUMBER_RE = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')


def to_number(value):
    """
    Coerce a value to a finite float, defaulting to 0.

    Accepts numbers and numeric strings. A comma is accepted as the
    decimal separator ("12,5" -> 12.5). None, booleans, empty strings
    and anything unparseable or non-finite become 0.0. Never raises.
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float)):
        try:
            result = float(value)
        except OverflowError:
            return 0.0
        return result if math.isfinite(result) else 0.0

    text = str(value).strip().replace(',', '.', 1)
    if not text:
        return 0.0
    if not _NUMBER_RE.match(text):
        return 0.0

    try:
        result = float(text)
    except (ValueError, OverflowError):
        return 0.0
    return result if math.isfinite(result) else 0.0
