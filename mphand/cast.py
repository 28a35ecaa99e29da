"""
Coercion of loosely typed block arguments.

Block inputs arrive as numbers, strings or booleans; these helpers convert
them the way the block runtime does (non-numeric text is 0).
"""
import math
from typing import Any, Optional


def to_number(value: Any) -> float:
    """
    Convert a block argument to a number.

    Args:
        value: Raw argument

    Returns:
        Parsed number, or 0 for anything non-numeric (including NaN)
    """
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return 0.0 if math.isnan(value) else float(value)
    try:
        number = float(str(value).strip())
    except ValueError:
        return 0.0
    return 0.0 if math.isnan(number) else number


def to_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_index(value: Any) -> Optional[int]:
    """Integral number as int, None for fractional values."""
    number = to_number(value)
    if not number.is_integer():
        return None
    return int(number)
