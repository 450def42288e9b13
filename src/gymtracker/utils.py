"""Utility functions."""
import math
from typing import Any, Optional


def to_number(value: Any) -> float:
    """Convert a cell value to a float, returning 0 if conversion fails (True reads as 1)."""
    if value is None:
        return 0.0
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def to_int(value: Any) -> int:
    """Convert a cell value to an int (truncating), returning 0 if conversion fails."""
    return int(to_number(value))


def clean_str(value: Any) -> Optional[str]:
    """Return the cell as a string, or None for empty cells."""
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None
