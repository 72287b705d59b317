import math
from datetime import UTC, datetime
from typing import Any

# BSON stores integers as signed 64-bit
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def now() -> datetime:
    return datetime.now(UTC)


def sanitize_text(value: Any, max_length: int) -> str:
    """Coerce to string, trim surrounding whitespace and cap the length. None becomes ''."""
    if value is None:
        return ""
    return str(value).strip()[:max_length]


def parse_numeric_id(value: Any) -> int | None:
    """Parse a numeric identifier from JSON input.

    Accepts ints, integral floats and numeric strings within the signed 64-bit
    range. Returns None for anything else, including booleans and blank strings.
    """
    number = _to_int(value)
    if number is None or not INT64_MIN <= number <= INT64_MAX:
        return None
    return number


def _to_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) and value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return int(number) if math.isfinite(number) and number.is_integer() else None
    return None
