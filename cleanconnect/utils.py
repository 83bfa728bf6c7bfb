"""Shared utilities used across the matching core."""

import re
from datetime import time
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

CENT = Decimal("0.01")
MINUTES_PER_DAY = 24 * 60


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("(555) 123-4567")
        '5551234567'
        >>> normalize_phone("+1 (555) 123-4567")
        '+15551234567'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def to_cents(amount: Decimal) -> Decimal:
    """Round a monetary amount half-up to two decimal places."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_minute_of_day(value: Union[str, int, time]) -> int:
    """Convert ``"HH:MM"``, a ``time`` or an integer into minutes past midnight.

    ``"24:00"`` is accepted as the end of the day.

    Examples:
        >>> parse_minute_of_day("09:30")
        570
        >>> parse_minute_of_day(600)
        600
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid time of day: {value!r}")
    if isinstance(value, int):
        minutes = value
    elif isinstance(value, time):
        minutes = value.hour * 60 + value.minute
    elif isinstance(value, str):
        match = re.fullmatch(r"\s*(\d{1,2}):(\d{2})\s*", value)
        if not match:
            raise ValueError(f"Invalid time of day {value!r}, expected HH:MM")
        hours, mins = int(match.group(1)), int(match.group(2))
        if mins >= 60:
            raise ValueError(f"Invalid time of day {value!r}, expected HH:MM")
        minutes = hours * 60 + mins
    else:
        raise ValueError(f"Invalid time of day: {value!r}")

    if not 0 <= minutes <= MINUTES_PER_DAY:
        raise ValueError(f"Time of day out of range: {value!r}")
    return minutes


def format_minute_of_day(minutes: int) -> str:
    """Render minutes past midnight as ``HH:MM``."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
