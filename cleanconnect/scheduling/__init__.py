from cleanconnect.scheduling.availability import (
    effective_windows,
    get_available_dates,
    is_available,
    next_available_slots,
)

__all__ = [
    "effective_windows",
    "get_available_dates",
    "is_available",
    "next_available_slots",
]
