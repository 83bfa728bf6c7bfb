"""
Provider availability checks against the weekly schedule model.

A requested slot is available only when it fits entirely inside a single
open window of the effective day. Date exceptions override the weekday:
``unavailable`` closes the day, ``custom`` swaps in its own windows.
Bridging two adjacent windows is not supported.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional, TypedDict
from zoneinfo import ZoneInfo

from cleanconnect.config import settings
from cleanconnect.schemas.availability_schema import (
    WEEKDAYS,
    ExceptionKind,
    TimeWindow,
    WeeklyAvailability,
)

logger = logging.getLogger(__name__)


class DateAvailability(TypedDict):
    """Summary of open windows on a single date."""

    date: str
    day_name: str
    slot_count: int


def to_provider_local(availability: WeeklyAvailability, instant: datetime) -> datetime:
    """Return the wall-clock reading of ``instant`` in the provider's zone.

    Aware instants are converted only when the provider declares a
    timezone. Naive instants, or providers without a timezone, keep the
    instant's own wall clock.
    """
    if availability.timezone and instant.tzinfo is not None:
        return instant.astimezone(ZoneInfo(availability.timezone))
    return instant


def effective_windows(availability: WeeklyAvailability, day: date) -> list[TimeWindow]:
    """Windows that apply on ``day`` after exceptions are taken into account."""
    exception = availability.exception_for(day)
    if exception is not None:
        if exception.kind == ExceptionKind.UNAVAILABLE:
            return []
        return exception.custom_windows
    return availability.windows_for_weekday(WEEKDAYS[day.weekday()])


def is_available(
    availability: WeeklyAvailability, instant: datetime, duration_minutes: int
) -> bool:
    """Check whether ``[instant, instant + duration)`` fits in one open window."""
    local = to_provider_local(availability, instant)
    windows = effective_windows(availability, local.date())
    if not windows:
        return False

    slot_start = local.hour * 60 + local.minute
    return any(window.contains(slot_start, duration_minutes) for window in windows)


def next_available_slots(
    availability: WeeklyAvailability,
    after: datetime,
    duration_minutes: int,
    days: Optional[int] = None,
    limit: Optional[int] = None,
) -> list[datetime]:
    """Earliest window starts (provider-local) that can take a job of this length.

    Scans forward from ``after`` day by day. A window that has already
    started on the first day is offered from ``after`` onwards when the
    remainder is still long enough.
    """
    if days is None:
        days = settings.scheduling.search_horizon_days
    if limit is None:
        limit = settings.scheduling.max_suggested_slots
    if limit < 1:
        return []

    local_after = to_provider_local(availability, after)
    midnight = local_after.replace(hour=0, minute=0, second=0, microsecond=0)
    earliest = local_after.hour * 60 + local_after.minute
    if local_after.second or local_after.microsecond:
        earliest += 1

    results: list[datetime] = []
    for offset in range(days):
        day_start = midnight + timedelta(days=offset)
        for window in effective_windows(availability, day_start.date()):
            start = window.start if offset else max(window.start, earliest)
            if window.contains(start, duration_minutes):
                results.append(day_start + timedelta(minutes=start))
                if len(results) >= limit:
                    return results
    return results


def get_available_dates(
    availability: WeeklyAvailability, start: date, limit: int = 5
) -> list[DateAvailability]:
    """Get the next N dates on which the provider has any open window."""
    results: list[DateAvailability] = []
    for offset in range(settings.scheduling.search_horizon_days):
        if len(results) >= limit:
            break
        day = start + timedelta(days=offset)
        windows = effective_windows(availability, day)
        if windows:
            results.append(
                {
                    "date": day.isoformat(),
                    "day_name": day.strftime("%A"),
                    "slot_count": len(windows),
                }
            )
    return results
