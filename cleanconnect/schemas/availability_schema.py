"""Provider availability data models.

A provider's schedule is a recurring week of open windows plus sparse
date-specific exceptions. Windows are validated once here, at the write
boundary, so the containment check in ``scheduling.availability`` can
assume each day's windows are sorted and non-overlapping.
"""

import datetime as dt
from enum import Enum
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from cleanconnect.utils import format_minute_of_day, parse_minute_of_day

WEEKDAYS: tuple[str, ...] = (
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
)


class TimeWindow(BaseModel):
    """Half-open ``[start, end)`` interval in minutes past midnight."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse_time(cls, value):
        return parse_minute_of_day(value)

    @model_validator(mode="after")
    def _check_order(self) -> "TimeWindow":
        if self.end <= self.start:
            raise ValueError(
                f"Window end {format_minute_of_day(self.end)} must be after "
                f"start {format_minute_of_day(self.start)}"
            )
        return self

    def contains(self, start_minute: int, duration_minutes: int) -> bool:
        return start_minute >= self.start and start_minute + duration_minutes <= self.end

    def __str__(self) -> str:
        return f"{format_minute_of_day(self.start)}-{format_minute_of_day(self.end)}"


def _sorted_without_overlap(windows: list[TimeWindow], label: str) -> list[TimeWindow]:
    ordered = sorted(windows, key=lambda w: w.start)
    for previous, current in zip(ordered, ordered[1:]):
        if current.start < previous.end:
            raise ValueError(f"Overlapping windows on {label}: {previous} and {current}")
    return ordered


class ExceptionKind(str, Enum):
    UNAVAILABLE = "unavailable"
    CUSTOM = "custom"


class AvailabilityException(BaseModel):
    """Override for one calendar day.

    ``unavailable`` blocks the whole day. ``custom`` replaces the weekday's
    windows with ``custom_windows``.
    """

    model_config = ConfigDict(populate_by_name=True)

    date: dt.date
    kind: ExceptionKind = Field(validation_alias=AliasChoices("kind", "type"))
    custom_windows: list[TimeWindow] = Field(
        default_factory=list,
        validation_alias=AliasChoices("custom_windows", "timeSlots", "time_slots"),
    )
    reason: Optional[str] = None

    @model_validator(mode="after")
    def _check_windows(self) -> "AvailabilityException":
        self.custom_windows = _sorted_without_overlap(self.custom_windows, str(self.date))
        return self


class WeeklyAvailability(BaseModel):
    """Recurring weekly schedule with date exceptions.

    ``timezone`` names the provider's operating zone (IANA). When it is
    set, timezone-aware job instants are converted into it before the
    wall-clock check; naive instants are always read as provider-local.
    """

    monday: list[TimeWindow] = Field(default_factory=list)
    tuesday: list[TimeWindow] = Field(default_factory=list)
    wednesday: list[TimeWindow] = Field(default_factory=list)
    thursday: list[TimeWindow] = Field(default_factory=list)
    friday: list[TimeWindow] = Field(default_factory=list)
    saturday: list[TimeWindow] = Field(default_factory=list)
    sunday: list[TimeWindow] = Field(default_factory=list)
    exceptions: list[AvailabilityException] = Field(default_factory=list)
    timezone: Optional[str] = None

    @field_validator(*WEEKDAYS)
    @classmethod
    def _check_day(cls, windows: list[TimeWindow], info) -> list[TimeWindow]:
        return _sorted_without_overlap(windows, info.field_name)

    @field_validator("exceptions")
    @classmethod
    def _check_unique_dates(
        cls, exceptions: list[AvailabilityException]
    ) -> list[AvailabilityException]:
        seen: set[dt.date] = set()
        for exc in exceptions:
            if exc.date in seen:
                raise ValueError(f"Duplicate availability exception for {exc.date}")
            seen.add(exc.date)
        return exceptions

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {value!r}") from None
        return value

    def windows_for_weekday(self, weekday: str) -> list[TimeWindow]:
        return getattr(self, weekday.lower(), None) or []

    def exception_for(self, day: dt.date) -> Optional[AvailabilityException]:
        for exc in self.exceptions:
            if exc.date == day:
                return exc
        return None
