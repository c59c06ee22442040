# app/services/availability/domain.py
"""
Value types for the availability engine.

Absolute instants (``start``/``end``) are always timezone-aware UTC and are
the only values used for overlap comparison. Salon-local wall-clock values
(``local_start``/``local_end``) are carried alongside for display and are
never compared against appointments.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, Optional, Tuple
from uuid import UUID
from zoneinfo import ZoneInfo

MINUTES_PER_DAY = 24 * 60


def parse_hhmm(value: str) -> int:
    """Parse "HH:MM" into minutes since midnight. "24:00" is end of day."""
    try:
        hours_str, minutes_str = value.strip().split(":")
        hours, minutes = int(hours_str), int(minutes_str)
    except (AttributeError, ValueError):
        raise ValueError(f"Time must be in HH:MM format, got {value!r}")

    if not (0 <= minutes < 60):
        raise ValueError(f"Minutes out of range in {value!r}")
    total = hours * 60 + minutes
    if not (0 <= total <= MINUTES_PER_DAY):
        raise ValueError(f"Hours out of range in {value!r}")
    return total


def as_utc(value: datetime) -> datetime:
    """Normalize a stored instant to aware UTC; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class DailyHours:
    """Opening window for one weekday, in salon-local minutes since midnight"""
    open_minute: int
    close_minute: int

    @classmethod
    def from_strings(cls, open_time: str, close_time: str) -> "DailyHours":
        return cls(parse_hhmm(open_time), parse_hhmm(close_time))

    @property
    def length_minutes(self) -> int:
        return self.close_minute - self.open_minute


@dataclass(frozen=True)
class ClosureRange:
    start_date: date
    end_date: date
    reason: Optional[str] = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class SalonConfig:
    """Everything the engine needs to know about one tenant"""
    id: UUID
    name: str
    slug: str
    tz: ZoneInfo
    capacity: Optional[int]
    granularity_minutes: Optional[int]
    # weekday (0=Monday) -> hours; missing or None means closed that day
    weekly_hours: Dict[int, Optional[DailyHours]] = field(default_factory=dict)
    closures: Tuple[ClosureRange, ...] = ()

    @property
    def time_zone(self) -> str:
        return self.tz.key

    def closure_for(self, day: date) -> Optional[ClosureRange]:
        return next((c for c in self.closures if c.covers(day)), None)

    def hours_for(self, day: date) -> Optional[DailyHours]:
        """Opening hours on a salon-local date, or None when the salon is shut"""
        if self.closure_for(day) is not None:
            return None
        return self.weekly_hours.get(day.weekday())


@dataclass(frozen=True)
class AppointmentInterval:
    """A booked interval as the engine sees it"""
    start: datetime
    end: datetime
    id: Optional[UUID] = None
    status: str = "booked"

    @property
    def is_degenerate(self) -> bool:
        return self.end <= self.start

    def overlaps(self, start: datetime, end: datetime) -> bool:
        # Half-open: touching intervals do not overlap
        return self.start < end and self.end > start


@dataclass(frozen=True)
class CandidateSlot:
    start: datetime
    end: datetime
    local_start: datetime
    local_end: datetime


@dataclass(frozen=True)
class TimeSlot:
    start: datetime
    end: datetime
    local_start: datetime
    local_end: datetime
    available: bool
    capacity_remaining: Optional[int]
    reason: Optional[str] = None
