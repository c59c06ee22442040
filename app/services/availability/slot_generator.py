# app/services/availability/slot_generator.py
"""
Slot Generation

Builds the candidate grid of slot starts for one salon-local day. The walk
runs on wall-clock minutes, so the count and alignment of slots follow the
salon's clock even on daylight-saving transition days.
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional
from zoneinfo import ZoneInfo
import logging

from app.services.availability.domain import CandidateSlot, DailyHours

logger = logging.getLogger(__name__)


def localize(day: date, minute_of_day: int, tz: ZoneInfo) -> Optional[datetime]:
    """
    Attach the salon zone to a wall-clock time.

    Returns None when the wall-clock time does not exist on that date
    (skipped by a spring-forward transition). Ambiguous times resolve to
    their first occurrence.
    """
    wall = datetime.combine(day, time()) + timedelta(minutes=minute_of_day)
    local = wall.replace(tzinfo=tz)

    round_trip = local.astimezone(timezone.utc).astimezone(tz)
    if round_trip.replace(tzinfo=None) != wall:
        return None
    return local


def generate_candidate_slots(
        hours: Optional[DailyHours],
        target_date: date,
        tz: ZoneInfo,
        duration_minutes: int,
        granularity_minutes: int
) -> List[CandidateSlot]:
    """
    Generate the ordered candidate slots for a day.

    Args:
        hours: opening window for the day, None when closed
        target_date: salon-local calendar date
        tz: salon time zone
        duration_minutes: length of every slot
        granularity_minutes: step between successive starts

    Returns:
        Candidate slots in ascending start order. Empty when the salon is
        closed or the window is shorter than the duration.
    """
    if duration_minutes <= 0 or granularity_minutes <= 0:
        raise ValueError("duration and granularity must be positive")

    if hours is None or hours.length_minutes < duration_minutes:
        return []

    slots = []
    last_start = hours.close_minute - duration_minutes
    length = timedelta(minutes=duration_minutes)
    closing = datetime.combine(target_date, time()) + timedelta(minutes=hours.close_minute)

    for minute in range(hours.open_minute, last_start + 1, granularity_minutes):
        local_start = localize(target_date, minute, tz)
        if local_start is None:
            logger.debug(f"Skipping nonexistent local time {minute // 60:02d}:{minute % 60:02d} on {target_date}")
            continue

        start = local_start.astimezone(timezone.utc)
        end = start + length
        local_end = end.astimezone(tz)

        # A spring-forward jump can push the real end past the wall-clock close
        if local_end.replace(tzinfo=None) > closing:
            logger.debug(f"Skipping {minute // 60:02d}:{minute % 60:02d} on {target_date}: ends after closing")
            continue

        slots.append(CandidateSlot(
            start=start,
            end=end,
            local_start=local_start,
            local_end=local_end
        ))

    return slots
