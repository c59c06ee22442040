# app/services/availability/capacity_filter.py
"""
Capacity / conflict filtering

Annotates candidate slots with availability and remaining capacity, given
the appointments already occupying the salon.
"""
from datetime import datetime
from typing import Iterable, List, Optional, Sequence
import logging

from app.models.appointment import AppointmentStatus
from app.services.availability.domain import AppointmentInterval, CandidateSlot, TimeSlot

logger = logging.getLogger(__name__)

CAPACITY_EXCEEDED_REASON = "Time slot not available (capacity exceeded)"


def seat_holders(appointments: Iterable[AppointmentInterval]) -> List[AppointmentInterval]:
    """Drop appointments that cannot occupy a seat (canceled, zero-length)"""
    holders = []
    for appt in appointments:
        if appt.status == AppointmentStatus.CANCELED.value:
            continue
        if appt.is_degenerate:
            logger.debug(f"Ignoring appointment {appt.id} with non-positive length")
            continue
        holders.append(appt)
    return holders


def count_overlapping(
        start: datetime,
        end: datetime,
        appointments: Sequence[AppointmentInterval]
) -> int:
    return sum(1 for appt in appointments if appt.overlaps(start, end))


def is_within_capacity(used: int, capacity: Optional[int]) -> bool:
    """None is unbounded; 0 is always full"""
    return capacity is None or used < capacity


def apply_capacity(
        candidates: Sequence[CandidateSlot],
        appointments: Iterable[AppointmentInterval],
        capacity: Optional[int]
) -> List[TimeSlot]:
    """
    Mark each candidate available or not.

    A slot is available iff the number of seat-holding appointments that
    overlap it is below ``capacity``.
    """
    holders = seat_holders(appointments)

    slots = []
    for candidate in candidates:
        used = count_overlapping(candidate.start, candidate.end, holders)
        available = is_within_capacity(used, capacity)
        remaining = None if capacity is None else max(0, capacity - used)

        slots.append(TimeSlot(
            start=candidate.start,
            end=candidate.end,
            local_start=candidate.local_start,
            local_end=candidate.local_end,
            available=available,
            capacity_remaining=remaining,
            reason=None if available else CAPACITY_EXCEEDED_REASON
        ))

    return slots
