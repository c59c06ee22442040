from __future__ import annotations

from datetime import date, datetime, timezone
from uuid import uuid4
from zoneinfo import ZoneInfo

import pytest

from app.services.availability.capacity_filter import (
    CAPACITY_EXCEEDED_REASON,
    apply_capacity,
    count_overlapping,
    seat_holders,
)
from app.services.availability.domain import AppointmentInterval, DailyHours
from app.services.availability.slot_generator import generate_candidate_slots

DAY = date(2025, 9, 15)
NINE_TO_FIVE = DailyHours.from_strings("09:00", "17:00")


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2025, 9, 15, hour, minute, tzinfo=timezone.utc)


def appt(start: datetime, end: datetime, status: str = "booked") -> AppointmentInterval:
    return AppointmentInterval(start=start, end=end, id=uuid4(), status=status)


def grid(duration: int = 60, granularity: int = 60):
    return generate_candidate_slots(NINE_TO_FIVE, DAY, ZoneInfo("UTC"), duration, granularity)


def by_time(slots):
    return {slot.local_start.strftime("%H:%M"): slot for slot in slots}


def test_single_seat_blocks_only_the_overlapping_hour() -> None:
    slots = by_time(apply_capacity(grid(), [appt(at(10), at(11))], capacity=1))

    assert slots["09:00"].available
    assert not slots["10:00"].available
    assert slots["10:00"].reason == CAPACITY_EXCEEDED_REASON
    assert slots["10:00"].capacity_remaining == 0
    assert slots["11:00"].available
    assert slots["11:00"].capacity_remaining == 1


def test_single_seat_blocks_every_partially_overlapping_slot() -> None:
    slots = by_time(apply_capacity(grid(granularity=30), [appt(at(10), at(11))], capacity=1))

    assert slots["09:00"].available
    assert not slots["09:30"].available
    assert not slots["10:00"].available
    assert not slots["10:30"].available
    assert slots["11:00"].available


def test_unbounded_capacity_never_blocks() -> None:
    crowd = [appt(at(10), at(11)) for _ in range(25)]

    slots = apply_capacity(grid(), crowd, capacity=None)

    assert all(slot.available for slot in slots)
    assert all(slot.capacity_remaining is None for slot in slots)


def test_zero_capacity_is_always_fully_booked() -> None:
    slots = apply_capacity(grid(), [], capacity=0)

    assert slots
    assert not any(slot.available for slot in slots)
    assert all(slot.capacity_remaining == 0 for slot in slots)


def test_remaining_capacity_counts_down() -> None:
    booked = [appt(at(10), at(11)), appt(at(10, 30), at(12))]

    slots = by_time(apply_capacity(grid(), booked, capacity=3))

    assert slots["09:00"].capacity_remaining == 3
    assert slots["10:00"].capacity_remaining == 1
    assert slots["11:00"].capacity_remaining == 2
    assert all(slot.available for slot in slots.values())


def test_canceled_and_zero_length_appointments_hold_no_seat() -> None:
    ignored = [
        appt(at(10), at(11), status="canceled"),
        appt(at(10), at(10)),
        appt(at(11), at(10)),
    ]

    slots = apply_capacity(grid(), ignored, capacity=1)

    assert all(slot.available for slot in slots)
    assert seat_holders(ignored) == []


def test_touching_intervals_do_not_overlap() -> None:
    booked = [appt(at(9), at(10))]

    assert count_overlapping(at(10), at(11), booked) == 0
    assert count_overlapping(at(9, 59), at(11), booked) == 1


def test_slot_is_unavailable_iff_overlaps_reach_capacity() -> None:
    booked = [appt(at(9), at(12)), appt(at(11), at(14)), appt(at(13), at(15))]
    holders = seat_holders(booked)

    for capacity in range(4):
        for slot in apply_capacity(grid(granularity=30), booked, capacity):
            overlaps = count_overlapping(slot.start, slot.end, holders)
            assert slot.available == (overlaps < capacity)


def test_raising_capacity_never_reduces_available_slots() -> None:
    booked = [appt(at(9), at(12)), appt(at(10), at(11)), appt(at(10), at(16)), appt(at(14), at(15))]

    counts = [
        sum(1 for slot in apply_capacity(grid(granularity=30), booked, capacity) if slot.available)
        for capacity in range(6)
    ]

    assert counts == sorted(counts)
    assert counts[0] == 0


def test_output_keeps_candidate_order() -> None:
    candidates = grid(granularity=15)

    slots = apply_capacity(candidates, [appt(at(12), at(13))], capacity=1)

    assert [s.start for s in slots] == [c.start for c in candidates]


@pytest.mark.parametrize("capacity", [None, 0, 1, 5])
def test_empty_grid_stays_empty(capacity) -> None:
    assert apply_capacity([], [appt(at(10), at(11))], capacity) == []
