# app/schemas/availability.py
"""Response schemas for the public availability endpoints"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date as date_type, datetime

from app.services.availability.availability_service import AvailabilityResult, SlotCheckResult
from app.services.availability.domain import TimeSlot


class SalonInfo(BaseModel):
    """Presentation metadata about the salon"""
    name: str
    slug: str
    time_zone: str = Field(..., description="IANA time zone of the salon")


class TimeSlotResponse(BaseModel):
    """One candidate slot"""
    start: datetime = Field(..., description="Slot start (UTC)")
    end: datetime = Field(..., description="Slot end (UTC)")
    local_start: datetime = Field(..., description="Slot start in the salon's zone")
    local_end: datetime = Field(..., description="Slot end in the salon's zone")
    time: str = Field(..., description="Local start as HH:MM")
    available: bool
    capacity_remaining: Optional[int] = Field(None, description="None when capacity is unbounded")
    reason: Optional[str] = None

    @classmethod
    def from_slot(cls, slot: TimeSlot) -> "TimeSlotResponse":
        return cls(
            start=slot.start,
            end=slot.end,
            local_start=slot.local_start,
            local_end=slot.local_end,
            time=slot.local_start.strftime("%H:%M"),
            available=slot.available,
            capacity_remaining=slot.capacity_remaining,
            reason=slot.reason
        )


class AvailabilityResponse(BaseModel):
    """Availability for one salon-local day"""
    salon: SalonInfo
    date: date_type
    duration_minutes: int
    granularity_minutes: int
    capacity: Optional[int] = Field(None, description="Concurrent appointments allowed, None = unbounded")
    available_count: int
    slots: List[TimeSlotResponse] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: AvailabilityResult, only_available: bool = False) -> "AvailabilityResponse":
        slots = result.available_slots if only_available else result.slots
        return cls(
            salon=SalonInfo(
                name=result.salon.name,
                slug=result.salon.slug,
                time_zone=result.salon.time_zone
            ),
            date=result.date,
            duration_minutes=result.duration_minutes,
            granularity_minutes=result.granularity_minutes,
            capacity=result.capacity,
            available_count=len(result.available_slots),
            slots=[TimeSlotResponse.from_slot(slot) for slot in slots]
        )


class SlotCheckResponse(BaseModel):
    """Point check of a single start time"""
    available: bool
    reason: Optional[str] = None
    capacity_used: int
    capacity_total: Optional[int] = None

    @classmethod
    def from_result(cls, result: SlotCheckResult) -> "SlotCheckResponse":
        return cls(
            available=result.available,
            reason=result.reason,
            capacity_used=result.capacity_used,
            capacity_total=result.capacity_total
        )
