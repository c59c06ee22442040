# app/schemas/__init__.py
from .availability import (
    SalonInfo,
    TimeSlotResponse,
    AvailabilityResponse,
    SlotCheckResponse
)
