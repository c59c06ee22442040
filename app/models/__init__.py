# app/models/__init__.py
from .base import Base
from .salon import Salon
from .availability import BusinessHours, SalonClosure
from .service import Service, ServiceCategory
from .appointment import Appointment, AppointmentItem, AppointmentStatus, ACTIVE_STATUSES

__all__ = [
    "Base",
    "Salon",
    "BusinessHours",
    "SalonClosure",
    "Service",
    "ServiceCategory",
    "Appointment",
    "AppointmentItem",
    "AppointmentStatus",
    "ACTIVE_STATUSES",
]
