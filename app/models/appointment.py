# ===== app/models/appointment.py =====
from datetime import datetime, timezone
from enum import Enum
from zoneinfo import ZoneInfo
from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.models.base import Base
import uuid


class AppointmentStatus(str, Enum):
    BOOKED = "booked"
    CANCELED = "canceled"
    COMPLETED = "completed"


# Statuses that occupy a seat
ACTIVE_STATUSES = (AppointmentStatus.BOOKED.value, AppointmentStatus.COMPLETED.value)


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # References
    salon_id = Column(
        UUID(as_uuid=True),
        ForeignKey("salons.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Absolute instants; local rendering is derived from the salon zone
    starts_at = Column(DateTime(timezone=True), nullable=False, index=True)
    ends_at = Column(DateTime(timezone=True), nullable=False, index=True)

    status = Column(String(20), default=AppointmentStatus.BOOKED.value, nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    salon = relationship("Salon", back_populates="appointments")
    items = relationship(
        "AppointmentItem",
        back_populates="appointment",
        cascade="all, delete-orphan",
        order_by="AppointmentItem.sort_order"
    )

    def __repr__(self):
        return f"<Appointment(id={self.id}, starts_at={self.starts_at}, status={self.status})>"

    @property
    def starts_at_local(self) -> datetime:
        """Start as wall-clock time in the salon's zone"""
        return self._in_salon_zone(self.starts_at)

    @property
    def ends_at_local(self) -> datetime:
        """End as wall-clock time in the salon's zone"""
        return self._in_salon_zone(self.ends_at)

    def _in_salon_zone(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            # SQLite hands back naive values; they were stored as UTC
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(ZoneInfo(self.salon.time_zone))


class AppointmentItem(Base):
    """
    A service performed within an appointment.
    Name, price and duration are snapshots owned by the appointment, so the
    line item survives the catalog service being edited or deleted.
    """
    __tablename__ = "appointment_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    appointment_id = Column(
        UUID(as_uuid=True),
        ForeignKey("appointments.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    service_id = Column(
        UUID(as_uuid=True),
        ForeignKey("services.id", ondelete="SET NULL"),
        nullable=True
    )

    service_name = Column(String(200), nullable=False)
    price_cents = Column(Integer, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    appointment = relationship("Appointment", back_populates="items")
    service = relationship("Service")
