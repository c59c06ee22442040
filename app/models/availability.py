# ===== app/models/availability.py =====
from sqlalchemy import Column, String, Integer, Boolean, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.models.base import Base
import uuid


class BusinessHours(Base):
    """Weekly opening hours, one row per salon and weekday"""
    __tablename__ = "business_hours"
    __table_args__ = (
        UniqueConstraint("salon_id", "day_of_week", name="uq_business_hours_salon_day"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    salon_id = Column(
        UUID(as_uuid=True),
        ForeignKey("salons.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    day_of_week = Column(Integer, nullable=False)  # 0=Monday, 6=Sunday
    open_time = Column(String(5), nullable=False)  # HH:MM salon-local
    close_time = Column(String(5), nullable=False)  # HH:MM salon-local, "24:00" allowed
    is_closed = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    salon = relationship("Salon", back_populates="business_hours")

    def __repr__(self):
        return f"<BusinessHours(salon_id={self.salon_id}, day={self.day_of_week})>"


class SalonClosure(Base):
    """Date ranges the salon is shut (holidays, renovations, time-off)"""
    __tablename__ = "salon_closures"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    salon_id = Column(
        UUID(as_uuid=True),
        ForeignKey("salons.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Inclusive, salon-local calendar dates
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    reason = Column(String, nullable=True)  # "Holiday", "Vacation", etc.

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    salon = relationship("Salon", back_populates="closures")
