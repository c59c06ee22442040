# app/models/salon.py
"""
Salon Model - tenant root
Every other record (hours, closures, catalog, appointments) hangs off a salon.
"""
from sqlalchemy import Column, String, Boolean, DateTime, Integer, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from app.models.base import Base


class Salon(Base):
    __tablename__ = "salons"
    __table_args__ = (
        CheckConstraint("capacity IS NULL OR capacity > 0", name="ck_salons_capacity_positive"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    slug = Column(String(100), nullable=False, unique=True, index=True)

    # IANA zone; business hours and closures are interpreted in this zone
    time_zone = Column(String(64), nullable=False, default="UTC")

    # Max concurrent appointments; NULL means unbounded
    capacity = Column(Integer, nullable=True)

    # Step between candidate slot starts; NULL falls back to the app default
    slot_granularity_minutes = Column(Integer, nullable=True)

    custom_domain = Column(String(255), nullable=True, unique=True)
    logo_url = Column(String(500), nullable=True)

    business_hours = relationship(
        "BusinessHours", back_populates="salon", cascade="all, delete-orphan"
    )
    closures = relationship(
        "SalonClosure", back_populates="salon", cascade="all, delete-orphan"
    )
    appointments = relationship("Appointment", back_populates="salon")
    services = relationship("Service", back_populates="salon")
    service_categories = relationship("ServiceCategory", back_populates="salon")

    # Technical fields
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<Salon(id={self.id}, slug={self.slug})>"
