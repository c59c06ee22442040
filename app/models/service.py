# app/models/service.py
"""
Service catalog models
Each service belongs to one salon and optionally to one category.
"""
from sqlalchemy import Column, String, Integer, ForeignKey, Boolean, DateTime, CheckConstraint, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from app.models.base import Base


class ServiceCategory(Base):
    __tablename__ = "service_categories"
    __table_args__ = (
        UniqueConstraint("salon_id", "name", name="uq_service_categories_salon_name"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    salon_id = Column(
        UUID(as_uuid=True),
        ForeignKey("salons.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    name = Column(String(100), nullable=False)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    salon = relationship("Salon", back_populates="service_categories")
    services = relationship("Service", back_populates="category")


class Service(Base):
    """
    Stores structured service information (source of truth for price/duration).
    """
    __tablename__ = "services"
    __table_args__ = (
        UniqueConstraint("salon_id", "name", name="uq_services_salon_name"),
        CheckConstraint(
            "duration_minutes > 0 AND duration_minutes <= 480",
            name="ck_services_duration_range"
        ),
        CheckConstraint("price_cents >= 0", name="ck_services_price_non_negative"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    salon_id = Column(
        UUID(as_uuid=True),
        ForeignKey("salons.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    category_id = Column(
        UUID(as_uuid=True),
        ForeignKey("service_categories.id", ondelete="SET NULL"),
        nullable=True
    )

    # Core service details
    name = Column(String(200), nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    price_cents = Column(Integer, nullable=False, default=0)  # minor currency units

    # Status
    is_active = Column(Boolean, default=True, index=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    # Relationships
    salon = relationship("Salon", back_populates="services")
    category = relationship("ServiceCategory", back_populates="services")

    def __repr__(self):
        return f"<Service(id={self.id}, name={self.name}, salon_id={self.salon_id})>"
