# app/services/tenant/tenant_service.py
"""Resolves tenant slugs to salon configuration"""
from typing import Dict, Optional
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from sqlalchemy.orm import Session
import logging

from app.core.exceptions import SalonNotFoundError
from app.models.salon import Salon
from app.models.availability import BusinessHours, SalonClosure
from app.services.availability.domain import ClosureRange, DailyHours, SalonConfig

logger = logging.getLogger(__name__)

# 0=Monday ... 6=Sunday
DEFAULT_BUSINESS_HOURS = [
    {"day_of_week": 0, "open_time": "09:00", "close_time": "17:00"},
    {"day_of_week": 1, "open_time": "09:00", "close_time": "17:00"},
    {"day_of_week": 2, "open_time": "09:00", "close_time": "17:00"},
    {"day_of_week": 3, "open_time": "09:00", "close_time": "17:00"},
    {"day_of_week": 4, "open_time": "09:00", "close_time": "17:00"},
    {"day_of_week": 5, "open_time": "09:00", "close_time": "15:00"},
    {"day_of_week": 6, "open_time": "10:00", "close_time": "16:00", "is_closed": True},
]


class TenantService:
    """Handles salon lookup and tenant configuration"""

    @staticmethod
    def get_salon_by_slug(db: Session, slug: str) -> Optional[Salon]:
        """Get an active salon by slug"""
        return db.query(Salon).filter(
            Salon.slug == slug,
            Salon.is_active.is_(True)
        ).first()

    @staticmethod
    def get_salon_config(db: Session, slug: str) -> SalonConfig:
        """
        Load everything the availability engine needs for one salon.

        Raises:
            SalonNotFoundError: unknown or inactive slug
            ValueError: stored time zone or hours are not valid
        """
        salon = TenantService.get_salon_by_slug(db, slug)
        if not salon:
            raise SalonNotFoundError(slug)

        try:
            tz = ZoneInfo(salon.time_zone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Salon {salon.slug} has invalid time zone {salon.time_zone!r}") from e

        hours_rows = db.query(BusinessHours).filter(
            BusinessHours.salon_id == salon.id
        ).all()
        closure_rows = db.query(SalonClosure).filter(
            SalonClosure.salon_id == salon.id
        ).order_by(SalonClosure.start_date.asc()).all()

        return SalonConfig(
            id=salon.id,
            name=salon.name,
            slug=salon.slug,
            tz=tz,
            capacity=salon.capacity,
            granularity_minutes=salon.slot_granularity_minutes,
            weekly_hours=TenantService._weekly_hours(hours_rows),
            closures=tuple(
                ClosureRange(c.start_date, c.end_date, c.reason) for c in closure_rows
            )
        )

    @staticmethod
    def _weekly_hours(rows) -> Dict[int, Optional[DailyHours]]:
        weekly = {}
        for row in rows:
            if row.is_closed:
                weekly[row.day_of_week] = None
                continue
            weekly[row.day_of_week] = DailyHours.from_strings(row.open_time, row.close_time)
        return weekly

    @staticmethod
    def set_default_business_hours(db: Session, salon_id: UUID) -> int:
        """
        Install the default week for a salon.
        Existing rows are left untouched. Returns the number of rows added.
        """
        existing = {
            day for (day,) in db.query(BusinessHours.day_of_week).filter(
                BusinessHours.salon_id == salon_id
            ).all()
        }

        added = 0
        for hours in DEFAULT_BUSINESS_HOURS:
            if hours["day_of_week"] in existing:
                continue
            db.add(BusinessHours(
                salon_id=salon_id,
                day_of_week=hours["day_of_week"],
                open_time=hours["open_time"],
                close_time=hours["close_time"],
                is_closed=hours.get("is_closed", False)
            ))
            added += 1

        db.commit()
        logger.info(f"Installed {added} default business hour rows for salon {salon_id}")
        return added
