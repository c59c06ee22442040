# ============================================================================
# FILE: app/services/appointment/appointment_repository.py
# Read-only access to booked intervals - no FastAPI dependencies
# ============================================================================
from sqlalchemy.orm import Session
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List, Optional, Tuple
from uuid import UUID
from zoneinfo import ZoneInfo

from app.models.appointment import Appointment, ACTIVE_STATUSES
from app.services.availability.domain import AppointmentInterval, as_utc


def local_day_bounds(day: date, tz: ZoneInfo) -> Tuple[datetime, datetime]:
    """UTC instants of local midnight on ``day`` and on the following day"""
    start = datetime.combine(day, time()).replace(tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time()).replace(tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


class AppointmentRepository:
    """Reads appointment intervals that hold seats in a salon."""

    @staticmethod
    def list_active_overlapping(
            db: Session,
            salon_id: UUID,
            range_start: datetime,
            range_end: datetime,
            exclude_ids: Optional[Iterable[UUID]] = None
    ) -> List[AppointmentInterval]:
        """
        Non-canceled appointments whose interval overlaps [range_start, range_end).

        Overlap rather than "starts within" so that an appointment running
        across midnight is seen on both local dates.
        """
        query = db.query(
            Appointment.id,
            Appointment.starts_at,
            Appointment.ends_at,
            Appointment.status
        ).filter(
            Appointment.salon_id == salon_id,
            Appointment.status.in_(ACTIVE_STATUSES),
            Appointment.starts_at < as_utc(range_end),
            Appointment.ends_at > as_utc(range_start)
        )

        excluded = list(exclude_ids or [])
        if excluded:
            query = query.filter(Appointment.id.notin_(excluded))

        rows = query.order_by(Appointment.starts_at.asc()).all()

        return [
            AppointmentInterval(
                id=row.id,
                start=as_utc(row.starts_at),
                end=as_utc(row.ends_at),
                status=row.status
            )
            for row in rows
        ]

    @staticmethod
    def list_for_local_day(
            db: Session,
            salon_id: UUID,
            day: date,
            tz: ZoneInfo,
            exclude_ids: Optional[Iterable[UUID]] = None
    ) -> List[AppointmentInterval]:
        """Seat-holding appointments touching a salon-local calendar day."""
        day_start, day_end = local_day_bounds(day, tz)
        return AppointmentRepository.list_active_overlapping(
            db, salon_id, day_start, day_end, exclude_ids=exclude_ids
        )
