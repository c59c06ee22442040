# ===== app/services/availability/availability_service.py =====
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Iterable, List, Optional, Tuple, Union
from uuid import UUID
from functools import partial
import asyncio
import logging
import re

from sqlalchemy.orm import Session

from app.config.database import SessionLocal
from app.config.settings import get_settings
from app.core.exceptions import InvalidInputError, UpstreamUnavailableError
from app.services.appointment.appointment_repository import AppointmentRepository
from app.services.availability.capacity_filter import (
    apply_capacity,
    count_overlapping,
    is_within_capacity,
    seat_holders,
)
from app.services.availability.domain import SalonConfig, TimeSlot, parse_hhmm
from app.services.availability.slot_generator import generate_candidate_slots, localize
from app.services.tenant.tenant_service import TenantService

logger = logging.getLogger(__name__)

OUTSIDE_HOURS_REASON = "Appointment would fall outside business hours"
SALON_CLOSED_REASON = "Salon closed"
ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class AvailabilityQuery:
    """
    One availability request. Raw values are accepted so that parsing
    errors surface as input errors rather than framework errors.
    """
    salon_slug: str
    date: Union[str, date, None]
    duration_minutes: Union[str, int, None]
    granularity_minutes: Union[str, int, None] = None
    # None keeps the salon's own capacity; 0 means fully booked
    capacity_override: Optional[int] = None


@dataclass(frozen=True)
class AvailabilityResult:
    salon: SalonConfig
    date: date
    duration_minutes: int
    granularity_minutes: int
    capacity: Optional[int]
    slots: List[TimeSlot] = field(default_factory=list)

    @property
    def available_slots(self) -> List[TimeSlot]:
        return [slot for slot in self.slots if slot.available]


@dataclass(frozen=True)
class SlotCheckResult:
    available: bool
    capacity_used: int
    capacity_total: Optional[int]
    reason: Optional[str] = None


def parse_date(value) -> date:
    if value is None or value == "":
        raise InvalidInputError("Missing required parameter: date")
    if isinstance(value, datetime):
        raise InvalidInputError("date must be a calendar date, not a timestamp")
    if isinstance(value, date):
        return value
    text = str(value).strip()
    # fromisoformat alone also takes basic and week forms on newer Pythons
    if not ISO_DATE_PATTERN.match(text):
        raise InvalidInputError(f"Invalid date {value!r}, expected YYYY-MM-DD")
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise InvalidInputError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def parse_bounded_int(value, name: str, maximum: int) -> int:
    """Accept an int or a string of digits in 1..maximum"""
    if value is None or value == "":
        raise InvalidInputError(f"Missing required parameter: {name}")
    if isinstance(value, bool):
        raise InvalidInputError(f"{name} must be an integer")
    if isinstance(value, int):
        number = value
    else:
        try:
            number = int(str(value).strip())
        except ValueError:
            raise InvalidInputError(f"{name} must be an integer")

    if number <= 0:
        raise InvalidInputError(f"{name} must be a positive integer")
    if number > maximum:
        raise InvalidInputError(f"{name} must not exceed {maximum} minutes")
    return number


class AvailabilityService:
    """Computes bookable slots for a salon day"""

    @staticmethod
    def validate_query(query: AvailabilityQuery) -> Tuple[date, int, Optional[int]]:
        """Returns (date, duration, granularity-or-None); raises InvalidInputError"""
        settings = get_settings()

        target_date = parse_date(query.date)
        duration = parse_bounded_int(
            query.duration_minutes, "duration", settings.MAX_SERVICE_DURATION_MINUTES
        )

        granularity = None
        if query.granularity_minutes not in (None, ""):
            granularity = parse_bounded_int(
                query.granularity_minutes, "granularity", settings.MAX_SLOT_GRANULARITY_MINUTES
            )

        if query.capacity_override is not None and query.capacity_override < 0:
            raise InvalidInputError("capacity override must not be negative")

        return target_date, duration, granularity

    @staticmethod
    def resolve_granularity(salon: SalonConfig, requested: Optional[int]) -> int:
        if requested:
            return requested
        if salon.granularity_minutes:
            return salon.granularity_minutes
        return get_settings().DEFAULT_SLOT_GRANULARITY_MINUTES

    @staticmethod
    def resolve_capacity(salon: SalonConfig, override: Optional[int]) -> Optional[int]:
        return override if override is not None else salon.capacity

    @staticmethod
    def compute_availability(db: Session, query: AvailabilityQuery) -> AvailabilityResult:
        """
        Compute the annotated slot grid for one salon-local day.

        Algorithm:
            1. Validate the query (before touching the database)
            2. Resolve the tenant; unknown slugs stop here
            3. Build candidate slots in the salon zone
            4. Load seat-holding appointments overlapping that local day
            5. Annotate slots with availability and remaining capacity
        """
        target_date, duration, requested_granularity = AvailabilityService.validate_query(query)

        salon = TenantService.get_salon_config(db, query.salon_slug)
        granularity = AvailabilityService.resolve_granularity(salon, requested_granularity)
        capacity = AvailabilityService.resolve_capacity(salon, query.capacity_override)

        candidates = generate_candidate_slots(
            salon.hours_for(target_date), target_date, salon.tz, duration, granularity
        )

        if not candidates:
            logger.info(f"No candidate slots for salon {salon.slug} on {target_date}")
            return AvailabilityResult(
                salon=salon,
                date=target_date,
                duration_minutes=duration,
                granularity_minutes=granularity,
                capacity=capacity
            )

        appointments = AppointmentRepository.list_for_local_day(
            db, salon.id, target_date, salon.tz
        )
        slots = apply_capacity(candidates, appointments, capacity)

        logger.info(
            f"Computed {len(slots)} slots ({sum(1 for s in slots if s.available)} available) "
            f"for salon {salon.slug} on {target_date}"
        )

        return AvailabilityResult(
            salon=salon,
            date=target_date,
            duration_minutes=duration,
            granularity_minutes=granularity,
            capacity=capacity,
            slots=slots
        )

    @staticmethod
    def _compute_in_own_session(
            session_factory: Callable[[], Session],
            query: AvailabilityQuery
    ) -> AvailabilityResult:
        """Worker-thread body; the session is created, used and closed here only"""
        db = session_factory()
        try:
            return AvailabilityService.compute_availability(db, query)
        finally:
            db.close()

    @staticmethod
    async def compute_availability_async(
            query: AvailabilityQuery,
            session_factory: Optional[Callable[[], Session]] = None,
            timeout: Optional[float] = None
    ) -> AvailabilityResult:
        """
        Run the blocking computation in a worker thread, bounded by a timeout.

        The worker opens its own session from ``session_factory``, so a fetch
        abandoned on timeout never touches a session owned by the caller.
        Cancellation of the awaiting task propagates to the caller.
        """
        if session_factory is None:
            session_factory = SessionLocal
        if timeout is None:
            timeout = get_settings().AVAILABILITY_FETCH_TIMEOUT_SECONDS

        loop = asyncio.get_running_loop()
        work = loop.run_in_executor(
            None, partial(AvailabilityService._compute_in_own_session, session_factory, query)
        )

        try:
            return await asyncio.wait_for(work, timeout=timeout)
        except asyncio.TimeoutError:
            logger.error(f"Availability fetch for salon {query.salon_slug} timed out after {timeout}s")
            raise UpstreamUnavailableError("Availability lookup timed out")

    @staticmethod
    def check_slot(
            db: Session,
            salon_slug: str,
            day: Union[str, date, None],
            start_time: Optional[str],
            duration_minutes: Union[str, int, None],
            exclude_appointment_ids: Optional[Iterable[UUID]] = None
    ) -> SlotCheckResult:
        """
        Check whether one specific start time can still be booked.

        Used to re-validate a chosen slot at booking or reschedule time;
        ``exclude_appointment_ids`` removes the appointment being moved
        from the count.
        """
        settings = get_settings()
        target_date = parse_date(day)
        duration = parse_bounded_int(duration_minutes, "duration", settings.MAX_SERVICE_DURATION_MINUTES)
        if not start_time:
            raise InvalidInputError("Missing required parameter: time")
        try:
            start_minute = parse_hhmm(start_time)
        except ValueError as e:
            raise InvalidInputError(str(e))

        salon = TenantService.get_salon_config(db, salon_slug)
        capacity = salon.capacity

        hours = salon.hours_for(target_date)
        if hours is None:
            closure = salon.closure_for(target_date)
            reason = closure.reason if closure and closure.reason else SALON_CLOSED_REASON
            return SlotCheckResult(False, 0, capacity, reason)

        if start_minute < hours.open_minute or start_minute + duration > hours.close_minute:
            return SlotCheckResult(False, 0, capacity, OUTSIDE_HOURS_REASON)

        local_start = localize(target_date, start_minute, salon.tz)
        if local_start is None:
            raise InvalidInputError(f"{start_time} does not exist on {target_date} in {salon.time_zone}")

        start = local_start.astimezone(timezone.utc)
        end = start + timedelta(minutes=duration)
        closing = datetime.combine(target_date, datetime.min.time()) + timedelta(minutes=hours.close_minute)
        if end.astimezone(salon.tz).replace(tzinfo=None) > closing:
            return SlotCheckResult(False, 0, capacity, OUTSIDE_HOURS_REASON)

        appointments = seat_holders(AppointmentRepository.list_active_overlapping(
            db, salon.id, start, end, exclude_ids=exclude_appointment_ids
        ))
        used = count_overlapping(start, end, appointments)
        available = is_within_capacity(used, capacity)

        return SlotCheckResult(
            available=available,
            capacity_used=used,
            capacity_total=capacity,
            reason=None if available else "No availability at this time"
        )
