# ============================================================================
# FILE: app/api/v1/public/availability.py
# Public, tenant-scoped availability endpoints - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, HTTPException, Query, Path, Request
from sqlalchemy.orm import Session, sessionmaker
from typing import List, Optional
from uuid import UUID
import logging

from app.config.database import get_db, get_session_factory
from app.core.exceptions import AvailabilityError, InvalidInputError, SalonNotFoundError
from app.schemas.availability import AvailabilityResponse, SlotCheckResponse
from app.services.availability.availability_service import AvailabilityQuery, AvailabilityService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/salons", tags=["public-availability"])


def _raise_for(error: AvailabilityError, request: Request, salon_slug: str):
    """Translate a domain error into an HTTP error, logging by severity"""
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    if isinstance(error, (InvalidInputError, SalonNotFoundError)):
        logger.info(f"[{correlation_id}] Availability request for {salon_slug} rejected: {error}")
    else:
        logger.warning(f"[{correlation_id}] Availability request for {salon_slug} failed: {error}")

    raise HTTPException(status_code=error.status_code, detail=str(error))


@router.get("/{salon_slug}/availability", response_model=AvailabilityResponse)
async def get_availability(
        request: Request,
        salon_slug: str = Path(..., description="Salon slug"),
        day: Optional[str] = Query(None, alias="date", description="Salon-local date, YYYY-MM-DD"),
        duration: Optional[str] = Query(None, description="Service duration in minutes"),
        granularity: Optional[str] = Query(None, description="Minutes between slot starts"),
        only_available: bool = Query(False, description="Drop unavailable slots from the list"),
        session_factory: sessionmaker = Depends(get_session_factory)
):
    """
    Get the bookable slots of a salon for one day.
    No authentication required.
    """
    if not day or not duration:
        raise HTTPException(
            status_code=400,
            detail="Missing required parameters: date and duration"
        )

    query = AvailabilityQuery(
        salon_slug=salon_slug,
        date=day,
        duration_minutes=duration,
        granularity_minutes=granularity
    )

    try:
        result = await AvailabilityService.compute_availability_async(query, session_factory)
    except AvailabilityError as e:
        _raise_for(e, request, salon_slug)
    except Exception:
        correlation_id = getattr(request.state, "correlation_id", "unknown")
        logger.exception(f"[{correlation_id}] Error fetching availability for salon {salon_slug}")
        raise HTTPException(status_code=500, detail="Failed to fetch availability")

    return AvailabilityResponse.from_result(result, only_available=only_available)


@router.get("/{salon_slug}/availability/check", response_model=SlotCheckResponse)
def check_availability(
        request: Request,
        salon_slug: str = Path(..., description="Salon slug"),
        day: Optional[str] = Query(None, alias="date", description="Salon-local date, YYYY-MM-DD"),
        time: Optional[str] = Query(None, description="Salon-local start time, HH:MM"),
        duration: Optional[str] = Query(None, description="Service duration in minutes"),
        exclude: List[UUID] = Query(default=[], description="Appointment IDs to leave out (rescheduling)"),
        db: Session = Depends(get_db)
):
    """
    Check whether one start time can still be booked.
    Intended for re-validation right before creating or moving an appointment.
    """
    try:
        result = AvailabilityService.check_slot(
            db=db,
            salon_slug=salon_slug,
            day=day,
            start_time=time,
            duration_minutes=duration,
            exclude_appointment_ids=exclude
        )
    except AvailabilityError as e:
        _raise_for(e, request, salon_slug)
    except Exception:
        correlation_id = getattr(request.state, "correlation_id", "unknown")
        logger.exception(f"[{correlation_id}] Error checking slot for salon {salon_slug}")
        raise HTTPException(status_code=500, detail="Failed to check availability")

    return SlotCheckResponse.from_result(result)
