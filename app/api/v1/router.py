"""
API v1 router setup
Only public, tenant-scoped routes are served here
"""
from fastapi import APIRouter

from app.api.v1.public import availability

api_v1_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (No authentication required)
# ============================================================================
api_v1_router.include_router(
    availability.router,
    prefix="/public",
    tags=["Public"]
)


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """
    API information and available endpoints.
    """
    return {
        "version": "1.0",
        "endpoints": {
            "availability": "/api/v1/public/salons/{salon_slug}/availability?date=YYYY-MM-DD&duration=60",
            "slot_check": "/api/v1/public/salons/{salon_slug}/availability/check?date=YYYY-MM-DD&time=HH:MM&duration=60"
        }
    }
