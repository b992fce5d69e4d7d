"""
API v1 Router

All API endpoints for the frontend.
"""

from fastapi import APIRouter

from smartsignal.api.v1.endpoints import signals

router = APIRouter()

# Include all endpoint routers
router.include_router(signals.router, prefix="/signals", tags=["Signals"])
