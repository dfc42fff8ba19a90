"""
API v1 Router

All API endpoints.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import signal

router = APIRouter()

# Include all endpoint routers
router.include_router(signal.router, prefix="/signal", tags=["Signals"])
