"""
API v1 package initialization.

Collects every v1 router into ``api_router``, mounted under the configured
API prefix.
"""

from fastapi import APIRouter

from garmentsync.api.v1.dashboard import router as dashboard_router
from garmentsync.api.v1.media import router as media_router
from garmentsync.api.v1.notifications import router as notifications_router
from garmentsync.api.v1.orders import router as orders_router
from garmentsync.api.v1.stakeholders import router as stakeholders_router

api_router = APIRouter()
api_router.include_router(orders_router)
api_router.include_router(stakeholders_router)
api_router.include_router(media_router)
api_router.include_router(notifications_router)
api_router.include_router(dashboard_router)

__all__ = ["api_router"]
