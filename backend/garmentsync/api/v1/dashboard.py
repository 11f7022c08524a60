"""Dashboard summary endpoint."""

from dataclasses import asdict

from fastapi import APIRouter

from garmentsync.api.deps import OrderServiceDep
from garmentsync.schemas.orders import DashboardStatsResponse

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    "/stats",
    response_model=DashboardStatsResponse,
    summary="Dashboard statistics",
)
async def get_dashboard_stats(service: OrderServiceDep) -> DashboardStatsResponse:
    stats = await service.get_dashboard_stats()
    return DashboardStatsResponse(**asdict(stats))
