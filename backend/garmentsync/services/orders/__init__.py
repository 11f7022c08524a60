"""Order lifecycle and collaboration thread."""

from garmentsync.services.orders.service import (
    DashboardStats,
    OrderConflictError,
    OrderDetail,
    OrderNotFoundError,
    OrderService,
    OrderServiceError,
)

__all__ = [
    "DashboardStats",
    "OrderConflictError",
    "OrderDetail",
    "OrderNotFoundError",
    "OrderService",
    "OrderServiceError",
]
