"""
Order service orchestrating the order lifecycle and its collaboration thread.

This module implements the OrderService class for creating orders, changing
their status, posting updates and comments, and summarising activity for the
dashboard. After an update or comment is stored, every stakeholder of the
order is notified by email on a best-effort basis.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from garmentsync.core.logging import get_logger
from garmentsync.domain.enums import ActivityKind, OrderStatus
from garmentsync.domain.models import Comment, Order, OrderEntry, Stakeholder, Update
from garmentsync.repositories.base import DuplicateRecordError, Storage
from garmentsync.schemas.collaboration import EntryCreateRequest
from garmentsync.schemas.orders import OrderCreateRequest
from garmentsync.services.notifications.service import (
    NotificationDispatcher,
    NotificationServiceError,
)

logger = get_logger(__name__)


class OrderServiceError(Exception):
    """Base exception for order service errors."""

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.context = context


class OrderNotFoundError(OrderServiceError):
    """Raised when order is not found."""

    pass


class OrderConflictError(OrderServiceError):
    """Raised when an order id is already taken."""

    pass


@dataclass
class OrderDetail:
    """An order together with its updates, comments and stakeholders."""

    order: Order
    updates: list[Update] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)
    stakeholders: list[Stakeholder] = field(default_factory=list)
    next_status: Optional[OrderStatus] = None


@dataclass
class DashboardStats:
    total_orders: int
    active_orders: int
    completed_orders: int
    pending_updates: int
    messages_today: int
    total_stakeholders: int
    status_counts: dict[str, int]


class OrderService:
    """
    Order service orchestrating storage access and stakeholder notification.

    Attributes:
        storage: Storage backend for orders and their child records
        dispatcher: Notification dispatcher for stakeholder email
    """

    def __init__(self, storage: Storage, dispatcher: NotificationDispatcher):
        self.storage = storage
        self.dispatcher = dispatcher

    async def create_order(self, request: OrderCreateRequest) -> Order:
        """
        Create a new order.

        Raises:
            OrderConflictError: If the order id already exists
        """
        try:
            order = await self.storage.orders.create(
                order_id=request.id,
                buyer_name=request.buyer_name,
                style_number=request.style_number,
                quantity=request.quantity,
                estimated_delivery=request.estimated_delivery,
                buyer_email=request.buyer_email,
                status=request.status,
            )
        except DuplicateRecordError as e:
            raise OrderConflictError(
                f"Order {request.id} already exists", order_id=request.id
            ) from e

        logger.info(
            "Order created",
            order_id=order.id,
            buyer_name=order.buyer_name,
            status=order.status,
        )
        return order

    async def list_orders(self) -> list[Order]:
        return await self.storage.orders.list_all()

    async def get_order(self, order_id: str) -> Order:
        """
        Get an order by id.

        Raises:
            OrderNotFoundError: If order not found
        """
        order = await self.storage.orders.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(f"Order {order_id} not found", order_id=order_id)
        return order

    async def get_order_detail(self, order_id: str) -> OrderDetail:
        """
        Get an order with updates, comments and stakeholders embedded.

        Raises:
            OrderNotFoundError: If order not found
        """
        order = await self.get_order(order_id)
        return OrderDetail(
            order=order,
            updates=await self.storage.updates.list_by_order(order_id),
            comments=await self.storage.comments.list_by_order(order_id),
            stakeholders=await self.storage.stakeholders.list_by_order(order_id),
            next_status=OrderStatus.suggested_next(order.status),
        )

    async def update_order_status(self, order_id: str, status: str) -> Order:
        """
        Set an order's status.

        Any label is stored as given; there is no transition graph.

        Raises:
            OrderNotFoundError: If order not found
        """
        order = await self.storage.orders.update(order_id, status=status)
        if order is None:
            raise OrderNotFoundError(f"Order {order_id} not found", order_id=order_id)

        if not OrderStatus.is_recognized(status):
            logger.warning(
                "Order status set to unrecognized label",
                order_id=order_id,
                status=status,
            )
        logger.info("Order status updated", order_id=order_id, status=status)
        return order

    async def list_updates(self, order_id: str) -> list[Update]:
        await self.get_order(order_id)
        return await self.storage.updates.list_by_order(order_id)

    async def list_comments(self, order_id: str) -> list[Comment]:
        await self.get_order(order_id)
        return await self.storage.comments.list_by_order(order_id)

    async def post_update(self, order_id: str, request: EntryCreateRequest) -> Update:
        """
        Append a status update and notify the order's stakeholders.

        Raises:
            OrderNotFoundError: If order not found
        """
        order = await self.get_order(order_id)
        update = await self.storage.updates.create(
            order_id=order_id,
            message=request.message,
            author_name=request.author_name,
            author_role=request.author_role,
        )
        logger.info("Order update posted", order_id=order_id, update_id=update.id)

        await self._notify_stakeholders(order, ActivityKind.UPDATE, update)
        return update

    async def post_comment(self, order_id: str, request: EntryCreateRequest) -> Comment:
        """
        Append a comment and notify the order's stakeholders.

        Raises:
            OrderNotFoundError: If order not found
        """
        order = await self.get_order(order_id)
        comment = await self.storage.comments.create(
            order_id=order_id,
            message=request.message,
            author_name=request.author_name,
            author_role=request.author_role,
        )
        logger.info("Order comment posted", order_id=order_id, comment_id=comment.id)

        await self._notify_stakeholders(order, ActivityKind.COMMENT, comment)
        return comment

    async def get_dashboard_stats(self) -> DashboardStats:
        orders = await self.storage.orders.list_all()
        today = self.storage.clock().date()

        status_counts: dict[str, int] = {}
        completed = 0
        pending_updates = 0
        messages_today = 0

        for order in orders:
            status_counts[order.status] = status_counts.get(order.status, 0) + 1
            updates = await self.storage.updates.list_by_order(order.id)
            comments = await self.storage.comments.list_by_order(order.id)

            if order.status == OrderStatus.DELIVERED.value:
                completed += 1
            elif not updates:
                pending_updates += 1

            messages_today += sum(
                1 for entry in [*updates, *comments] if entry.created_at.date() == today
            )

        return DashboardStats(
            total_orders=len(orders),
            active_orders=len(orders) - completed,
            completed_orders=completed,
            pending_updates=pending_updates,
            messages_today=messages_today,
            total_stakeholders=await self.storage.stakeholders.count(),
            status_counts=status_counts,
        )

    async def _notify_stakeholders(
        self, order: Order, kind: ActivityKind, entry: OrderEntry
    ) -> None:
        stakeholders = await self.storage.stakeholders.list_by_order(order.id)
        if not stakeholders:
            return

        try:
            await self.dispatcher.notify_stakeholders(
                [s.email for s in stakeholders],
                order,
                kind,
                entry.message,
                entry.author_name,
                entry.author_role,
            )
        except NotificationServiceError as e:
            logger.warning(
                "Stakeholder notification failed",
                order_id=order.id,
                kind=kind.value,
                error=str(e),
            )
