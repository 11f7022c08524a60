"""
Test suite for the order service.

Tests order creation and status changes, the update/comment thread with its
stakeholder notifications, and the dashboard counters.
"""

from datetime import timedelta

import pytest

from garmentsync.domain.enums import AuthorRole, OrderStatus
from garmentsync.schemas.collaboration import CommentCreateRequest, UpdateCreateRequest
from garmentsync.schemas.orders import OrderCreateRequest
from garmentsync.services.orders.service import (
    OrderConflictError,
    OrderNotFoundError,
    OrderService,
)


# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def service(storage, dispatcher) -> OrderService:
    return OrderService(storage, dispatcher)


def _create_request(order_id: str = "PO-2024-001", **overrides) -> OrderCreateRequest:
    data = {
        "id": order_id,
        "buyerName": "Fashion Forward Inc",
        "styleNumber": "FF-TEE-001",
        "quantity": 5000,
        "estimatedDelivery": "2025-06-01T00:00:00Z",
        "buyerEmail": "buyer@fashionforward.com",
    }
    data.update(overrides)
    return OrderCreateRequest.model_validate(data)


def _update(message: str = "Cutting started") -> UpdateCreateRequest:
    return UpdateCreateRequest(
        message=message,
        author_name="Sarah Chen",
        author_role=AuthorRole.MANUFACTURER,
    )


def _comment(message: str = "Thanks for the update") -> CommentCreateRequest:
    return CommentCreateRequest(
        message=message,
        author_name="Mike Johnson",
        author_role=AuthorRole.BUYER,
    )


async def _add_stakeholder(storage, order_id: str, email: str):
    return await storage.stakeholders.create(
        order_id=order_id, name=email.split("@")[0], email=email
    )


# ============================================================================
# UNIT TESTS - Order Lifecycle
# ============================================================================


class TestOrderLifecycle:
    """Test suite for creating and updating orders."""

    async def test_create_order_defaults_to_received(self, service):
        order = await service.create_order(_create_request())

        assert order.status == OrderStatus.RECEIVED.value
        assert order.quantity == 5000
        assert order.estimated_delivery.tzinfo is not None

    async def test_create_order_duplicate_id_conflicts(self, service):
        await service.create_order(_create_request())

        with pytest.raises(OrderConflictError) as exc_info:
            await service.create_order(_create_request())

        assert exc_info.value.context["order_id"] == "PO-2024-001"

    async def test_get_missing_order_raises(self, service):
        with pytest.raises(OrderNotFoundError):
            await service.get_order("nope")

    async def test_status_change_accepts_any_label(self, service, make_order):
        """
        Test unrecognized status labels are stored as given.

        There is no transition graph: an order may jump backwards or to a
        label outside the known lifecycle.
        """
        await make_order("PO-1", status="shipped")

        backwards = await service.update_order_status("PO-1", "received")
        custom = await service.update_order_status("PO-1", "awaiting_fabric")

        assert backwards.status == "received"
        assert custom.status == "awaiting_fabric"
        assert (await service.get_order("PO-1")).status == "awaiting_fabric"

    async def test_status_change_missing_order_raises(self, service):
        with pytest.raises(OrderNotFoundError):
            await service.update_order_status("nope", "shipped")

    async def test_detail_embeds_thread_and_suggests_next_status(
        self, service, make_order, storage, clock
    ):
        await make_order("PO-1", status="in_production")
        await service.post_update("PO-1", _update("first"))
        clock.advance(minutes=1)
        await service.post_update("PO-1", _update("second"))
        await service.post_comment("PO-1", _comment())
        await _add_stakeholder(storage, "PO-1", "jo@x.com")

        detail = await service.get_order_detail("PO-1")

        assert [u.message for u in detail.updates] == ["second", "first"]
        assert len(detail.comments) == 1
        assert [s.email for s in detail.stakeholders] == ["jo@x.com"]
        assert detail.next_status is OrderStatus.QUALITY_CHECK

    async def test_detail_has_no_next_status_for_custom_label(self, service, make_order):
        await make_order("PO-1", status="on_hold")

        detail = await service.get_order_detail("PO-1")

        assert detail.next_status is None


# ============================================================================
# UNIT TESTS - Updates, Comments and Notifications
# ============================================================================


class TestOrderThread:
    """Test suite for posting to an order and notifying stakeholders."""

    async def test_post_update_without_stakeholders_sends_nothing(
        self, service, make_order, transport
    ):
        await make_order("PO-1")

        update = await service.post_update("PO-1", _update())

        assert update.order_id == "PO-1"
        assert transport.sent == []

    async def test_post_update_notifies_every_stakeholder(
        self, service, make_order, storage, transport
    ):
        await make_order("PO-1")
        await _add_stakeholder(storage, "PO-1", "a@x.com")
        await _add_stakeholder(storage, "PO-1", "b@x.com")
        await _add_stakeholder(storage, "PO-2", "other@x.com")

        await service.post_update("PO-1", _update("Fabric arrived"))

        assert transport.recipients == ["a@x.com", "b@x.com"]
        email = transport.sent[0]
        assert email.subject == "Order PO-1 - New update"
        assert "Fabric arrived" in email.text_body
        assert "http://localhost:5000/order/PO-1" in email.html_body

    async def test_post_comment_subject_names_comment(
        self, service, make_order, storage, transport
    ):
        await make_order("PO-1")
        await _add_stakeholder(storage, "PO-1", "a@x.com")

        await service.post_comment("PO-1", _comment())

        assert transport.sent[0].subject == "Order PO-1 - New comment"

    async def test_notification_failure_does_not_fail_post(
        self, service, make_order, storage, transport
    ):
        """
        Test a broken mail transport never fails an update.

        The update is stored and returned even though no stakeholder could
        be reached.
        """
        await make_order("PO-1")
        await _add_stakeholder(storage, "PO-1", "a@x.com")
        transport.fail_all = True

        update = await service.post_update("PO-1", _update())

        assert await storage.updates.get_by_id(update.id) == update

    async def test_partial_notification_failure_still_reaches_others(
        self, service, make_order, storage, transport
    ):
        await make_order("PO-1")
        for email in ("a@x.com", "b@x.com", "c@x.com"):
            await _add_stakeholder(storage, "PO-1", email)
        transport.fail_for = {"b@x.com"}

        await service.post_comment("PO-1", _comment())

        assert transport.recipients == ["a@x.com", "c@x.com"]

    async def test_post_to_missing_order_raises(self, service, storage):
        with pytest.raises(OrderNotFoundError):
            await service.post_update("ghost", _update())
        with pytest.raises(OrderNotFoundError):
            await service.post_comment("ghost", _comment())

        assert await storage.updates.list_by_order("ghost") == []

    async def test_list_thread_for_missing_order_raises(self, service):
        with pytest.raises(OrderNotFoundError):
            await service.list_updates("ghost")
        with pytest.raises(OrderNotFoundError):
            await service.list_comments("ghost")


# ============================================================================
# UNIT TESTS - Dashboard
# ============================================================================


class TestDashboardStats:
    async def test_empty_store(self, service):
        stats = await service.get_dashboard_stats()

        assert stats.total_orders == 0
        assert stats.active_orders == 0
        assert stats.messages_today == 0
        assert stats.status_counts == {}

    async def test_counts(self, service, make_order, storage, clock):
        await make_order("PO-1", status="delivered")
        await make_order("PO-2", status="in_production")
        await make_order("PO-3")
        await make_order("PO-4", status="in_production")
        await _add_stakeholder(storage, "PO-1", "a@x.com")
        await _add_stakeholder(storage, "PO-2", "b@x.com")

        # Yesterday's update counts towards PO-2 having updates, not today's messages
        clock.now = clock.now - timedelta(days=1)
        await service.post_update("PO-2", _update("yesterday"))
        clock.advance(days=1)
        await service.post_comment("PO-3", _comment("today"))
        await service.post_update("PO-4", _update("today"))

        stats = await service.get_dashboard_stats()

        assert stats.total_orders == 4
        assert stats.completed_orders == 1
        assert stats.active_orders == 3
        assert stats.pending_updates == 1
        assert stats.messages_today == 2
        assert stats.total_stakeholders == 2
        assert stats.status_counts == {
            "delivered": 1,
            "in_production": 2,
            "received": 1,
        }
