"""
Pytest configuration and shared test fixtures.

This module configures the application for tests and provides shared
fixtures: a controllable clock, a fresh in-memory storage per test, an email
transport that records instead of sending, and a TestClient wired to both
through FastAPI dependency overrides.
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Generator

# Settings are read once at import time; configure before importing the app.
os.environ["APP_ENVIRONMENT"] = "test"
os.environ["APP_STORAGE_BACKEND"] = "memory"
os.environ["APP_EMAIL_BACKEND"] = "console"
os.environ["APP_RATE_LIMIT_ENABLED"] = "false"
os.environ["APP_LOG_LEVEL"] = "WARNING"
os.environ["APP_MEDIA_DIR"] = tempfile.mkdtemp(prefix="garmentsync-media-")

import pytest
from fastapi.testclient import TestClient

from garmentsync.api.deps import get_dispatcher, get_storage
from garmentsync.core.config import get_settings
from garmentsync.domain.models import Order
from garmentsync.main import app
from garmentsync.repositories.memory import InMemoryStorage
from garmentsync.services.notifications.service import NotificationDispatcher
from garmentsync.services.notifications.transports import (
    EmailTransport,
    OutgoingEmail,
    TransportError,
)


# ============================================================================
# Test Doubles
# ============================================================================


class FakeClock:
    """Clock returning a fixed instant until moved with ``advance``."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: Any) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class RecordingTransport(EmailTransport):
    """Keeps every delivered message; fails for addresses in ``fail_for``."""

    name = "recording"

    def __init__(self) -> None:
        self.sent: list[OutgoingEmail] = []
        self.fail_for: set[str] = set()
        self.fail_all = False

    def deliver(self, email: OutgoingEmail) -> str:
        if self.fail_all or email.to in self.fail_for:
            raise TransportError(
                f"Mailbox {email.to} unavailable",
                transport=self.name,
                recipient=email.to,
            )
        self.sent.append(email)
        return f"msg-{len(self.sent)}"

    @property
    def recipients(self) -> list[str]:
        return [email.to for email in self.sent]


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def clock() -> FakeClock:
    """
    Controllable clock shared by storage and services.

    Starts at 2025-03-05 09:00 UTC. Tests call ``clock.advance(minutes=1)``
    between writes to get distinct, ordered timestamps.
    """
    return FakeClock(datetime(2025, 3, 5, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def storage(clock: FakeClock) -> InMemoryStorage:
    """Empty in-memory storage, isolated per test."""
    return InMemoryStorage(clock)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def dispatcher(transport: RecordingTransport) -> NotificationDispatcher:
    """Notification dispatcher delivering through the recording transport."""
    return NotificationDispatcher(transport, settings=get_settings())


@pytest.fixture
def make_order(
    storage: InMemoryStorage,
) -> Callable[..., Awaitable[Order]]:
    """
    Factory creating orders directly in storage.

    Example:
        async def test_something(make_order):
            order = await make_order("PO-1", status="shipped")
    """

    async def _make(order_id: str = "PO-2024-001", **overrides: Any) -> Order:
        fields: dict[str, Any] = {
            "buyer_name": "Fashion Forward Inc",
            "style_number": "FF-TEE-001",
            "quantity": 5000,
            "estimated_delivery": datetime(2025, 6, 1, tzinfo=timezone.utc),
            "buyer_email": "buyer@fashionforward.com",
            "status": None,
        }
        fields.update(overrides)
        return await storage.orders.create(order_id=order_id, **fields)

    return _make


@pytest.fixture
def order_payload() -> Callable[..., dict[str, Any]]:
    """Factory for camelCase order creation bodies."""

    def _payload(order_id: str = "PO-2024-001", **overrides: Any) -> dict[str, Any]:
        body: dict[str, Any] = {
            "id": order_id,
            "buyerName": "Fashion Forward Inc",
            "styleNumber": "FF-TEE-001",
            "quantity": 5000,
            "estimatedDelivery": "2025-06-01T00:00:00Z",
            "buyerEmail": "buyer@fashionforward.com",
        }
        body.update(overrides)
        return body

    return _payload


@pytest.fixture
def test_client(
    storage: InMemoryStorage,
    dispatcher: NotificationDispatcher,
) -> Generator[TestClient, None, None]:
    """
    Create a synchronous test client for the FastAPI application.

    Storage and the notification dispatcher are replaced with the per-test
    fixtures, so requests never touch a database or a mail server and tests
    can inspect ``storage`` and ``transport`` directly.

    Yields:
        TestClient: Synchronous test client for FastAPI app

    Example:
        def test_health_endpoint(test_client):
            response = test_client.get("/health")
            assert response.status_code == 200
    """
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
