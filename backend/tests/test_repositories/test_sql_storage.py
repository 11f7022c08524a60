"""
Tests for the SQLAlchemy storage backend against a SQLite file database.

The same contract as the in-memory backend applies: defaults on create,
fixed sort orders, merge-on-update and boolean delete results.
"""

from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from garmentsync.database.connection import create_engine, create_tables
from garmentsync.domain.enums import (
    AuthorRole,
    InboxNotificationType,
    MediaCategory,
    Permission,
    StakeholderRole,
)
from garmentsync.repositories.base import DuplicateRecordError
from garmentsync.repositories.sql import SqlStorage


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """Session factory bound to a fresh SQLite database with all tables."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'garmentsync.db'}")
    await create_tables(engine)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def sql_storage(session_factory, clock) -> AsyncGenerator[SqlStorage, None]:
    async with session_factory() as session:
        yield SqlStorage(session, clock=clock)


async def _create_order(storage: SqlStorage, order_id: str = "PO-1", **overrides):
    fields = {
        "buyer_name": "Fashion Forward Inc",
        "style_number": "FF-TEE-001",
        "quantity": 1200,
        "estimated_delivery": storage.clock(),
        "buyer_email": "buyer@fashionforward.com",
    }
    fields.update(overrides)
    return await storage.orders.create(order_id=order_id, **fields)


# ============================================================================
# Orders
# ============================================================================


class TestSqlOrderRepository:
    async def test_create_defaults_status(self, sql_storage):
        order = await _create_order(sql_storage)

        assert order.status == "received"
        assert order.quantity == 1200

    async def test_create_rejects_duplicate_id(self, sql_storage):
        await _create_order(sql_storage)

        with pytest.raises(DuplicateRecordError):
            await _create_order(sql_storage)

    async def test_list_all_newest_first(self, sql_storage, clock):
        for order_id in ("PO-A", "PO-B", "PO-C"):
            await _create_order(sql_storage, order_id)
            clock.advance(minutes=1)

        orders = await sql_storage.orders.list_all()

        assert [o.id for o in orders] == ["PO-C", "PO-B", "PO-A"]

    async def test_update_accepts_any_status_label(self, sql_storage, clock):
        await _create_order(sql_storage)
        later = clock.advance(hours=2)

        updated = await sql_storage.orders.update("PO-1", status="on_hold")

        assert updated.status == "on_hold"
        assert updated.updated_at == later
        assert await sql_storage.orders.update("missing", status="x") is None

    async def test_committed_rows_reload_as_utc(self, session_factory, clock):
        async with session_factory() as session:
            await _create_order(SqlStorage(session, clock=clock))
            await session.commit()

        async with session_factory() as session:
            order = await SqlStorage(session, clock=clock).orders.get_by_id("PO-1")

        assert order is not None
        assert order.created_at == clock()
        assert order.created_at.tzinfo is not None


# ============================================================================
# Collaboration records
# ============================================================================


class TestSqlCollaborationRepositories:
    async def test_updates_newest_first_and_comments_oldest_first(
        self, sql_storage, clock
    ):
        for hour, text in ((10, "ten"), (8, "eight"), (9, "nine")):
            clock.now = clock.now.replace(hour=hour)
            await sql_storage.updates.create(
                order_id="PO-1",
                message=text,
                author_name="Sarah",
                author_role=AuthorRole.MANUFACTURER,
            )
            await sql_storage.comments.create(
                order_id="PO-1",
                message=text,
                author_name="Mike",
                author_role=AuthorRole.BUYER,
            )

        updates = await sql_storage.updates.list_by_order("PO-1")
        comments = await sql_storage.comments.list_by_order("PO-1")

        assert [u.message for u in updates] == ["ten", "nine", "eight"]
        assert [c.message for c in comments] == ["eight", "nine", "ten"]
        assert comments[0].author_role is AuthorRole.BUYER

    async def test_stakeholder_lifecycle(self, sql_storage, clock):
        stakeholder = await sql_storage.stakeholders.create(
            order_id="PO-1", name="Jo Smith", email="jo@x.com"
        )
        assert stakeholder.role is StakeholderRole.BUYER_EMPLOYEE
        assert stakeholder.permissions is Permission.READ

        found = await sql_storage.stakeholders.find_by_email("PO-1", "jo@x.com")
        assert found is not None and found.id == stakeholder.id
        assert await sql_storage.stakeholders.find_by_email("PO-1", "JO@x.com") is None

        later = clock.advance(minutes=3)
        updated = await sql_storage.stakeholders.update(
            stakeholder.id, permissions=Permission.COMMENT
        )
        assert updated.permissions is Permission.COMMENT
        assert updated.updated_at == later

        assert await sql_storage.stakeholders.count() == 1
        assert await sql_storage.stakeholders.delete(stakeholder.id) is True
        assert await sql_storage.stakeholders.delete(stakeholder.id) is False
        assert await sql_storage.stakeholders.count() == 0


# ============================================================================
# Media and inbox
# ============================================================================


class TestSqlMediaAndInbox:
    async def test_media_filters(self, sql_storage, clock):
        await sql_storage.media.create(
            order_id="PO-1",
            filename="a.jpg",
            original_name="Front View.jpg",
            size=10,
            mime_type="image/jpeg",
            url="/uploads/a.jpg",
            category=MediaCategory.PRODUCT_PHOTOS,
            uploaded_by="Sarah",
        )
        clock.advance(minutes=1)
        drawing = await sql_storage.media.create(
            order_id="PO-1",
            filename="b.pdf",
            original_name="drawing.pdf",
            size=20,
            mime_type="application/pdf",
            url="/uploads/b.pdf",
            category=MediaCategory.TECHNICAL_DRAWINGS,
            uploaded_by="Sarah",
            description="Seam Allowances",
        )

        everything = await sql_storage.media.list_files(order_id="PO-1")
        searched = await sql_storage.media.list_files(search="seam")
        by_category = await sql_storage.media.list_files(
            category=MediaCategory.PRODUCT_PHOTOS
        )

        assert [f.filename for f in everything] == ["b.pdf", "a.jpg"]
        assert [f.id for f in searched] == [drawing.id]
        assert [f.filename for f in by_category] == ["a.jpg"]

    async def test_notification_mark_read(self, sql_storage):
        created = await sql_storage.notifications.create(
            type=InboxNotificationType.ORDER_UPDATE,
            title="Shipped",
            message="PO-1 left the factory",
            sender="system@garmentsync.app",
            recipient="sarah@x.com",
            order_id="PO-1",
        )
        assert created.is_read is False

        updated = await sql_storage.notifications.update(created.id, is_read=True)

        assert updated.is_read is True
        assert (await sql_storage.notifications.list_all())[0].id == created.id
