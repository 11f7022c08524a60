"""
In-memory implementation of the storage interface.

Everything lives in plain dicts keyed by record id for the lifetime of the
process; restarting the server resets it. There is no locking: concurrent
writers to the same record race and the last write wins.

To swap in the relational backend set ``APP_STORAGE_BACKEND=sql``; nothing
in the services or API layer changes.
"""

from dataclasses import replace
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Any, Callable, Generic, Iterable, Optional, Sequence, TypeVar

from garmentsync.core.logging import get_logger
from garmentsync.domain.enums import (
    AuthorRole,
    InboxNotificationType,
    MediaCategory,
    Permission,
    StakeholderRole,
)
from garmentsync.domain.models import (
    Comment,
    InboxNotification,
    MediaFile,
    Order,
    Stakeholder,
    Update,
    apply_order_defaults,
    apply_stakeholder_defaults,
    new_id,
    utcnow,
)
from garmentsync.repositories.base import (
    AbstractCommentRepository,
    AbstractMediaRepository,
    AbstractNotificationRepository,
    AbstractOrderRepository,
    AbstractStakeholderRepository,
    AbstractUpdateRepository,
    DuplicateRecordError,
    Storage,
)

logger = get_logger(__name__)

Clock = Callable[[], datetime]
R = TypeVar("R")


# ---------------------------------------------------------------------------
# Generic in-memory store
# ---------------------------------------------------------------------------

class _Store(dict, Generic[R]):
    """A plain dict with typed get/save/delete helpers."""

    def fetch(self, key: str) -> Optional[R]:
        return self.get(key)

    def put(self, obj: R) -> R:
        self[obj.id] = obj
        return obj

    def remove(self, key: str) -> bool:
        return self.pop(key, None) is not None

    def all(self) -> list[R]:
        return list(self.values())


def _newest_first(records: Iterable[R], key: Callable[[R], datetime]) -> list[R]:
    """Sort by ``key`` descending; equal timestamps list the later insert first."""
    return sorted(reversed(list(records)), key=key, reverse=True)


class _ClockedRepository:
    def __init__(self, clock: Clock):
        self._clock = clock
        self._s: _Store = _Store()

    async def get_by_id(self, record_id: str):
        return self._s.fetch(record_id)

    def _merge(self, record_id: str, changes: dict[str, Any], touch: bool):
        current = self._s.fetch(record_id)
        if current is None:
            return None
        if touch:
            changes = {**changes, "updated_at": self._clock()}
        return self._s.put(replace(current, **changes))


# ---------------------------------------------------------------------------
# Repository implementations
# ---------------------------------------------------------------------------

class InMemoryOrderRepository(_ClockedRepository, AbstractOrderRepository):
    async def create(
        self,
        *,
        order_id: str,
        buyer_name: str,
        style_number: str,
        quantity: int,
        estimated_delivery: datetime,
        buyer_email: str,
        status: Optional[str] = None,
    ) -> Order:
        if order_id in self._s:
            raise DuplicateRecordError("Order id already exists", order_id=order_id)
        now = self._clock()
        return self._s.put(
            Order(
                id=order_id,
                buyer_name=buyer_name,
                style_number=style_number,
                quantity=quantity,
                estimated_delivery=estimated_delivery,
                buyer_email=buyer_email,
                status=apply_order_defaults(status),
                created_at=now,
                updated_at=now,
            )
        )

    async def list_all(self) -> list[Order]:
        return _newest_first(self._s.all(), key=lambda o: o.created_at)

    async def update(self, order_id: str, **changes: Any) -> Optional[Order]:
        return self._merge(order_id, changes, touch=True)


class InMemoryUpdateRepository(_ClockedRepository, AbstractUpdateRepository):
    async def create(
        self,
        *,
        order_id: str,
        message: str,
        author_name: str,
        author_role: AuthorRole,
    ) -> Update:
        return self._s.put(
            Update(
                id=new_id(),
                order_id=order_id,
                message=message,
                author_name=author_name,
                author_role=AuthorRole(author_role),
                created_at=self._clock(),
            )
        )

    async def list_by_order(self, order_id: str) -> list[Update]:
        return _newest_first(
            (u for u in self._s.all() if u.order_id == order_id),
            key=lambda u: u.created_at,
        )


class InMemoryCommentRepository(_ClockedRepository, AbstractCommentRepository):
    async def create(
        self,
        *,
        order_id: str,
        message: str,
        author_name: str,
        author_role: AuthorRole,
    ) -> Comment:
        return self._s.put(
            Comment(
                id=new_id(),
                order_id=order_id,
                message=message,
                author_name=author_name,
                author_role=AuthorRole(author_role),
                created_at=self._clock(),
            )
        )

    async def list_by_order(self, order_id: str) -> list[Comment]:
        return sorted(
            (c for c in self._s.all() if c.order_id == order_id),
            key=lambda c: c.created_at,
        )


class InMemoryStakeholderRepository(_ClockedRepository, AbstractStakeholderRepository):
    async def create(
        self,
        *,
        order_id: str,
        name: str,
        email: str,
        role: Optional[StakeholderRole] = None,
        permissions: Optional[Permission] = None,
    ) -> Stakeholder:
        role, permissions = apply_stakeholder_defaults(role, permissions)
        now = self._clock()
        return self._s.put(
            Stakeholder(
                id=new_id(),
                order_id=order_id,
                name=name,
                email=email,
                role=role,
                permissions=permissions,
                created_at=now,
                updated_at=now,
            )
        )

    async def list_by_order(self, order_id: str) -> list[Stakeholder]:
        return sorted(
            (s for s in self._s.all() if s.order_id == order_id),
            key=lambda s: s.created_at,
        )

    async def find_by_email(self, order_id: str, email: str) -> Optional[Stakeholder]:
        return next(
            (s for s in self._s.all() if s.order_id == order_id and s.email == email),
            None,
        )

    async def count(self) -> int:
        return len(self._s)

    async def update(self, stakeholder_id: str, **changes: Any) -> Optional[Stakeholder]:
        return self._merge(stakeholder_id, changes, touch=True)

    async def delete(self, stakeholder_id: str) -> bool:
        return self._s.remove(stakeholder_id)


class InMemoryMediaRepository(_ClockedRepository, AbstractMediaRepository):
    async def create(
        self,
        *,
        order_id: str,
        filename: str,
        original_name: str,
        size: int,
        mime_type: str,
        url: str,
        category: MediaCategory,
        uploaded_by: str,
        description: Optional[str] = None,
    ) -> MediaFile:
        return self._s.put(
            MediaFile(
                id=new_id(),
                order_id=order_id,
                filename=filename,
                original_name=original_name,
                size=size,
                mime_type=mime_type,
                url=url,
                category=MediaCategory(category),
                uploaded_by=uploaded_by,
                uploaded_at=self._clock(),
                description=description,
            )
        )

    async def list_files(
        self,
        *,
        order_id: Optional[str] = None,
        category: Optional[MediaCategory] = None,
        search: Optional[str] = None,
    ) -> Sequence[MediaFile]:
        files = self._s.all()
        if order_id:
            files = [f for f in files if f.order_id == order_id]
        if category:
            files = [f for f in files if f.category == category]
        if search:
            needle = search.lower()
            files = [
                f
                for f in files
                if needle in f.original_name.lower()
                or needle in (f.description or "").lower()
            ]
        return _newest_first(files, key=lambda f: f.uploaded_at)

    async def delete(self, media_id: str) -> bool:
        return self._s.remove(media_id)


class InMemoryNotificationRepository(_ClockedRepository, AbstractNotificationRepository):
    async def create(
        self,
        *,
        type: InboxNotificationType,
        title: str,
        message: str,
        sender: str,
        recipient: str,
        order_id: Optional[str] = None,
        email_id: Optional[str] = None,
    ) -> InboxNotification:
        return self._s.put(
            InboxNotification(
                id=new_id(),
                type=InboxNotificationType(type),
                title=title,
                message=message,
                sender=sender,
                recipient=recipient,
                is_read=False,
                created_at=self._clock(),
                order_id=order_id,
                email_id=email_id,
            )
        )

    async def list_all(self) -> list[InboxNotification]:
        return _newest_first(self._s.all(), key=lambda n: n.created_at)

    async def update(
        self, notification_id: str, **changes: Any
    ) -> Optional[InboxNotification]:
        return self._merge(notification_id, changes, touch=False)


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

class InMemoryStorage(Storage):
    """All in-memory repositories sharing one clock."""

    def __init__(self, clock: Clock = utcnow):
        self.clock = clock
        self.orders = InMemoryOrderRepository(clock)
        self.updates = InMemoryUpdateRepository(clock)
        self.comments = InMemoryCommentRepository(clock)
        self.stakeholders = InMemoryStakeholderRepository(clock)
        self.media = InMemoryMediaRepository(clock)
        self.notifications = InMemoryNotificationRepository(clock)


def seed_demo_data(storage: InMemoryStorage) -> None:
    """
    Load the static media files and inbox entries shown by the demo client.

    Records are inserted straight into the stores so that their timestamps
    can sit in the past.
    """
    now = storage.clock()

    demo_media = [
        MediaFile(
            id="media-1",
            order_id="ORD-2024-001",
            filename="summer-tee-front.jpg",
            original_name="Summer Tee - Front.jpg",
            size=2_457_600,
            mime_type="image/jpeg",
            url="/uploads/summer-tee-front.jpg",
            category=MediaCategory.PRODUCT_PHOTOS,
            uploaded_by="Sarah Chen",
            uploaded_at=now - timedelta(days=2),
            description="Front view of the approved sample",
        ),
        MediaFile(
            id="media-2",
            order_id="ORD-2024-001",
            filename="summer-tee-techpack.pdf",
            original_name="Summer Tee Tech Pack.pdf",
            size=1_048_576,
            mime_type="application/pdf",
            url="/uploads/summer-tee-techpack.pdf",
            category=MediaCategory.TECHNICAL_DRAWINGS,
            uploaded_by="Mike Johnson",
            uploaded_at=now - timedelta(days=5),
            description="Measurements and stitching details",
        ),
        MediaFile(
            id="media-3",
            order_id="ORD-2024-002",
            filename="uniform-fabric-spec.pdf",
            original_name="Uniform Fabric Specification.pdf",
            size=524_288,
            mime_type="application/pdf",
            url="/uploads/uniform-fabric-spec.pdf",
            category=MediaCategory.SPECIFICATIONS,
            uploaded_by="Sarah Chen",
            uploaded_at=now - timedelta(days=1),
            description="Fabric weight and colour fastness requirements",
        ),
    ]
    demo_notifications = [
        InboxNotification(
            id="notif-1",
            type=InboxNotificationType.EMAIL,
            title="Question about delivery window",
            message="Can the first 2,000 units ship a week earlier?",
            sender="mike@fashionforward.com",
            recipient="sarah@garmentworks.com",
            is_read=False,
            created_at=now - timedelta(hours=3),
            order_id="ORD-2024-001",
            email_id="email-1",
        ),
        InboxNotification(
            id="notif-2",
            type=InboxNotificationType.ORDER_UPDATE,
            title="Order ORD-2024-002 moved to quality check",
            message="Quality inspection started for the corporate uniform run.",
            sender="system@garmentsync.app",
            recipient="sarah@garmentworks.com",
            is_read=False,
            created_at=now - timedelta(hours=20),
            order_id="ORD-2024-002",
        ),
        InboxNotification(
            id="notif-3",
            type=InboxNotificationType.SYSTEM,
            title="Welcome to GarmentSync",
            message="Invite your buyers and factory team to start collaborating.",
            sender="system@garmentsync.app",
            recipient="sarah@garmentworks.com",
            is_read=True,
            created_at=now - timedelta(days=7),
        ),
    ]

    for media_file in demo_media:
        storage.media._s.put(media_file)
    for notification in demo_notifications:
        storage.notifications._s.put(notification)

    logger.info(
        "Demo data seeded",
        media_files=len(demo_media),
        notifications=len(demo_notifications),
    )


@lru_cache
def get_memory_storage(seed: bool = True) -> InMemoryStorage:
    """Process-wide in-memory storage shared by every request."""
    storage = InMemoryStorage()
    if seed:
        seed_demo_data(storage)
    return storage
