"""
SQLAlchemy implementation of the storage interface.

One ``SqlStorage`` wraps one ``AsyncSession`` and lives for a single
request; the session is committed by ``get_session`` when the request
finishes. Repositories only ``flush`` so that generated values and
constraint violations surface inside the call that caused them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional, Sequence, Type

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from garmentsync.core.logging import get_logger
from garmentsync.database.models import (
    CommentRow,
    InboxNotificationRow,
    MediaFileRow,
    OrderRow,
    StakeholderRow,
    UpdateRow,
)
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


def _column_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


class _SqlRepository:
    model: Type[Any]

    def __init__(self, session: AsyncSession, clock: Clock):
        self.session = session
        self._clock = clock

    async def get_by_id(self, record_id: str):
        row = await self.session.get(self.model, record_id)
        return row.to_domain() if row is not None else None

    async def _add(self, row):
        self.session.add(row)
        await self.session.flush()
        return row.to_domain()

    async def _merge(self, record_id: str, changes: dict[str, Any], touch: bool):
        row = await self.session.get(self.model, record_id)
        if row is None:
            return None
        for key, value in changes.items():
            setattr(row, key, _column_value(value))
        if touch:
            row.updated_at = self._clock()
        await self.session.flush()
        return row.to_domain()

    async def _delete(self, record_id: str) -> bool:
        row = await self.session.get(self.model, record_id)
        if row is None:
            return False
        await self.session.delete(row)
        await self.session.flush()
        return True

    async def _select(self, statement) -> list[Any]:
        result = await self.session.execute(statement)
        return [row.to_domain() for row in result.scalars().all()]


class SqlOrderRepository(_SqlRepository, AbstractOrderRepository):
    model = OrderRow

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
        if await self.session.get(OrderRow, order_id) is not None:
            raise DuplicateRecordError("Order id already exists", order_id=order_id)

        now = self._clock()
        row = OrderRow(
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
        try:
            return await self._add(row)
        except IntegrityError as e:
            logger.warning("Order insert rejected", order_id=order_id, error=str(e))
            raise DuplicateRecordError(
                "Order id already exists", order_id=order_id
            ) from e

    async def list_all(self) -> list[Order]:
        return await self._select(select(OrderRow).order_by(OrderRow.created_at.desc()))

    async def update(self, order_id: str, **changes: Any) -> Optional[Order]:
        return await self._merge(order_id, changes, touch=True)


class SqlUpdateRepository(_SqlRepository, AbstractUpdateRepository):
    model = UpdateRow

    async def create(
        self,
        *,
        order_id: str,
        message: str,
        author_name: str,
        author_role: AuthorRole,
    ) -> Update:
        return await self._add(
            UpdateRow(
                order_id=order_id,
                message=message,
                author_name=author_name,
                author_role=AuthorRole(author_role).value,
                created_at=self._clock(),
            )
        )

    async def list_by_order(self, order_id: str) -> list[Update]:
        return await self._select(
            select(UpdateRow)
            .where(UpdateRow.order_id == order_id)
            .order_by(UpdateRow.created_at.desc())
        )


class SqlCommentRepository(_SqlRepository, AbstractCommentRepository):
    model = CommentRow

    async def create(
        self,
        *,
        order_id: str,
        message: str,
        author_name: str,
        author_role: AuthorRole,
    ) -> Comment:
        return await self._add(
            CommentRow(
                order_id=order_id,
                message=message,
                author_name=author_name,
                author_role=AuthorRole(author_role).value,
                created_at=self._clock(),
            )
        )

    async def list_by_order(self, order_id: str) -> list[Comment]:
        return await self._select(
            select(CommentRow)
            .where(CommentRow.order_id == order_id)
            .order_by(CommentRow.created_at.asc())
        )


class SqlStakeholderRepository(_SqlRepository, AbstractStakeholderRepository):
    model = StakeholderRow

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
        return await self._add(
            StakeholderRow(
                order_id=order_id,
                name=name,
                email=email,
                role=role.value,
                permissions=permissions.value,
                created_at=now,
                updated_at=now,
            )
        )

    async def list_by_order(self, order_id: str) -> list[Stakeholder]:
        return await self._select(
            select(StakeholderRow)
            .where(StakeholderRow.order_id == order_id)
            .order_by(StakeholderRow.created_at.asc())
        )

    async def find_by_email(self, order_id: str, email: str) -> Optional[Stakeholder]:
        found = await self._select(
            select(StakeholderRow)
            .where(StakeholderRow.order_id == order_id, StakeholderRow.email == email)
            .limit(1)
        )
        return found[0] if found else None

    async def count(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(StakeholderRow)
        )
        return result.scalar_one()

    async def update(self, stakeholder_id: str, **changes: Any) -> Optional[Stakeholder]:
        return await self._merge(stakeholder_id, changes, touch=True)

    async def delete(self, stakeholder_id: str) -> bool:
        return await self._delete(stakeholder_id)


class SqlMediaRepository(_SqlRepository, AbstractMediaRepository):
    model = MediaFileRow

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
        return await self._add(
            MediaFileRow(
                order_id=order_id,
                filename=filename,
                original_name=original_name,
                size=size,
                mime_type=mime_type,
                url=url,
                category=MediaCategory(category).value,
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
        statement = select(MediaFileRow)
        if order_id:
            statement = statement.where(MediaFileRow.order_id == order_id)
        if category:
            statement = statement.where(
                MediaFileRow.category == MediaCategory(category).value
            )
        if search:
            pattern = f"%{search.lower()}%"
            statement = statement.where(
                or_(
                    func.lower(MediaFileRow.original_name).like(pattern),
                    func.lower(MediaFileRow.description).like(pattern),
                )
            )
        return await self._select(statement.order_by(MediaFileRow.uploaded_at.desc()))

    async def delete(self, media_id: str) -> bool:
        return await self._delete(media_id)


class SqlNotificationRepository(_SqlRepository, AbstractNotificationRepository):
    model = InboxNotificationRow

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
        return await self._add(
            InboxNotificationRow(
                type=InboxNotificationType(type).value,
                title=title,
                message=message,
                sender=sender,
                recipient=recipient,
                order_id=order_id,
                email_id=email_id,
                is_read=False,
                created_at=self._clock(),
            )
        )

    async def list_all(self) -> list[InboxNotification]:
        return await self._select(
            select(InboxNotificationRow).order_by(InboxNotificationRow.created_at.desc())
        )

    async def update(
        self, notification_id: str, **changes: Any
    ) -> Optional[InboxNotification]:
        return await self._merge(notification_id, changes, touch=False)


class SqlStorage(Storage):
    """All SQL repositories bound to one session."""

    def __init__(self, session: AsyncSession, clock: Clock = utcnow):
        self.session = session
        self.clock = clock
        self.orders = SqlOrderRepository(session, clock)
        self.updates = SqlUpdateRepository(session, clock)
        self.comments = SqlCommentRepository(session, clock)
        self.stakeholders = SqlStakeholderRepository(session, clock)
        self.media = SqlMediaRepository(session, clock)
        self.notifications = SqlNotificationRepository(session, clock)
