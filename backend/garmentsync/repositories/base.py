"""
Storage interface for orders and their collaboration records.

Services depend only on the abstract classes in this module. Two backends
implement them: ``InMemoryStorage`` (process-lifetime dicts, used for tests
and demos) and ``SqlStorage`` (SQLAlchemy async session).

Contract shared by every repository:

- ``get_by_id`` returns ``None`` for a missing id and never raises for it.
- ``update`` merges the given fields, refreshes ``updated_at`` when the
  record has one, and returns ``None`` for a missing id.
- ``delete`` returns whether a record existed.
- ``list_by_order`` sort order is fixed per entity: updates newest first,
  comments and stakeholders oldest first.
"""

import abc
from datetime import datetime
from typing import Any, Callable, Optional, Sequence

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
)


class RepositoryError(Exception):
    """Base exception for storage errors."""

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.context = context


class DuplicateRecordError(RepositoryError):
    """Raised when a caller-supplied id is already taken."""

    pass


class AbstractOrderRepository(abc.ABC):
    @abc.abstractmethod
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
    ) -> Order: ...

    @abc.abstractmethod
    async def get_by_id(self, order_id: str) -> Optional[Order]: ...

    @abc.abstractmethod
    async def list_all(self) -> list[Order]: ...

    @abc.abstractmethod
    async def update(self, order_id: str, **changes: Any) -> Optional[Order]: ...


class AbstractUpdateRepository(abc.ABC):
    @abc.abstractmethod
    async def create(
        self,
        *,
        order_id: str,
        message: str,
        author_name: str,
        author_role: AuthorRole,
    ) -> Update: ...

    @abc.abstractmethod
    async def get_by_id(self, update_id: str) -> Optional[Update]: ...

    @abc.abstractmethod
    async def list_by_order(self, order_id: str) -> list[Update]:
        """Updates for an order, newest first."""


class AbstractCommentRepository(abc.ABC):
    @abc.abstractmethod
    async def create(
        self,
        *,
        order_id: str,
        message: str,
        author_name: str,
        author_role: AuthorRole,
    ) -> Comment: ...

    @abc.abstractmethod
    async def get_by_id(self, comment_id: str) -> Optional[Comment]: ...

    @abc.abstractmethod
    async def list_by_order(self, order_id: str) -> list[Comment]:
        """Comments for an order, oldest first."""


class AbstractStakeholderRepository(abc.ABC):
    @abc.abstractmethod
    async def create(
        self,
        *,
        order_id: str,
        name: str,
        email: str,
        role: Optional[StakeholderRole] = None,
        permissions: Optional[Permission] = None,
    ) -> Stakeholder: ...

    @abc.abstractmethod
    async def get_by_id(self, stakeholder_id: str) -> Optional[Stakeholder]: ...

    @abc.abstractmethod
    async def list_by_order(self, order_id: str) -> list[Stakeholder]:
        """Stakeholders for an order, oldest first."""

    @abc.abstractmethod
    async def find_by_email(self, order_id: str, email: str) -> Optional[Stakeholder]:
        """Exact, case-sensitive email match within one order."""

    @abc.abstractmethod
    async def count(self) -> int: ...

    @abc.abstractmethod
    async def update(self, stakeholder_id: str, **changes: Any) -> Optional[Stakeholder]: ...

    @abc.abstractmethod
    async def delete(self, stakeholder_id: str) -> bool: ...


class AbstractMediaRepository(abc.ABC):
    @abc.abstractmethod
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
    ) -> MediaFile: ...

    @abc.abstractmethod
    async def get_by_id(self, media_id: str) -> Optional[MediaFile]: ...

    @abc.abstractmethod
    async def list_files(
        self,
        *,
        order_id: Optional[str] = None,
        category: Optional[MediaCategory] = None,
        search: Optional[str] = None,
    ) -> Sequence[MediaFile]:
        """Media files, newest upload first."""

    @abc.abstractmethod
    async def delete(self, media_id: str) -> bool: ...


class AbstractNotificationRepository(abc.ABC):
    @abc.abstractmethod
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
    ) -> InboxNotification: ...

    @abc.abstractmethod
    async def get_by_id(self, notification_id: str) -> Optional[InboxNotification]: ...

    @abc.abstractmethod
    async def list_all(self) -> list[InboxNotification]:
        """Inbox entries, newest first."""

    @abc.abstractmethod
    async def update(
        self, notification_id: str, **changes: Any
    ) -> Optional[InboxNotification]: ...


class Storage(abc.ABC):
    """
    Groups every repository behind one injectable object.

    Callers obtain a Storage from the ``get_storage`` dependency and never
    construct a backend themselves.
    """

    clock: Callable[[], datetime]
    orders: AbstractOrderRepository
    updates: AbstractUpdateRepository
    comments: AbstractCommentRepository
    stakeholders: AbstractStakeholderRepository
    media: AbstractMediaRepository
    notifications: AbstractNotificationRepository
