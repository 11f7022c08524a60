"""
FastAPI dependencies wiring storage, the notification dispatcher and services.

Routers depend on the ``*Dep`` aliases only. Tests swap the backends by
overriding ``get_storage`` and ``get_dispatcher``.
"""

from pathlib import Path
from typing import Annotated, AsyncGenerator

from fastapi import Depends

from garmentsync.core.config import get_settings
from garmentsync.core.logging import get_logger
from garmentsync.database.connection import get_session
from garmentsync.repositories.base import Storage
from garmentsync.repositories.memory import get_memory_storage
from garmentsync.repositories.sql import SqlStorage
from garmentsync.services.inbox import InboxService
from garmentsync.services.media import MediaService
from garmentsync.services.notifications.service import (
    NotificationDispatcher,
    get_notification_dispatcher,
)
from garmentsync.services.orders.service import OrderService
from garmentsync.services.stakeholders.service import StakeholderService

logger = get_logger(__name__)


async def get_storage() -> AsyncGenerator[Storage, None]:
    """
    Provide the configured storage backend for one request.

    The SQL backend gets a session that commits when the request succeeds
    and rolls back when it raises.
    """
    settings = get_settings()

    if settings.storage_backend == "sql":
        async with get_session() as session:
            yield SqlStorage(session)
    else:
        yield get_memory_storage(settings.seed_demo_data)


def get_dispatcher() -> NotificationDispatcher:
    return get_notification_dispatcher()


StorageDep = Annotated[Storage, Depends(get_storage)]
DispatcherDep = Annotated[NotificationDispatcher, Depends(get_dispatcher)]


def get_order_service(storage: StorageDep, dispatcher: DispatcherDep) -> OrderService:
    return OrderService(storage, dispatcher)


def get_stakeholder_service(
    storage: StorageDep, dispatcher: DispatcherDep
) -> StakeholderService:
    return StakeholderService(storage, dispatcher)


def get_media_service(storage: StorageDep) -> MediaService:
    settings = get_settings()
    return MediaService(
        storage,
        media_dir=Path(settings.media_dir),
        max_upload_bytes=settings.media_max_upload_bytes,
    )


def get_inbox_service(storage: StorageDep, dispatcher: DispatcherDep) -> InboxService:
    return InboxService(storage, dispatcher)


OrderServiceDep = Annotated[OrderService, Depends(get_order_service)]
StakeholderServiceDep = Annotated[StakeholderService, Depends(get_stakeholder_service)]
MediaServiceDep = Annotated[MediaService, Depends(get_media_service)]
InboxServiceDep = Annotated[InboxService, Depends(get_inbox_service)]
