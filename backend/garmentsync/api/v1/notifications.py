"""
Notification inbox API endpoints.
"""

from fastapi import APIRouter, HTTPException, status

from garmentsync.api.deps import InboxServiceDep
from garmentsync.core.logging import get_logger
from garmentsync.schemas.notifications import (
    InboxNotificationResponse,
    ReplyRequest,
    ReplyResponse,
)
from garmentsync.services.inbox import NotificationNotFoundError
from garmentsync.services.notifications.service import NotificationDeliveryError

logger = get_logger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get(
    "",
    response_model=list[InboxNotificationResponse],
    summary="List inbox notifications",
    description="Newest first",
)
async def list_notifications(service: InboxServiceDep) -> list[InboxNotificationResponse]:
    notifications = await service.list_notifications()
    return [InboxNotificationResponse.model_validate(n) for n in notifications]


@router.patch(
    "/{notification_id}/read",
    response_model=InboxNotificationResponse,
    summary="Mark notification read",
)
async def mark_read(
    notification_id: str,
    service: InboxServiceDep,
) -> InboxNotificationResponse:
    try:
        notification = await service.mark_read(notification_id)
    except NotificationNotFoundError as e:
        logger.warning("Notification not found", **e.context)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found",
        ) from e

    return InboxNotificationResponse.model_validate(notification)


@router.post(
    "/{notification_id}/reply",
    response_model=ReplyResponse,
    summary="Reply to notification",
    description="Emails the reply to the notification sender; delivery "
    "failure is reported as a server error",
)
async def reply(
    notification_id: str,
    request: ReplyRequest,
    service: InboxServiceDep,
) -> ReplyResponse:
    try:
        recipient = await service.reply(
            notification_id,
            subject=request.subject,
            message=request.message,
            to=request.to,
            sender_name=request.sender_name,
        )
    except NotificationNotFoundError as e:
        logger.warning("Notification not found", **e.context)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found",
        ) from e
    except NotificationDeliveryError as e:
        logger.error(
            "Notification reply not delivered",
            notification_id=notification_id,
            error=str(e),
            **e.context,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send reply",
        ) from e

    return ReplyResponse(notification_id=notification_id, recipient=recipient)
