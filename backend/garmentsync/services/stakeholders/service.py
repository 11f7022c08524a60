"""
Stakeholder service: invitations, bulk invitations and permission changes.

Bulk invite processes a raw comma/newline separated address list in input
order and reports a per-address outcome. It is not transactional: a
stakeholder that was stored but whose invitation could not be delivered
stays stored and is reported as ``error``.
"""

import re
from typing import Any

from garmentsync.core.logging import get_logger, log_performance
from garmentsync.domain.enums import Permission
from garmentsync.domain.models import Stakeholder
from garmentsync.repositories.base import Storage
from garmentsync.schemas.common import is_valid_email
from garmentsync.schemas.stakeholders import (
    BulkInviteRequest,
    BulkInviteResponse,
    BulkInviteResultItem,
    InviteOutcome,
    StakeholderCreateRequest,
)
from garmentsync.services.notifications.service import (
    NotificationDispatcher,
    NotificationServiceError,
)
from garmentsync.services.orders.service import OrderNotFoundError

logger = get_logger(__name__)

_LIST_SEPARATORS = re.compile(r"[,\n]")
_NAME_SEPARATORS = re.compile(r"[._]")


class StakeholderServiceError(Exception):
    """Base exception for stakeholder service errors."""

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.context = context


class StakeholderNotFoundError(StakeholderServiceError):
    """Raised when stakeholder is not found."""

    pass


def parse_email_list(raw: str) -> list[str]:
    """Split a raw address list on commas and newlines, dropping blanks."""
    return [part.strip() for part in _LIST_SEPARATORS.split(raw) if part.strip()]


def derive_display_name(email: str) -> str:
    """
    Build a display name from an address's local part.

    >>> derive_display_name("john.q_public@co.com")
    'John Q Public'
    """
    local_part = email.split("@", 1)[0]
    words = [w for w in _NAME_SEPARATORS.split(local_part) if w]
    return " ".join(w[0].upper() + w[1:] for w in words)


class StakeholderService:
    """
    Manages the collaborators attached to an order.

    Attributes:
        storage: Storage backend
        dispatcher: Sends invitation email
    """

    def __init__(self, storage: Storage, dispatcher: NotificationDispatcher):
        self.storage = storage
        self.dispatcher = dispatcher

    async def _get_order(self, order_id: str):
        order = await self.storage.orders.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(f"Order {order_id} not found", order_id=order_id)
        return order

    async def list_stakeholders(self, order_id: str) -> list[Stakeholder]:
        return await self.storage.stakeholders.list_by_order(order_id)

    async def invite_stakeholder(
        self, order_id: str, request: StakeholderCreateRequest
    ) -> Stakeholder:
        """
        Add one stakeholder and send the invitation.

        A failed invitation is logged; the stakeholder is kept.

        Raises:
            OrderNotFoundError: If order not found
        """
        order = await self._get_order(order_id)
        stakeholder = await self.storage.stakeholders.create(
            order_id=order_id,
            name=request.name,
            email=request.email,
            role=request.role,
            permissions=request.permissions,
        )
        logger.info(
            "Stakeholder added",
            order_id=order_id,
            stakeholder_id=stakeholder.id,
            role=stakeholder.role.value,
        )

        try:
            await self.dispatcher.send_invitation(
                stakeholder,
                order,
                inviter_name=request.inviter_name,
                custom_message=request.message,
            )
        except NotificationServiceError as e:
            logger.warning(
                "Stakeholder invitation failed",
                order_id=order_id,
                stakeholder_id=stakeholder.id,
                error=str(e),
            )

        return stakeholder

    async def bulk_invite(
        self, order_id: str, request: BulkInviteRequest
    ) -> BulkInviteResponse:
        """
        Invite every address in a comma/newline separated list.

        Raises:
            OrderNotFoundError: If order not found
        """
        order = await self._get_order(order_id)
        results: list[BulkInviteResultItem] = []
        added = 0
        notified = 0

        with log_performance(logger, "bulk_invite", order_id=order_id):
            for email in parse_email_list(request.email_list):
                if not is_valid_email(email):
                    results.append(
                        BulkInviteResultItem(email=email, status=InviteOutcome.INVALID)
                    )
                    continue

                existing = await self.storage.stakeholders.find_by_email(order_id, email)
                if existing is not None:
                    results.append(
                        BulkInviteResultItem(
                            email=email,
                            status=InviteOutcome.EXISTS,
                            name=existing.name,
                            stakeholder_id=existing.id,
                        )
                    )
                    continue

                stakeholder = await self.storage.stakeholders.create(
                    order_id=order_id,
                    name=derive_display_name(email),
                    email=email,
                    role=request.default_role,
                    permissions=request.default_permissions,
                )
                added += 1

                try:
                    await self.dispatcher.send_invitation(
                        stakeholder,
                        order,
                        inviter_name=request.inviter_name,
                        custom_message=request.message,
                    )
                except NotificationServiceError as e:
                    logger.warning(
                        "Bulk invitation not delivered",
                        order_id=order_id,
                        email=email,
                        error=str(e),
                    )
                    results.append(
                        BulkInviteResultItem(
                            email=email,
                            status=InviteOutcome.ERROR,
                            name=stakeholder.name,
                            stakeholder_id=stakeholder.id,
                            error=str(e),
                        )
                    )
                    continue

                notified += 1
                results.append(
                    BulkInviteResultItem(
                        email=email,
                        status=InviteOutcome.SUCCESS,
                        name=stakeholder.name,
                        stakeholder_id=stakeholder.id,
                    )
                )

        logger.info(
            "Bulk invite processed",
            order_id=order_id,
            total_processed=len(results),
            added_count=added,
            success_count=notified,
        )
        return BulkInviteResponse(
            total_processed=len(results),
            added_count=added,
            success_count=notified,
            results=results,
        )

    async def remove_stakeholder(self, stakeholder_id: str) -> None:
        """
        Raises:
            StakeholderNotFoundError: If stakeholder not found
        """
        if not await self.storage.stakeholders.delete(stakeholder_id):
            raise StakeholderNotFoundError(
                f"Stakeholder {stakeholder_id} not found",
                stakeholder_id=stakeholder_id,
            )
        logger.info("Stakeholder removed", stakeholder_id=stakeholder_id)

    async def update_permissions(
        self, stakeholder_id: str, permissions: Permission
    ) -> Stakeholder:
        """
        Raises:
            StakeholderNotFoundError: If stakeholder not found
        """
        stakeholder = await self.storage.stakeholders.update(
            stakeholder_id, permissions=Permission(permissions)
        )
        if stakeholder is None:
            raise StakeholderNotFoundError(
                f"Stakeholder {stakeholder_id} not found",
                stakeholder_id=stakeholder_id,
            )
        logger.info(
            "Stakeholder permissions updated",
            stakeholder_id=stakeholder_id,
            permissions=stakeholder.permissions.value,
        )
        return stakeholder
