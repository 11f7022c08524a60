"""
Stakeholder API endpoints.

Order-scoped routes list, invite and bulk-invite stakeholders; the
stakeholder-scoped routes remove a stakeholder or change its permissions.
"""

from fastapi import APIRouter, HTTPException, Request, status

from garmentsync.api.deps import StakeholderServiceDep
from garmentsync.core.config import get_settings
from garmentsync.core.logging import get_logger
from garmentsync.core.rate_limit import limiter
from garmentsync.schemas.common import DeletedResponse
from garmentsync.schemas.stakeholders import (
    BulkInviteRequest,
    BulkInviteResponse,
    PermissionsUpdateRequest,
    StakeholderCreateRequest,
    StakeholderResponse,
)
from garmentsync.services.orders.service import OrderNotFoundError
from garmentsync.services.stakeholders.service import StakeholderNotFoundError

logger = get_logger(__name__)

router = APIRouter(tags=["stakeholders"])


@router.get(
    "/orders/{order_id}/stakeholders",
    response_model=list[StakeholderResponse],
    summary="List order stakeholders",
)
async def list_stakeholders(
    order_id: str,
    service: StakeholderServiceDep,
) -> list[StakeholderResponse]:
    stakeholders = await service.list_stakeholders(order_id)
    return [StakeholderResponse.model_validate(s) for s in stakeholders]


@router.post(
    "/orders/{order_id}/stakeholders",
    response_model=StakeholderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Invite stakeholder",
    description="Adds a stakeholder and emails an invitation; the stakeholder "
    "is kept even if the invitation cannot be delivered",
)
async def invite_stakeholder(
    order_id: str,
    request: StakeholderCreateRequest,
    service: StakeholderServiceDep,
) -> StakeholderResponse:
    try:
        stakeholder = await service.invite_stakeholder(order_id, request)
    except OrderNotFoundError as e:
        logger.warning("Stakeholder invite for unknown order", **e.context)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found",
        ) from e

    return StakeholderResponse.model_validate(stakeholder)


@router.post(
    "/orders/{order_id}/stakeholders/bulk-invite",
    response_model=BulkInviteResponse,
    summary="Bulk invite stakeholders",
    description="Invites every address of a comma or newline separated list "
    "and reports the outcome per address",
)
@limiter.limit(get_settings().bulk_invite_rate_limit)
async def bulk_invite(
    request: Request,
    order_id: str,
    payload: BulkInviteRequest,
    service: StakeholderServiceDep,
) -> BulkInviteResponse:
    try:
        return await service.bulk_invite(order_id, payload)
    except OrderNotFoundError as e:
        logger.warning("Bulk invite for unknown order", **e.context)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found",
        ) from e


@router.delete(
    "/stakeholders/{stakeholder_id}",
    response_model=DeletedResponse,
    summary="Remove stakeholder",
)
async def remove_stakeholder(
    stakeholder_id: str,
    service: StakeholderServiceDep,
) -> DeletedResponse:
    try:
        await service.remove_stakeholder(stakeholder_id)
    except StakeholderNotFoundError as e:
        logger.warning("Stakeholder not found", **e.context)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Stakeholder not found",
        ) from e

    return DeletedResponse(id=stakeholder_id, message="Stakeholder removed")


@router.patch(
    "/stakeholders/{stakeholder_id}/permissions",
    response_model=StakeholderResponse,
    summary="Update stakeholder permissions",
)
async def update_permissions(
    stakeholder_id: str,
    request: PermissionsUpdateRequest,
    service: StakeholderServiceDep,
) -> StakeholderResponse:
    try:
        stakeholder = await service.update_permissions(
            stakeholder_id, request.permissions
        )
    except StakeholderNotFoundError as e:
        logger.warning("Stakeholder not found", **e.context)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Stakeholder not found",
        ) from e

    return StakeholderResponse.model_validate(stakeholder)
