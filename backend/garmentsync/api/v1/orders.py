"""
Order API endpoints.

This module implements the FastAPI router for orders and their collaboration
thread: order creation and status changes, status updates and comments.
Posting an update or comment notifies the order's stakeholders by email.
"""

from fastapi import APIRouter, HTTPException, status

from garmentsync.api.deps import OrderServiceDep
from garmentsync.core.logging import get_logger
from garmentsync.schemas.collaboration import (
    CommentCreateRequest,
    CommentResponse,
    UpdateCreateRequest,
    UpdateResponse,
)
from garmentsync.schemas.orders import (
    OrderCreateRequest,
    OrderDetailResponse,
    OrderResponse,
    OrderStatusUpdateRequest,
)
from garmentsync.schemas.stakeholders import StakeholderResponse
from garmentsync.services.orders.service import (
    OrderConflictError,
    OrderDetail,
    OrderNotFoundError,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


def _not_found(e: OrderNotFoundError) -> HTTPException:
    logger.warning("Order not found", **e.context)
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Order not found",
    )


def _detail_response(detail: OrderDetail) -> OrderDetailResponse:
    return OrderDetailResponse(
        **OrderResponse.model_validate(detail.order).model_dump(),
        updates=[UpdateResponse.model_validate(u) for u in detail.updates],
        comments=[CommentResponse.model_validate(c) for c in detail.comments],
        stakeholders=[StakeholderResponse.model_validate(s) for s in detail.stakeholders],
        next_status=detail.next_status.value if detail.next_status else None,
    )


@router.get(
    "",
    response_model=list[OrderResponse],
    summary="List orders",
    description="All orders, newest first",
)
async def list_orders(service: OrderServiceDep) -> list[OrderResponse]:
    orders = await service.list_orders()
    return [OrderResponse.model_validate(o) for o in orders]


@router.post(
    "",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create order",
)
async def create_order(
    request: OrderCreateRequest,
    service: OrderServiceDep,
) -> OrderResponse:
    """
    Create an order. Status defaults to ``received`` when omitted.

    Raises:
        HTTPException: 409 if the order id is already taken
    """
    try:
        order = await service.create_order(request)
    except OrderConflictError as e:
        logger.warning("Order creation conflict", **e.context)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        ) from e

    return OrderResponse.model_validate(order)


@router.get(
    "/{order_id}",
    response_model=OrderDetailResponse,
    summary="Get order details",
    description="Order with updates, comments and stakeholders embedded",
)
async def get_order(order_id: str, service: OrderServiceDep) -> OrderDetailResponse:
    try:
        detail = await service.get_order_detail(order_id)
    except OrderNotFoundError as e:
        raise _not_found(e) from e

    return _detail_response(detail)


@router.patch(
    "/{order_id}/status",
    response_model=OrderResponse,
    summary="Update order status",
    description="Any status label is accepted; there is no transition graph",
)
async def update_order_status(
    order_id: str,
    request: OrderStatusUpdateRequest,
    service: OrderServiceDep,
) -> OrderResponse:
    try:
        order = await service.update_order_status(order_id, request.status)
    except OrderNotFoundError as e:
        raise _not_found(e) from e

    return OrderResponse.model_validate(order)


@router.get(
    "/{order_id}/updates",
    response_model=list[UpdateResponse],
    summary="List order updates",
    description="Status updates, newest first",
)
async def list_updates(order_id: str, service: OrderServiceDep) -> list[UpdateResponse]:
    try:
        updates = await service.list_updates(order_id)
    except OrderNotFoundError as e:
        raise _not_found(e) from e

    return [UpdateResponse.model_validate(u) for u in updates]


@router.post(
    "/{order_id}/updates",
    response_model=UpdateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Post order update",
)
async def post_update(
    order_id: str,
    request: UpdateCreateRequest,
    service: OrderServiceDep,
) -> UpdateResponse:
    try:
        update = await service.post_update(order_id, request)
    except OrderNotFoundError as e:
        raise _not_found(e) from e

    return UpdateResponse.model_validate(update)


@router.get(
    "/{order_id}/comments",
    response_model=list[CommentResponse],
    summary="List order comments",
    description="Comments, oldest first",
)
async def list_comments(order_id: str, service: OrderServiceDep) -> list[CommentResponse]:
    try:
        comments = await service.list_comments(order_id)
    except OrderNotFoundError as e:
        raise _not_found(e) from e

    return [CommentResponse.model_validate(c) for c in comments]


@router.post(
    "/{order_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Post order comment",
)
async def post_comment(
    order_id: str,
    request: CommentCreateRequest,
    service: OrderServiceDep,
) -> CommentResponse:
    try:
        comment = await service.post_comment(order_id, request)
    except OrderNotFoundError as e:
        raise _not_found(e) from e

    return CommentResponse.model_validate(comment)
