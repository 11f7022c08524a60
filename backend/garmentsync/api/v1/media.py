"""
Media file API endpoints: listing, multipart upload and deletion.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, File, Form, HTTPException, Query, UploadFile, status

from garmentsync.api.deps import MediaServiceDep
from garmentsync.core.logging import get_logger
from garmentsync.domain.enums import MediaCategory
from garmentsync.schemas.common import DeletedResponse
from garmentsync.schemas.media import MediaFileResponse
from garmentsync.services.media import (
    IncomingFile,
    MediaNotFoundError,
    MediaValidationError,
)
from garmentsync.services.orders.service import OrderNotFoundError

logger = get_logger(__name__)

router = APIRouter(prefix="/media", tags=["media"])


@router.get(
    "",
    response_model=list[MediaFileResponse],
    summary="List media files",
    description="Newest upload first; filter by order, category or a "
    "case-insensitive search over file name and description",
)
async def list_media(
    service: MediaServiceDep,
    order_id: Annotated[Optional[str], Query(alias="orderId")] = None,
    category: Optional[MediaCategory] = None,
    search: Annotated[Optional[str], Query(max_length=200)] = None,
) -> list[MediaFileResponse]:
    files = await service.list_media(order_id=order_id, category=category, search=search)
    return [MediaFileResponse.model_validate(f) for f in files]


@router.get(
    "/{media_id}",
    response_model=MediaFileResponse,
    summary="Get media file",
)
async def get_media(media_id: str, service: MediaServiceDep) -> MediaFileResponse:
    try:
        media_file = await service.get_media(media_id)
    except MediaNotFoundError as e:
        logger.warning("Media file not found", **e.context)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Media file not found",
        ) from e

    return MediaFileResponse.model_validate(media_file)


@router.post(
    "/upload",
    response_model=list[MediaFileResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Upload media files",
)
async def upload_media(
    service: MediaServiceDep,
    files: Annotated[list[UploadFile], File(description="One or more files")],
    order_id: Annotated[str, Form(alias="orderId", min_length=1)],
    category: Annotated[MediaCategory, Form()],
    description: Annotated[Optional[str], Form()] = None,
    uploaded_by: Annotated[str, Form(alias="uploadedBy", min_length=1)] = "Current User",
) -> list[MediaFileResponse]:
    """
    Store uploaded files for an order.

    Raises:
        HTTPException: 400 if a file is empty or too large, 404 if the order
            does not exist
    """
    # One byte past the limit is enough for the service to reject the file.
    read_limit = service.max_upload_bytes + 1
    incoming = [
        IncomingFile(
            original_name=upload.filename or "upload",
            content_type=upload.content_type or "application/octet-stream",
            content=await upload.read(read_limit),
        )
        for upload in files
    ]

    try:
        stored = await service.upload(
            order_id=order_id,
            category=category,
            files=incoming,
            uploaded_by=uploaded_by,
            description=description,
        )
    except OrderNotFoundError as e:
        logger.warning("Media upload for unknown order", **e.context)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found",
        ) from e
    except MediaValidationError as e:
        logger.warning("Media upload rejected", error=str(e), **e.context)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    return [MediaFileResponse.model_validate(f) for f in stored]


@router.delete(
    "/{media_id}",
    response_model=DeletedResponse,
    summary="Delete media file",
)
async def delete_media(media_id: str, service: MediaServiceDep) -> DeletedResponse:
    try:
        await service.delete_media(media_id)
    except MediaNotFoundError as e:
        logger.warning("Media file not found", **e.context)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Media file not found",
        ) from e

    return DeletedResponse(id=media_id, message="Media file deleted")
