"""
Media file service for order attachments.

Uploaded bytes are written under the configured media directory with a
generated file name; the metadata record points at it through a
``/uploads/<filename>`` URL.
"""

from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Any, Optional, Sequence

import aiofiles
import aiofiles.os

from garmentsync.core.logging import get_logger
from garmentsync.domain.enums import MediaCategory
from garmentsync.domain.models import MediaFile, new_id
from garmentsync.repositories.base import Storage
from garmentsync.services.orders.service import OrderNotFoundError

logger = get_logger(__name__)


class MediaServiceError(Exception):
    """Base exception for media service errors."""

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.context = context


class MediaNotFoundError(MediaServiceError):
    """Raised when a media file is not found."""

    pass


class MediaValidationError(MediaServiceError):
    """Raised when an upload is rejected."""

    pass


@dataclass(frozen=True)
class IncomingFile:
    """An uploaded file already read into memory."""

    original_name: str
    content_type: str
    content: bytes


class MediaService:
    """
    Lists, stores and deletes order media files.

    Attributes:
        storage: Storage backend for media metadata
        media_dir: Directory receiving uploaded bytes
        max_upload_bytes: Per-file size limit
    """

    def __init__(self, storage: Storage, media_dir: Path, max_upload_bytes: int):
        self.storage = storage
        self.media_dir = Path(media_dir)
        self.max_upload_bytes = max_upload_bytes

    async def list_media(
        self,
        order_id: Optional[str] = None,
        category: Optional[MediaCategory] = None,
        search: Optional[str] = None,
    ) -> Sequence[MediaFile]:
        return await self.storage.media.list_files(
            order_id=order_id, category=category, search=search
        )

    async def get_media(self, media_id: str) -> MediaFile:
        """
        Raises:
            MediaNotFoundError: If media file not found
        """
        media_file = await self.storage.media.get_by_id(media_id)
        if media_file is None:
            raise MediaNotFoundError(f"Media file {media_id} not found", media_id=media_id)
        return media_file

    async def upload(
        self,
        order_id: str,
        category: MediaCategory,
        files: Sequence[IncomingFile],
        uploaded_by: str,
        description: Optional[str] = None,
    ) -> list[MediaFile]:
        """
        Store uploaded files and record their metadata.

        Every file is checked before any is written.

        Raises:
            OrderNotFoundError: If order not found
            MediaValidationError: If no file was sent or a file is empty or too large
        """
        if await self.storage.orders.get_by_id(order_id) is None:
            raise OrderNotFoundError(f"Order {order_id} not found", order_id=order_id)
        if not files:
            raise MediaValidationError("No files provided", order_id=order_id)

        for incoming in files:
            if not incoming.content:
                raise MediaValidationError(
                    f"File {incoming.original_name} is empty",
                    filename=incoming.original_name,
                )
            if len(incoming.content) > self.max_upload_bytes:
                raise MediaValidationError(
                    f"File {incoming.original_name} exceeds "
                    f"{self.max_upload_bytes} bytes",
                    filename=incoming.original_name,
                    size=len(incoming.content),
                )

        await aiofiles.os.makedirs(self.media_dir, exist_ok=True)

        stored: list[MediaFile] = []
        for incoming in files:
            filename = f"{new_id()}{PurePath(incoming.original_name).suffix.lower()}"
            async with aiofiles.open(self.media_dir / filename, "wb") as f:
                await f.write(incoming.content)

            media_file = await self.storage.media.create(
                order_id=order_id,
                filename=filename,
                original_name=incoming.original_name,
                size=len(incoming.content),
                mime_type=incoming.content_type or "application/octet-stream",
                url=f"/uploads/{filename}",
                category=category,
                uploaded_by=uploaded_by,
                description=description,
            )
            stored.append(media_file)

        logger.info(
            "Media files uploaded",
            order_id=order_id,
            category=MediaCategory(category).value,
            count=len(stored),
        )
        return stored

    async def delete_media(self, media_id: str) -> None:
        """
        Delete a media record and its file on disk, if any.

        Raises:
            MediaNotFoundError: If media file not found
        """
        media_file = await self.get_media(media_id)
        await self.storage.media.delete(media_id)

        path = self.media_dir / media_file.filename
        if await aiofiles.os.path.exists(path):
            await aiofiles.os.remove(path)

        logger.info("Media file deleted", media_id=media_id, order_id=media_file.order_id)
