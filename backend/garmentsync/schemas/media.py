"""Media file schemas."""

from datetime import datetime
from typing import Optional

from garmentsync.domain.enums import MediaCategory
from garmentsync.schemas.common import CamelModel


class MediaFileResponse(CamelModel):
    id: str
    order_id: str
    filename: str
    original_name: str
    size: int
    mime_type: str
    url: str
    category: MediaCategory
    description: Optional[str] = None
    uploaded_by: str
    uploaded_at: datetime
