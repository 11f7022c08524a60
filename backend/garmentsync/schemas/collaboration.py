"""Update and comment schemas."""

from datetime import datetime

from pydantic import Field

from garmentsync.domain.enums import AuthorRole
from garmentsync.schemas.common import CamelModel


class EntryCreateRequest(CamelModel):
    """Body for posting an update or comment.

    The order id always comes from the request path; an ``orderId`` in the
    body is ignored.
    """

    message: str = Field(..., min_length=1, max_length=5000)
    author_name: str = Field(..., min_length=1, max_length=255)
    author_role: AuthorRole


class UpdateCreateRequest(EntryCreateRequest):
    pass


class CommentCreateRequest(EntryCreateRequest):
    pass


class EntryResponse(CamelModel):
    id: str
    order_id: str
    message: str
    author_name: str
    author_role: AuthorRole
    created_at: datetime


class UpdateResponse(EntryResponse):
    pass


class CommentResponse(EntryResponse):
    pass
