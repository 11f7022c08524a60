"""
Shared schema base and field helpers.

Every request and response model speaks camelCase JSON on the wire while
keeping snake_case attribute names in Python; snake_case input is accepted
as well.
"""

import re
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class CamelModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def is_valid_email(value: str) -> bool:
    """Check an address against the local-part@domain.tld shape."""
    return bool(EMAIL_PATTERN.match(value))


def validate_email(value: str) -> str:
    """Field validator body shared by every schema carrying an email."""
    if not is_valid_email(value):
        raise ValueError("Invalid email format")
    return value


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class DeletedResponse(CamelModel):
    """Acknowledges a deletion."""

    id: str
    message: str
