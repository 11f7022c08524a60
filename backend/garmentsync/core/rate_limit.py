"""
Request rate limiting keyed by client address.

Set ``APP_RATE_LIMIT_ENABLED=false`` to turn every limit off.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from garmentsync.core.config import get_settings

limiter = Limiter(
    key_func=get_remote_address,
    enabled=get_settings().rate_limit_enabled,
)
