"""Stakeholder invitations and permissions."""

from garmentsync.services.stakeholders.service import (
    StakeholderNotFoundError,
    StakeholderService,
    StakeholderServiceError,
    derive_display_name,
    parse_email_list,
)

__all__ = [
    "StakeholderNotFoundError",
    "StakeholderService",
    "StakeholderServiceError",
    "derive_display_name",
    "parse_email_list",
]
