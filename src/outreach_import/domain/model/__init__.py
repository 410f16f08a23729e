"""Domain model for outreach imports."""

from __future__ import annotations

from .base import Entity, new_id, utcnow
from .directory import FALLBACK_INSTITUTION_NAME, Institution, Invite
from .enums import (
    DEDUP_SOURCE_STATUSES,
    ImportAction,
    InstitutionType,
    InviteRole,
    InviteStatus,
    ItemStatus,
    JobStatus,
)
from .jobs import ImportJob, ImportJobItem

__all__ = [
    "DEDUP_SOURCE_STATUSES",
    "FALLBACK_INSTITUTION_NAME",
    "Entity",
    "ImportAction",
    "ImportJob",
    "ImportJobItem",
    "Institution",
    "InstitutionType",
    "Invite",
    "InviteRole",
    "InviteStatus",
    "ItemStatus",
    "JobStatus",
    "new_id",
    "utcnow",
]
