"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class JobStatus(StrEnum):
    UPLOADED = "UPLOADED"
    VALIDATING = "VALIDATING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"


class ItemStatus(StrEnum):
    """Classification and import outcome of a single (row, email) occurrence."""

    INVALID_EMAIL = "INVALID_EMAIL"
    DUPLICATE_IN_FILE = "DUPLICATE_IN_FILE"
    ALREADY_EXISTS_DB = "ALREADY_EXISTS_DB"
    VALID = "VALID"
    CREATED = "CREATED"
    FAILED_CREATE = "FAILED_CREATE"


class ImportAction(StrEnum):
    VALIDATE = "VALIDATE"
    IMPORT = "IMPORT"


class InviteRole(StrEnum):
    INSTITUTION_ADMIN = "INSTITUTION_ADMIN"
    INSTITUTION_STAFF = "INSTITUTION_STAFF"


class InviteStatus(StrEnum):
    QUEUED = "QUEUED"
    SENT = "SENT"
    ACCEPTED = "ACCEPTED"
    EXPIRED = "EXPIRED"


class InstitutionType(StrEnum):
    TVET = "TVET"
    PRIVATE_SDP = "PRIVATE_SDP"
    NGO = "NGO"
    UNIVERSITY = "UNIVERSITY"
    EMPLOYER = "EMPLOYER"
    OTHER = "OTHER"


# Items that took part in dedup classification; later chunks compare against these.
DEDUP_SOURCE_STATUSES: frozenset[ItemStatus] = frozenset(
    {ItemStatus.VALID, ItemStatus.DUPLICATE_IN_FILE, ItemStatus.ALREADY_EXISTS_DB}
)
