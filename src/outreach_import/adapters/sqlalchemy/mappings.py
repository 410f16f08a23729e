"""SQLAlchemy mapping metadata for the outreach import domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)

from outreach_import.domain.model import (
    ImportJob,
    ImportJobItem,
    Institution,
    InstitutionType,
    Invite,
    InviteRole,
    InviteStatus,
    ItemStatus,
    JobStatus,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Directory tables --------------------------------------------------------------

institution_table = Table(
    "institution",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("legal_name", String, nullable=False),
    Column("trading_name", String, nullable=True),
    Column("legal_name_key", String, nullable=False, index=True),
    Column("trading_name_key", String, nullable=True, index=True),
    Column("registration_number", String, nullable=False),
    Column(
        "institution_type",
        Enum(InstitutionType, native_enum=False, length=32),
        nullable=False,
    ),
    Column("province", String, nullable=False),
    Column("physical_address", String, nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
    UniqueConstraint("registration_number", name="uq_institution_registration_number"),
)

invite_table = Table(
    "invite",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("email", String, nullable=False, index=True),
    Column("institution_id", UUIDColumnType, ForeignKey("institution.id"), nullable=False),
    Column("role", Enum(InviteRole, native_enum=False, length=32), nullable=False),
    Column("status", Enum(InviteStatus, native_enum=False, length=32), nullable=False),
    Column("token", String, nullable=False),
    Column("invited_by", String, nullable=True),
    Column("expires_at", UTCDateTime(), nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
    UniqueConstraint("token", name="uq_invite_token"),
)

# Import tables -----------------------------------------------------------------

import_job_table = Table(
    "import_job",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("source_key", String, nullable=False),
    Column("file_name", String, nullable=True),
    Column("created_by", String, nullable=True),
    Column("status", Enum(JobStatus, native_enum=False, length=32), nullable=False),
    Column("total_rows", Integer, nullable=False, default=0),
    Column("processed_rows", Integer, nullable=False, default=0),
    Column("valid_emails", Integer, nullable=False, default=0),
    Column("invalid_emails", Integer, nullable=False, default=0),
    Column("duplicate_in_file", Integer, nullable=False, default=0),
    Column("already_exists_in_db", Integer, nullable=False, default=0),
    Column("total_emails_extracted", Integer, nullable=False, default=0),
    Column("created_invites", Integer, nullable=False, default=0),
    Column("failed_creates", Integer, nullable=False, default=0),
    Column("processed_emails", Integer, nullable=False, default=0),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("completed_at", UTCDateTime(), nullable=True),
    Column("version", Integer, nullable=False),
)

import_job_item_table = Table(
    "import_job_item",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("job_id", UUIDColumnType, ForeignKey("import_job.id"), nullable=False),
    Column("row_number", Integer, nullable=False),
    Column("status", Enum(ItemStatus, native_enum=False, length=32), nullable=False),
    Column("email_raw", String, nullable=True),
    Column("email_normalized", String, nullable=True),
    Column("institution_name_raw", String, nullable=True),
    Column("institution_id", UUIDColumnType, ForeignKey("institution.id"), nullable=True),
    Column("invite_id", UUIDColumnType, ForeignKey("invite.id"), nullable=True),
    Column("reason", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    UniqueConstraint(
        "job_id", "row_number", "email_normalized", name="uq_import_job_item_row_email"
    ),
    Index("ix_import_job_item_job_status_row", "job_id", "status", "row_number"),
    Index("ix_import_job_item_job_email", "job_id", "email_normalized"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Institution, institution_table)
    mapper_registry.map_imperatively(Invite, invite_table)
    mapper_registry.map_imperatively(
        ImportJob,
        import_job_table,
        version_id_col=import_job_table.c.version,
    )
    mapper_registry.map_imperatively(ImportJobItem, import_job_item_table)

    orm.configure_mappers()
    return mapper_registry


__all__ = [
    "UTCDateTime",
    "import_job_item_table",
    "import_job_table",
    "institution_table",
    "invite_table",
    "mapper_registry",
    "start_mappers",
]
