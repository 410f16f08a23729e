"""import jobs, items, institutions and invites

Revision ID: 0001_import_schema
Revises:
Create Date: 2026-10-05 00:00:00.000000
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_import_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "institution",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("legal_name", sa.String(), nullable=False),
        sa.Column("trading_name", sa.String(), nullable=True),
        sa.Column("legal_name_key", sa.String(), nullable=False),
        sa.Column("trading_name_key", sa.String(), nullable=True),
        sa.Column("registration_number", sa.String(), nullable=False),
        sa.Column("institution_type", sa.String(length=32), nullable=False),
        sa.Column("province", sa.String(), nullable=False),
        sa.Column("physical_address", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_institution"),
        sa.UniqueConstraint("registration_number", name="uq_institution_registration_number"),
    )
    op.create_index("ix_institution_legal_name_key", "institution", ["legal_name_key"])
    op.create_index("ix_institution_trading_name_key", "institution", ["trading_name_key"])

    op.create_table(
        "invite",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("institution_id", sa.Uuid(), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("token", sa.String(), nullable=False),
        sa.Column("invited_by", sa.String(), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["institution_id"],
            ["institution.id"],
            name="fk_invite_institution_id_institution",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_invite"),
        sa.UniqueConstraint("token", name="uq_invite_token"),
    )
    op.create_index("ix_invite_email", "invite", ["email"])

    op.create_table(
        "import_job",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("source_key", sa.String(), nullable=False),
        sa.Column("file_name", sa.String(), nullable=True),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("total_rows", sa.Integer(), nullable=False),
        sa.Column("processed_rows", sa.Integer(), nullable=False),
        sa.Column("valid_emails", sa.Integer(), nullable=False),
        sa.Column("invalid_emails", sa.Integer(), nullable=False),
        sa.Column("duplicate_in_file", sa.Integer(), nullable=False),
        sa.Column("already_exists_in_db", sa.Integer(), nullable=False),
        sa.Column("total_emails_extracted", sa.Integer(), nullable=False),
        sa.Column("created_invites", sa.Integer(), nullable=False),
        sa.Column("failed_creates", sa.Integer(), nullable=False),
        sa.Column("processed_emails", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_import_job"),
    )

    op.create_table(
        "import_job_item",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("job_id", sa.Uuid(), nullable=False),
        sa.Column("row_number", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("email_raw", sa.String(), nullable=True),
        sa.Column("email_normalized", sa.String(), nullable=True),
        sa.Column("institution_name_raw", sa.String(), nullable=True),
        sa.Column("institution_id", sa.Uuid(), nullable=True),
        sa.Column("invite_id", sa.Uuid(), nullable=True),
        sa.Column("reason", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["job_id"],
            ["import_job.id"],
            name="fk_import_job_item_job_id_import_job",
        ),
        sa.ForeignKeyConstraint(
            ["institution_id"],
            ["institution.id"],
            name="fk_import_job_item_institution_id_institution",
        ),
        sa.ForeignKeyConstraint(
            ["invite_id"],
            ["invite.id"],
            name="fk_import_job_item_invite_id_invite",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_import_job_item"),
        sa.UniqueConstraint(
            "job_id",
            "row_number",
            "email_normalized",
            name="uq_import_job_item_row_email",
        ),
    )
    op.create_index(
        "ix_import_job_item_job_status_row",
        "import_job_item",
        ["job_id", "status", "row_number"],
    )
    op.create_index(
        "ix_import_job_item_job_email",
        "import_job_item",
        ["job_id", "email_normalized"],
    )


def downgrade() -> None:
    op.drop_index("ix_import_job_item_job_email", table_name="import_job_item")
    op.drop_index("ix_import_job_item_job_status_row", table_name="import_job_item")
    op.drop_table("import_job_item")
    op.drop_table("import_job")
    op.drop_index("ix_invite_email", table_name="invite")
    op.drop_table("invite")
    op.drop_index("ix_institution_trading_name_key", table_name="institution")
    op.drop_index("ix_institution_legal_name_key", table_name="institution")
    op.drop_table("institution")
