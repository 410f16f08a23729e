"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from itertools import batched
from typing import TYPE_CHECKING, Final

from sqlalchemy import exists, func, or_, select

from outreach_import.adapters.sqlalchemy.mappings import (
    import_job_item_table,
    institution_table,
    invite_table,
)
from outreach_import.domain.model import (
    ImportJob,
    ImportJobItem,
    Institution,
    Invite,
    ItemStatus,
)
from outreach_import.domain.model.directory import normalize_name

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Sequence
    from uuid import UUID

    from sqlalchemy.orm import Session

# Keeps each IN (...) list well under the bound-parameter limits of SQLite and Postgres.
IN_CLAUSE_BATCH_SIZE: Final = 500


class SqlAlchemyImportJobRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ImportJob) -> None:
        self.session.add(entity)

    def get(self, job_id: UUID) -> ImportJob | None:
        return self.session.get(ImportJob, job_id)


class SqlAlchemyImportJobItemRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ImportJobItem) -> None:
        self.session.add(entity)

    def add_all(self, items: Iterable[ImportJobItem]) -> None:
        self.session.add_all(list(items))

    def earliest_rows(
        self,
        job_id: UUID,
        emails: Collection[str],
        statuses: Collection[ItemStatus],
    ) -> dict[str, int]:
        table = import_job_item_table
        earliest: dict[str, int] = {}
        for chunk in batched(sorted(set(emails)), IN_CLAUSE_BATCH_SIZE):
            stmt = (
                select(table.c.email_normalized, func.min(table.c.row_number))
                .where(table.c.job_id == job_id)
                .where(table.c.status.in_(list(statuses)))
                .where(table.c.email_normalized.in_(chunk))
                .group_by(table.c.email_normalized)
            )
            for email, row_number in self.session.execute(stmt):
                earliest[email] = row_number
        return earliest

    def pending(self, job_id: UUID, *, limit: int) -> Sequence[ImportJobItem]:
        table = import_job_item_table
        stmt = (
            select(ImportJobItem)
            .where(table.c.job_id == job_id)
            .where(table.c.status == ItemStatus.VALID)
            .where(table.c.invite_id.is_(None))
            .order_by(table.c.row_number, table.c.email_normalized)
            .limit(limit)
        )
        return self.session.execute(stmt).scalars().all()

    def list_for_job(
        self,
        job_id: UUID,
        *,
        status: ItemStatus | None = None,
    ) -> Sequence[ImportJobItem]:
        table = import_job_item_table
        stmt = select(ImportJobItem).where(table.c.job_id == job_id)
        if status is not None:
            stmt = stmt.where(table.c.status == status)
        stmt = stmt.order_by(table.c.row_number, table.c.email_normalized)
        return self.session.execute(stmt).scalars().all()

    def count_by_status(self, job_id: UUID) -> dict[ItemStatus, int]:
        table = import_job_item_table
        stmt = (
            select(table.c.status, func.count())
            .where(table.c.job_id == job_id)
            .group_by(table.c.status)
        )
        return {ItemStatus(status): count for status, count in self.session.execute(stmt)}


class SqlAlchemyInviteRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Invite) -> None:
        self.session.add(entity)

    def existing_emails(self, emails: Collection[str]) -> set[str]:
        found: set[str] = set()
        for chunk in batched(sorted(set(emails)), IN_CLAUSE_BATCH_SIZE):
            stmt = select(invite_table.c.email).where(invite_table.c.email.in_(chunk)).distinct()
            found.update(self.session.execute(stmt).scalars())
        return found

    def exists_for_email(self, email: str) -> bool:
        stmt = select(exists().where(invite_table.c.email == email))
        return bool(self.session.execute(stmt).scalar())


class SqlAlchemyInstitutionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Institution) -> None:
        self.session.add(entity)

    def find_by_name(self, name: str) -> Institution | None:
        wanted = normalize_name(name)
        if not wanted:
            return None
        stmt = (
            select(Institution)
            .where(
                or_(
                    institution_table.c.legal_name_key == wanted,
                    institution_table.c.trading_name_key == wanted,
                )
            )
            .order_by(institution_table.c.created_at)
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()


__all__ = [
    "SqlAlchemyImportJobItemRepository",
    "SqlAlchemyImportJobRepository",
    "SqlAlchemyInstitutionRepository",
    "SqlAlchemyInviteRepository",
]
