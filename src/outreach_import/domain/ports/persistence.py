"""Ports for persisting import jobs and the records they materialize."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from outreach_import.domain.model import ImportJob, ImportJobItem, Institution, Invite

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Sequence
    from uuid import UUID

    from outreach_import.domain.model import ItemStatus


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class ImportJobRepository(Repository[ImportJob], Protocol):
    def get(self, job_id: UUID) -> ImportJob | None: ...


@runtime_checkable
class ImportJobItemRepository(Repository[ImportJobItem], Protocol):
    """Persistence contract for classified items of an import job."""

    def add_all(self, items: Iterable[ImportJobItem]) -> None:
        """Insert a slice's items in one batch."""
        ...

    def earliest_rows(
        self,
        job_id: UUID,
        emails: Collection[str],
        statuses: Collection[ItemStatus],
    ) -> dict[str, int]:
        """Map each email already recorded for ``job_id`` to the first row it appeared on."""
        ...

    def pending(self, job_id: UUID, *, limit: int) -> Sequence[ImportJobItem]:
        """Return up to ``limit`` VALID items without an invite, ordered by row."""
        ...

    def list_for_job(
        self,
        job_id: UUID,
        *,
        status: ItemStatus | None = None,
    ) -> Sequence[ImportJobItem]: ...

    def count_by_status(self, job_id: UUID) -> dict[ItemStatus, int]: ...


@runtime_checkable
class InviteRepository(Repository[Invite], Protocol):
    def existing_emails(self, emails: Collection[str]) -> set[str]:
        """Return the subset of ``emails`` that already have an invitation."""
        ...

    def exists_for_email(self, email: str) -> bool: ...


@runtime_checkable
class InstitutionRepository(Repository[Institution], Protocol):
    def find_by_name(self, name: str) -> Institution | None:
        """Case-insensitive exact match against legal or trading name."""
        ...
