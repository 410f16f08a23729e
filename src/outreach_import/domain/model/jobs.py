"""Import job aggregate: the job row and its classified items."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from outreach_import.domain.errors import IllegalTransitionError
from outreach_import.domain.model.base import Entity, utcnow
from outreach_import.domain.model.enums import ItemStatus, JobStatus

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


def _percent(done: int, total: int) -> int:
    if total <= 0:
        return 100
    return round(100 * done / total)


@dataclass(eq=False, kw_only=True)
class ImportJob(Entity):
    """One uploaded file moving through VALIDATE and IMPORT.

    All counters only ever grow. ``processed_rows`` is the validation watermark
    and never passes ``total_rows``. ``version`` is owned by the persistence
    layer and guards against two slices advancing the same job concurrently.
    """

    source_key: str
    file_name: str | None = None
    created_by: str | None = None
    status: JobStatus = JobStatus.UPLOADED

    total_rows: int = 0
    processed_rows: int = 0

    valid_emails: int = 0
    invalid_emails: int = 0
    duplicate_in_file: int = 0
    already_exists_in_db: int = 0
    total_emails_extracted: int = 0

    created_invites: int = 0
    failed_creates: int = 0
    processed_emails: int = 0

    created_at: datetime = field(default_factory=utcnow)
    completed_at: datetime | None = None
    version: int = field(default=0, repr=False)

    # Validation ---------------------------------------------------------------

    @property
    def validation_closed(self) -> bool:
        """Validation is never re-entered once the import has started."""
        return self.status in (JobStatus.PROCESSING, JobStatus.COMPLETED)

    def begin_validation(self) -> None:
        if self.status is JobStatus.VALIDATING:
            return
        if self.status is not JobStatus.UPLOADED:
            raise IllegalTransitionError(
                f"Job {self.id} cannot validate from status {self.status}"
            )
        self.status = JobStatus.VALIDATING

    def record_total_rows(self, count: int) -> None:
        """Set the row count discovered by the first parse; later calls are no-ops."""
        if count < 0:
            raise ValueError("Row count must be non-negative")
        if self.total_rows == 0:
            self.total_rows = count

    def validation_window(self, chunk_size: int) -> range:
        end = min(self.processed_rows + chunk_size, self.total_rows)
        return range(self.processed_rows, max(end, self.processed_rows))

    def record_validation_slice(
        self,
        *,
        end: int,
        valid: int,
        invalid: int,
        duplicates: int,
        existing: int,
    ) -> None:
        if end < self.processed_rows or end > self.total_rows:
            raise IllegalTransitionError(
                f"Watermark {end} outside [{self.processed_rows}, {self.total_rows}]"
            )
        if min(valid, invalid, duplicates, existing) < 0:
            raise ValueError("Classification counts must be non-negative")
        self.processed_rows = end
        self.valid_emails += valid
        self.invalid_emails += invalid
        self.duplicate_in_file += duplicates
        self.already_exists_in_db += existing
        self.total_emails_extracted += valid + duplicates + existing

    @property
    def validation_done(self) -> bool:
        return self.processed_rows >= self.total_rows

    @property
    def validation_progress(self) -> int:
        return _percent(self.processed_rows, self.total_rows)

    # Import -------------------------------------------------------------------

    def begin_import(self) -> None:
        if self.status is JobStatus.PROCESSING:
            return
        if self.status is JobStatus.COMPLETED:
            raise IllegalTransitionError(f"Job {self.id} is already completed")
        self.status = JobStatus.PROCESSING

    def record_import_batch(self, *, created: int, failed: int) -> None:
        if created < 0 or failed < 0:
            raise ValueError("Import counts must be non-negative")
        self.created_invites += created
        self.failed_creates += failed
        self.processed_emails += created + failed

    def complete(self, *, at: datetime | None = None) -> None:
        if self.status is not JobStatus.PROCESSING:
            raise IllegalTransitionError(
                f"Job {self.id} cannot complete from status {self.status}"
            )
        self.status = JobStatus.COMPLETED
        self.completed_at = at or utcnow()

    @property
    def import_progress(self) -> int:
        return _percent(self.processed_emails, self.valid_emails)

    @property
    def is_completed(self) -> bool:
        return self.status is JobStatus.COMPLETED


@dataclass(eq=False, kw_only=True)
class ImportJobItem(Entity):
    """One (row, email) occurrence and what became of it.

    A row with no usable email produces a single ``INVALID_EMAIL`` item without
    an email. Only ``VALID`` items are picked up by the import phase, and once
    an item leaves ``VALID`` it is never touched again.
    """

    job_id: UUID
    row_number: int
    status: ItemStatus
    email_raw: str | None = None
    email_normalized: str | None = None
    institution_name_raw: str | None = None
    institution_id: UUID | None = None
    invite_id: UUID | None = None
    reason: str | None = None
    created_at: datetime = field(default_factory=utcnow)

    @property
    def is_pending(self) -> bool:
        return self.status is ItemStatus.VALID and self.invite_id is None

    def mark_created(self, *, invite_id: UUID, institution_id: UUID) -> None:
        self._leave_valid(ItemStatus.CREATED)
        self.invite_id = invite_id
        self.institution_id = institution_id
        self.reason = None

    def mark_failed(self, reason: str) -> None:
        self._leave_valid(ItemStatus.FAILED_CREATE)
        self.reason = reason or "Unknown error"

    def mark_preexisting(self, reason: str = "Found during import phase") -> None:
        self._leave_valid(ItemStatus.ALREADY_EXISTS_DB)
        self.reason = reason

    def _leave_valid(self, target: ItemStatus) -> None:
        if not self.is_pending:
            raise IllegalTransitionError(
                f"Item {self.id} (row {self.row_number}) cannot move from "
                f"{self.status} to {target}"
            )
        self.status = target
