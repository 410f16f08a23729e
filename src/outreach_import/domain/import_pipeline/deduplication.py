"""Classify each (row, email) occurrence of a slice against three dedup sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from outreach_import.domain.model import DEDUP_SOURCE_STATUSES, ImportJobItem, ItemStatus

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Mapping
    from datetime import datetime
    from uuid import UUID

    from outreach_import.domain.import_pipeline.normalization import NormalizedRow
    from outreach_import.domain.ports import ImportRepositories

NO_VALID_EMAILS = "No valid emails found"
INVITE_EXISTS = "Invite already exists"


def duplicate_of_row(row_number: int) -> str:
    return f"Duplicate of row {row_number}"


def duplicate_in_batch(row_number: int) -> str:
    return f"Duplicate of row {row_number} in current batch"


@dataclass(frozen=True, slots=True)
class DedupLookup:
    """What the stores already know about the emails of one slice."""

    prior_row_of: Mapping[str, int] = field(default_factory=dict[str, int])
    exists_in_store: frozenset[str] = frozenset()

    @classmethod
    def load(
        cls,
        job_id: UUID,
        emails: Collection[str],
        repositories: ImportRepositories,
    ) -> DedupLookup:
        """Issue one bulk read per dedup store for the whole slice."""

        if not emails:
            return cls()
        prior = repositories.items.earliest_rows(job_id, emails, DEDUP_SOURCE_STATUSES)
        existing = repositories.invites.existing_emails(emails)
        return cls(prior_row_of=dict(prior), exists_in_store=frozenset(existing))


@dataclass(slots=True)
class ClassificationTally:
    valid: int = 0
    invalid: int = 0
    duplicates: int = 0
    existing: int = 0

    def record(self, status: ItemStatus) -> None:
        match status:
            case ItemStatus.VALID:
                self.valid += 1
            case ItemStatus.INVALID_EMAIL:
                self.invalid += 1
            case ItemStatus.DUPLICATE_IN_FILE:
                self.duplicates += 1
            case ItemStatus.ALREADY_EXISTS_DB:
                self.existing += 1
            case _:
                raise ValueError(f"{status} is not a validation outcome")

    @property
    def emails_extracted(self) -> int:
        return self.valid + self.duplicates + self.existing


@dataclass(slots=True)
class DedupResolver:
    """Stateful classifier for a single slice.

    Precedence per occurrence: an earlier chunk of the same job, then an earlier
    row of this slice, then an existing invitation, else valid. The first
    occurrence of an unknown email takes the VALID slot; every later occurrence
    is recorded as a duplicate.
    """

    lookup: DedupLookup
    seen_in_chunk: dict[str, int] = field(default_factory=dict[str, int])

    def classify(self, email: str, row_number: int) -> tuple[ItemStatus, str | None]:
        prior_row = self.lookup.prior_row_of.get(email)
        if prior_row is not None:
            return ItemStatus.DUPLICATE_IN_FILE, duplicate_of_row(prior_row)
        first_row = self.seen_in_chunk.get(email)
        if first_row is not None:
            return ItemStatus.DUPLICATE_IN_FILE, duplicate_in_batch(first_row)
        self.seen_in_chunk[email] = row_number
        if email in self.lookup.exists_in_store:
            return ItemStatus.ALREADY_EXISTS_DB, INVITE_EXISTS
        return ItemStatus.VALID, None


@dataclass(slots=True)
class ClassifiedSlice:
    items: list[ImportJobItem] = field(default_factory=list[ImportJobItem])
    tally: ClassificationTally = field(default_factory=ClassificationTally)

    def append(self, item: ImportJobItem) -> None:
        self.items.append(item)
        self.tally.record(item.status)


def slice_emails(rows: Iterable[NormalizedRow]) -> set[str]:
    return {email for row in rows for email in row.normalized_emails}


def classify_rows(
    job_id: UUID,
    rows: Iterable[NormalizedRow],
    lookup: DedupLookup,
    *,
    now: datetime,
) -> ClassifiedSlice:
    """Produce exactly one item per extracted email, or one INVALID_EMAIL item per empty row."""

    resolver = DedupResolver(lookup)
    classified = ClassifiedSlice()
    for row in sorted(rows, key=lambda candidate: candidate.row_number):
        if not row.emails:
            classified.append(
                ImportJobItem(
                    job_id=job_id,
                    row_number=row.row_number,
                    institution_name_raw=row.institution_name,
                    status=ItemStatus.INVALID_EMAIL,
                    reason=NO_VALID_EMAILS,
                    created_at=now,
                )
            )
            continue
        for candidate in row.emails:
            status, reason = resolver.classify(candidate.normalized, row.row_number)
            classified.append(
                ImportJobItem(
                    job_id=job_id,
                    row_number=row.row_number,
                    email_raw=candidate.raw,
                    email_normalized=candidate.normalized,
                    institution_name_raw=row.institution_name,
                    status=status,
                    reason=reason,
                    created_at=now,
                )
            )
    return classified
