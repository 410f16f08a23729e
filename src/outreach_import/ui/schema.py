"""JSON response models printed by the command line."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from pydantic import BaseModel, ConfigDict

from outreach_import.domain.model import ItemStatus, JobStatus  # noqa: TC001

if TYPE_CHECKING:
    from outreach_import.app import JobReport
    from outreach_import.domain.import_pipeline import AdvanceResult


class ResponseModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)


class JobSnapshot(ResponseModel):
    id: UUID
    status: JobStatus
    file_name: str | None
    source_key: str
    created_by: str | None
    total_rows: int
    processed_rows: int
    valid_emails: int
    invalid_emails: int
    duplicate_in_file: int
    already_exists_in_db: int
    total_emails_extracted: int
    created_invites: int
    failed_creates: int
    processed_emails: int
    created_at: datetime
    completed_at: datetime | None


class AdvanceResponse(ResponseModel):
    job: JobSnapshot
    progress: int
    done: bool

    @classmethod
    def from_result(cls, result: AdvanceResult) -> AdvanceResponse:
        return cls(
            job=JobSnapshot.model_validate(result.job),
            progress=result.progress,
            done=result.done,
        )


class ItemSnapshot(ResponseModel):
    row_number: int
    status: ItemStatus
    email_raw: str | None
    email_normalized: str | None
    institution_name_raw: str | None
    institution_id: UUID | None
    invite_id: UUID | None
    reason: str | None


class JobReportResponse(ResponseModel):
    job: JobSnapshot
    counts: dict[ItemStatus, int]
    items: list[ItemSnapshot]

    @classmethod
    def from_report(cls, report: JobReport) -> JobReportResponse:
        return cls(
            job=JobSnapshot.model_validate(report.job),
            counts={status: report.counts.get(status, 0) for status in ItemStatus},
            items=[ItemSnapshot.model_validate(item) for item in report.items],
        )
