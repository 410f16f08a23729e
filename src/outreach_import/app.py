"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import ExitStack
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from outreach_import.adapters.file_store import build_source_store
from outreach_import.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyImportUnitOfWork,
    is_started,
    startup,
)
from outreach_import.config import get_pipeline_config
from outreach_import.domain import import_pipeline
from outreach_import.domain.errors import JobNotFoundError
from outreach_import.domain.model import ImportJob
from outreach_import.domain.ports import ImportUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from outreach_import.config import PipelineConfig
    from outreach_import.domain.import_pipeline import AdvanceResult
    from outreach_import.domain.model import ImportAction, ImportJobItem, ItemStatus
    from outreach_import.domain.ports import SourceFetcher, SourceStore

UnitOfWorkFactory = Callable[[], ImportUnitOfWork]


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class JobReport:
    job: ImportJob
    counts: dict[ItemStatus, int]
    items: Sequence[ImportJobItem]


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyImportUnitOfWork


def register_upload(
    file_name: str,
    content: bytes,
    *,
    created_by: str | None = None,
    store: SourceStore | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ImportJob:
    """Store an uploaded file and create the UPLOADED job that will process it."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    with ExitStack() as stack:
        effective_store = store or stack.enter_context(build_source_store())
        source_key = effective_store.put(file_name, content)

    job = ImportJob(source_key=source_key, file_name=file_name, created_by=created_by)
    with effective_uow() as uow:
        uow.repositories.jobs.add(job)
        uow.commit()

    log.info("Registered import job %s for %s (%s bytes)", job.id, file_name, len(content))
    return job


def advance_job(
    job_id: UUID,
    action: ImportAction | str,
    *,
    actor: str | None = None,
    fetcher: SourceFetcher | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: PipelineConfig | None = None,
) -> AdvanceResult:
    """Advance a job by one slice using the configured adapters."""

    with ExitStack() as stack:
        result = import_pipeline.advance(
            job_id,
            action,
            unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
            fetcher=fetcher or stack.enter_context(build_source_store()),
            config=config or get_pipeline_config(),
            actor=actor,
        )
    log.info(
        "Job %s: %s progress=%s%% done=%s status=%s",
        job_id,
        action,
        result.progress,
        result.done,
        result.job.status,
    )
    return result


def run_to_completion(
    job_id: UUID,
    *,
    actor: str | None = None,
    max_slices: int | None = None,
    fetcher: SourceFetcher | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: PipelineConfig | None = None,
) -> AdvanceResult:
    """Validate and then import a job, one slice after another."""

    log.info("Running job %s to completion (max_slices=%s)", job_id, max_slices)
    with ExitStack() as stack:
        result = import_pipeline.run_to_completion(
            job_id,
            unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
            fetcher=fetcher or stack.enter_context(build_source_store()),
            config=config or get_pipeline_config(),
            actor=actor,
            max_slices=max_slices,
        )
    job = result.job
    log.info(
        "Finished job %s: status=%s, valid=%s, created=%s, failed=%s",
        job_id,
        job.status,
        job.valid_emails,
        job.created_invites,
        job.failed_creates,
    )
    return result


def job_report(
    job_id: UUID,
    *,
    status: ItemStatus | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> JobReport:
    """Snapshot a job with its per-status item counts and (optionally filtered) items."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    with effective_uow() as uow:
        repositories = uow.repositories
        job = repositories.jobs.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return JobReport(
            job=job,
            counts=repositories.items.count_by_status(job_id),
            items=list(repositories.items.list_for_job(job_id, status=status)),
        )
