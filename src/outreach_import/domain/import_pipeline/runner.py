"""Entry point that advances an import job by exactly one bounded slice."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from outreach_import.config.pipeline import PipelineConfig
from outreach_import.domain.errors import JobNotFoundError, UnsupportedActionError
from outreach_import.domain.import_pipeline.context import SliceContext
from outreach_import.domain.import_pipeline.materialization import ImportPhase
from outreach_import.domain.import_pipeline.validation import ValidationPhase
from outreach_import.domain.model import ImportAction, utcnow

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from uuid import UUID

    from outreach_import.domain.import_pipeline.context import AdvanceResult, Clock
    from outreach_import.domain.import_pipeline.orchestrator import PipelinePhase
    from outreach_import.domain.ports import ImportUnitOfWork, SourceFetcher

log = getLogger(__name__)

PHASES_BY_ACTION: Mapping[ImportAction, PipelinePhase] = {
    ImportAction.VALIDATE: ValidationPhase(),
    ImportAction.IMPORT: ImportPhase(),
}


def coerce_action(action: ImportAction | str) -> ImportAction:
    if isinstance(action, ImportAction):
        return action
    try:
        return ImportAction(str(action).strip().upper())
    except ValueError as exc:
        raise UnsupportedActionError(f"Unsupported action: {action!r}") from exc


def advance(
    job_id: UUID,
    action: ImportAction | str,
    *,
    unit_of_work_factory: Callable[[], ImportUnitOfWork],
    fetcher: SourceFetcher,
    config: PipelineConfig | None = None,
    clock: Clock = utcnow,
    actor: str | None = None,
) -> AdvanceResult:
    """Perform one slice of ``action`` for the job and report where it stands.

    Every call is self-contained: all state is re-read from the unit of work,
    and the slice's writes are committed before returning. Callers poll until
    ``done`` is true.
    """

    phase = PHASES_BY_ACTION[coerce_action(action)]
    with unit_of_work_factory() as uow:
        job = uow.repositories.jobs.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        context = SliceContext(
            uow=uow,
            fetcher=fetcher,
            config=config or PipelineConfig(),
            clock=clock,
            actor=actor,
        )
        log.debug("Advancing job %s: %s (status %s)", job_id, phase.name, job.status)
        return phase.run(job, context=context)


def run_to_completion(
    job_id: UUID,
    *,
    unit_of_work_factory: Callable[[], ImportUnitOfWork],
    fetcher: SourceFetcher,
    config: PipelineConfig | None = None,
    clock: Clock = utcnow,
    actor: str | None = None,
    max_slices: int | None = None,
) -> AdvanceResult:
    """Drive VALIDATE and then IMPORT until the job completes.

    ``max_slices`` bounds the number of ``advance`` calls across both phases;
    when it runs out the last (not done) result is returned.
    """

    if max_slices is not None and max_slices <= 0:
        raise ValueError("max_slices must be positive")

    result: AdvanceResult | None = None
    slices = 0
    for action in (ImportAction.VALIDATE, ImportAction.IMPORT):
        while True:
            if max_slices is not None and slices >= max_slices:
                assert result is not None
                return result
            result = advance(
                job_id,
                action,
                unit_of_work_factory=unit_of_work_factory,
                fetcher=fetcher,
                config=config,
                clock=clock,
                actor=actor,
            )
            slices += 1
            if result.done:
                break
    assert result is not None
    return result
