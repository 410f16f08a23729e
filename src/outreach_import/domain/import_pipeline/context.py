"""Shared context structures for advancing an import job by one slice."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from outreach_import.config.pipeline import PipelineConfig
from outreach_import.domain.model import utcnow

if TYPE_CHECKING:
    from outreach_import.domain.model import ImportJob
    from outreach_import.domain.ports import ImportUnitOfWork, SourceFetcher

type Clock = Callable[[], datetime]


@dataclass(slots=True)
class SliceContext:
    """Collaborators available to a phase for the duration of one invocation."""

    uow: ImportUnitOfWork
    fetcher: SourceFetcher
    config: PipelineConfig = field(default_factory=PipelineConfig)
    clock: Clock = utcnow
    actor: str | None = None


@dataclass(frozen=True, slots=True)
class AdvanceResult:
    """What a caller sees after one slice: the job, a 0-100 progress, and whether to stop."""

    job: ImportJob
    progress: int
    done: bool

    @classmethod
    def finished(cls, job: ImportJob) -> AdvanceResult:
        return cls(job=job, progress=100, done=True)
