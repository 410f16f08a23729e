"""Errors raised by the outreach import pipeline.

Row-level and item-level defects never surface here: they are recorded on the
persisted items. These exceptions are the job-level failures a caller sees.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class ImportPipelineError(RuntimeError):
    """Base class for job-level pipeline failures."""


class JobNotFoundError(ImportPipelineError, LookupError):
    """Raised when an import job id does not exist."""

    def __init__(self, job_id: UUID) -> None:
        super().__init__(f"Import job {job_id} not found")
        self.job_id = job_id


class UnsupportedActionError(ImportPipelineError, ValueError):
    """Raised for an action other than VALIDATE or IMPORT."""


class IllegalTransitionError(ImportPipelineError, ValueError):
    """Raised when a job or item is asked to move to a status it cannot reach."""


class SourceUnavailableError(ImportPipelineError):
    """Raised when the uploaded file cannot be fetched from its store."""

    def __init__(self, source_key: str, detail: str) -> None:
        super().__init__(f"Source {source_key!r} unavailable: {detail}")
        self.source_key = source_key


class SourceParseError(ImportPipelineError):
    """Raised when the uploaded file cannot be parsed as CSV at all."""


class ConcurrentSliceError(ImportPipelineError):
    """Raised when another invocation advanced the same job first.

    The losing slice is rolled back in full; re-invoking picks up from the
    winner's persisted state.
    """
