"""Phase contract shared by the validation and import drivers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from outreach_import.domain.import_pipeline.context import AdvanceResult, SliceContext
    from outreach_import.domain.model import ImportAction, ImportJob


class PipelinePhase(Protocol):
    """Contract implemented by each phase driver.

    ``run`` performs one bounded slice of work against ``job`` inside the
    context's unit of work and commits it; it never loops until done.
    """

    name: str
    action: ImportAction

    def run(self, job: ImportJob, *, context: SliceContext) -> AdvanceResult: ...
