"""VALIDATE phase: classify the next window of source rows."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from outreach_import.domain.import_pipeline.context import AdvanceResult
from outreach_import.domain.import_pipeline.deduplication import (
    DedupLookup,
    classify_rows,
    slice_emails,
)
from outreach_import.domain.import_pipeline.normalization import HeaderProfile, normalize_row
from outreach_import.domain.import_pipeline.rows import parse_rows
from outreach_import.domain.model import ImportAction

if TYPE_CHECKING:
    from outreach_import.domain.import_pipeline.context import SliceContext
    from outreach_import.domain.model import ImportJob

log = getLogger(__name__)


@dataclass(slots=True)
class ValidationPhase:
    """Advance the row watermark by at most one chunk.

    The source is fetched and parsed on every call; only the watermark and the
    counters persist between calls. Status change, item inserts and watermark
    move are committed together, so a failure anywhere leaves the job exactly
    as it was and the next call retries the same window.
    """

    name: str = "validation"
    action: ImportAction = ImportAction.VALIDATE

    def run(self, job: ImportJob, *, context: SliceContext) -> AdvanceResult:
        if job.validation_closed:
            return AdvanceResult.finished(job)

        uow = context.uow
        job.begin_validation()

        source = parse_rows(context.fetcher.fetch(job.source_key))
        job.record_total_rows(len(source))

        window = job.validation_window(context.config.chunk_size)
        if not window:
            # Nothing left to classify; persist a pending UPLOADED -> VALIDATING move.
            uow.commit()
            return AdvanceResult.finished(job)

        profile = HeaderProfile.from_labels(source.header)
        if profile.ambiguous_labels:
            log.warning(
                "Job %s: columns %s look like both email and organization columns; "
                "treating them as organization names",
                job.id,
                ", ".join(profile.ambiguous_labels),
            )

        rows = [
            normalize_row(source.rows[index], index + 1, profile) for index in window
        ]
        lookup = DedupLookup.load(job.id, slice_emails(rows), uow.repositories)
        classified = classify_rows(job.id, rows, lookup, now=context.clock())

        uow.repositories.items.add_all(classified.items)
        tally = classified.tally
        job.record_validation_slice(
            end=window.stop,
            valid=tally.valid,
            invalid=tally.invalid,
            duplicates=tally.duplicates,
            existing=tally.existing,
        )
        uow.commit()

        log.info(
            "Job %s validated rows %s-%s of %s: valid=%s, invalid=%s, duplicate=%s, existing=%s",
            job.id,
            window.start + 1,
            window.stop,
            job.total_rows,
            tally.valid,
            tally.invalid,
            tally.duplicates,
            tally.existing,
        )
        return AdvanceResult(
            job=job,
            progress=job.validation_progress,
            done=job.validation_done,
        )
