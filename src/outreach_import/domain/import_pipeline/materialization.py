"""IMPORT phase: turn VALID items into institutions and invitations."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from outreach_import.domain.errors import ConcurrentSliceError
from outreach_import.domain.import_pipeline.context import AdvanceResult
from outreach_import.domain.model import ImportAction, Institution, Invite

if TYPE_CHECKING:
    from datetime import datetime

    from outreach_import.domain.import_pipeline.context import SliceContext
    from outreach_import.domain.model import ImportJob, ImportJobItem
    from outreach_import.domain.ports import ImportRepositories

log = getLogger(__name__)


@dataclass(slots=True)
class ImportTally:
    created: int = 0
    failed: int = 0


def resolve_institution(
    item: ImportJobItem,
    repositories: ImportRepositories,
    *,
    now: datetime,
) -> Institution | None:
    """Find the item's institution by name, creating a placeholder when unmatched.

    Returns ``None`` when the item already carries an institution id.
    """

    if item.institution_id is not None:
        return None
    name = item.institution_name_raw
    if name:
        existing = repositories.institutions.find_by_name(name)
        if existing is not None:
            return existing
    institution = Institution.placeholder(name, now=now)
    repositories.institutions.add(institution)
    log.info(
        "Created institution %s (%s) for unmatched name %r",
        institution.id,
        institution.registration_number,
        name,
    )
    return institution


@dataclass(slots=True)
class ImportPhase:
    """Drain at most one batch of pending VALID items.

    Every item is materialized inside its own isolated block: a failure rolls
    back that item's institution and invite writes, marks it FAILED_CREATE and
    moves on. The job completes on the first call that finds nothing pending.
    """

    name: str = "import"
    action: ImportAction = ImportAction.IMPORT

    def run(self, job: ImportJob, *, context: SliceContext) -> AdvanceResult:
        if job.is_completed:
            return AdvanceResult.finished(job)

        uow = context.uow
        repositories = uow.repositories
        job.begin_import()

        batch = repositories.items.pending(job.id, limit=context.config.import_batch_size)
        if not batch:
            job.complete(at=context.clock())
            uow.commit()
            log.info(
                "Job %s completed: created=%s, failed=%s",
                job.id,
                job.created_invites,
                job.failed_creates,
            )
            return AdvanceResult.finished(job)

        tally = ImportTally()
        for item in batch:
            if self._materialize(item, context):
                tally.created += 1
            else:
                tally.failed += 1

        job.record_import_batch(created=tally.created, failed=tally.failed)
        uow.commit()

        log.info(
            "Job %s imported batch of %s: created=%s, failed=%s",
            job.id,
            len(batch),
            tally.created,
            tally.failed,
        )
        # Not done even if the queue is now empty: the next call observes that and completes.
        return AdvanceResult(job=job, progress=job.import_progress, done=False)

    def _materialize(self, item: ImportJobItem, context: SliceContext) -> bool:
        repositories = context.uow.repositories
        email = item.email_normalized
        if email is None:
            item.mark_failed("Item has no email address")
            return False

        if repositories.invites.exists_for_email(email):
            item.mark_preexisting()
            return False

        now = context.clock()
        try:
            with context.uow.isolated():
                institution = resolve_institution(item, repositories, now=now)
                institution_id = institution.id if institution else item.institution_id
                if institution_id is None:
                    raise RuntimeError("Institution could not be resolved")
                invite = Invite.issue(
                    email=email,
                    institution_id=institution_id,
                    now=now,
                    ttl=context.config.invite_ttl,
                    invited_by=context.actor,
                )
                repositories.invites.add(invite)
        except ConcurrentSliceError:
            raise
        except Exception as exc:  # noqa: BLE001
            log.warning(
                "Job %s row %s: failed to create invite for %s: %s",
                item.job_id,
                item.row_number,
                email,
                exc,
            )
            item.mark_failed(str(exc) or type(exc).__name__)
            return False

        item.mark_created(invite_id=invite.id, institution_id=institution_id)
        return True
