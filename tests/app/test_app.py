from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from outreach_import import app
from outreach_import.adapters.file_store import HttpFileStore, LocalFileStore, RoutingSourceFetcher
from outreach_import.app import advance_job, job_report, register_upload, run_to_completion
from outreach_import.config import PipelineConfig
from outreach_import.domain.errors import JobNotFoundError
from outreach_import.domain.model import ItemStatus, JobStatus
from tests.helpers.import_jobs import csv_bytes

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from outreach_import.adapters.sqlalchemy.unit_of_work import SqlAlchemyImportUnitOfWork


def test_register_upload_stores_file_and_creates_uploaded_job(
    sqlite_unit_of_work: Callable[[], SqlAlchemyImportUnitOfWork],
    tmp_path: Path,
) -> None:
    store = LocalFileStore(tmp_path)

    job = register_upload("contacts.csv", b"email\na@x.com\n", created_by="ops", store=store)

    assert job.status is JobStatus.UPLOADED
    assert store.fetch(job.source_key) == b"email\na@x.com\n"
    with sqlite_unit_of_work() as uow:
        stored = uow.repositories.jobs.get(job.id)
        assert stored is not None
        assert (stored.file_name, stored.created_by) == ("contacts.csv", "ops")


def test_services_drive_a_job_to_completion_and_report_it(
    sqlite_unit_of_work: Callable[[], SqlAlchemyImportUnitOfWork],
    tmp_path: Path,
) -> None:
    _ = sqlite_unit_of_work
    store = LocalFileStore(tmp_path)
    content = csv_bytes(
        ["Email", "Company"],
        [["a@x.com", "Acme"], ["nobody", "Acme"], ["b@x.com; a@x.com", "Beta"]],
    )
    job = register_upload("contacts.csv", content, store=store)
    config = PipelineConfig(chunk_size=2, import_batch_size=1)

    first = advance_job(job.id, "validate", fetcher=store, config=config)
    assert (first.done, first.progress) == (False, 67)

    result = run_to_completion(job.id, actor="ops", fetcher=store, config=config)

    assert result.done is True
    assert result.job.status is JobStatus.COMPLETED
    assert result.job.created_invites == 2

    report = job_report(job.id)
    assert report.counts == {
        ItemStatus.CREATED: 2,
        ItemStatus.INVALID_EMAIL: 1,
        ItemStatus.DUPLICATE_IN_FILE: 1,
    }
    assert [item.row_number for item in report.items] == [1, 2, 3, 3]

    duplicates = job_report(job.id, status=ItemStatus.DUPLICATE_IN_FILE).items
    assert [item.reason for item in duplicates] == ["Duplicate of row 1"]


def test_report_for_unknown_job_raises(
    sqlite_unit_of_work: Callable[[], SqlAlchemyImportUnitOfWork],
) -> None:
    _ = sqlite_unit_of_work

    with pytest.raises(JobNotFoundError):
        job_report(uuid4())


def test_default_source_store_is_closed_after_each_call(
    sqlite_unit_of_work: Callable[[], SqlAlchemyImportUnitOfWork],
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _ = sqlite_unit_of_work
    opened: list[RoutingSourceFetcher] = []

    def build_store() -> RoutingSourceFetcher:
        store = RoutingSourceFetcher(LocalFileStore(tmp_path), HttpFileStore())
        opened.append(store)
        return store

    monkeypatch.setattr(app, "build_source_store", build_store)

    job = register_upload("contacts.csv", csv_bytes(["email"], [["a@x.com"]]))
    advance_job(job.id, "VALIDATE")
    run_to_completion(job.id)

    assert len(opened) == 3
    assert all(store.remote.is_closed for store in opened)
