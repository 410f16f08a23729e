from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, inspect, update

from outreach_import.adapters.sqlalchemy.mappings import import_job_table
from outreach_import.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyImportUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)
from outreach_import.domain.errors import ConcurrentSliceError
from outreach_import.domain.model import ImportJob, Institution, JobStatus
from tests.helpers.import_jobs import FIXED_NOW

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyImportUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert is_started()
    with SqlAlchemyImportUnitOfWork() as uow:
        assert uow.session.get_bind() is engine_b


def test_unit_of_work_persists_jobs(
    sqlite_unit_of_work: Callable[[], SqlAlchemyImportUnitOfWork],
) -> None:
    job = ImportJob(source_key="uploads/a.csv")
    with sqlite_unit_of_work() as uow:
        uow.repositories.jobs.add(job)
        uow.commit()

    with sqlite_unit_of_work() as uow:
        loaded = uow.repositories.jobs.get(job.id)
        assert loaded is not None
        assert loaded.status is JobStatus.UPLOADED


def test_exception_inside_unit_of_work_rolls_back(
    sqlite_unit_of_work: Callable[[], SqlAlchemyImportUnitOfWork],
) -> None:
    job = ImportJob(source_key="uploads/a.csv")

    with pytest.raises(RuntimeError), sqlite_unit_of_work() as uow:
        uow.repositories.jobs.add(job)
        raise RuntimeError("boom")

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.jobs.get(job.id) is None


def test_isolated_block_discards_only_its_own_writes(
    sqlite_unit_of_work: Callable[[], SqlAlchemyImportUnitOfWork],
) -> None:
    kept = Institution.placeholder("Kept", now=FIXED_NOW)
    discarded = Institution.placeholder("Discarded", now=FIXED_NOW)

    with sqlite_unit_of_work() as uow:
        institutions = uow.repositories.institutions
        with uow.isolated():
            institutions.add(kept)
        with pytest.raises(RuntimeError), uow.isolated():
            institutions.add(discarded)
            assert institutions.find_by_name("Discarded") is not None
            raise RuntimeError("item failed")
        assert institutions.find_by_name("Discarded") is None
        uow.commit()

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.institutions.find_by_name("Kept") is not None
        assert uow.repositories.institutions.find_by_name("Discarded") is None


def test_concurrent_job_update_raises_concurrent_slice_error(
    sqlite_unit_of_work: Callable[[], SqlAlchemyImportUnitOfWork],
) -> None:
    job = ImportJob(source_key="uploads/a.csv", total_rows=10)
    with sqlite_unit_of_work() as uow:
        uow.repositories.jobs.add(job)
        uow.commit()

    with sqlite_unit_of_work() as uow:
        loaded = uow.repositories.jobs.get(job.id)
        assert loaded is not None
        # another invocation advances the same job first
        uow.session.execute(
            update(import_job_table)
            .where(import_job_table.c.id == job.id)
            .values(processed_rows=5, valid_emails=5, version=import_job_table.c.version + 1)
        )
        uow.session.commit()

        loaded.begin_validation()
        loaded.record_validation_slice(end=3, valid=3, invalid=0, duplicates=0, existing=0)
        with pytest.raises(ConcurrentSliceError):
            uow.commit()

    with sqlite_unit_of_work() as uow:
        stored = uow.repositories.jobs.get(job.id)
        assert stored is not None
        assert (stored.processed_rows, stored.valid_emails) == (5, 5)


def test_startup_applies_migrations(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    tables = set(inspect(sqlite_engine).get_table_names())
    assert {"import_job", "import_job_item", "institution", "invite"} <= tables
