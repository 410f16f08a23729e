"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from contextlib import AbstractContextManager
    from types import TracebackType

    from outreach_import.domain.ports.persistence import (
        ImportJobItemRepository,
        ImportJobRepository,
        InstitutionRepository,
        InviteRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection.

    Everything written between ``__enter__`` and ``commit`` lands atomically or
    not at all. ``isolated`` opens a nested boundary: writes made inside it are
    discarded if it exits with an exception, while the outer unit stays usable.
    """

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def isolated(self) -> AbstractContextManager[None]: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class ImportRepositories(RepositoryCollection):
    """Repositories required to advance an import job."""

    jobs: ImportJobRepository
    items: ImportJobItemRepository
    invites: InviteRepository
    institutions: InstitutionRepository


type ImportUnitOfWork = UnitOfWork[ImportRepositories]
