"""Domain ports (interfaces) for adapters to implement."""

from __future__ import annotations

from .fetching import SourceFetcher, SourceStore
from .persistence import (
    ImportJobItemRepository,
    ImportJobRepository,
    InstitutionRepository,
    InviteRepository,
    Repository,
)
from .unit_of_work import ImportRepositories, ImportUnitOfWork, RepositoryCollection, UnitOfWork

__all__ = [
    "ImportJobItemRepository",
    "ImportJobRepository",
    "ImportRepositories",
    "ImportUnitOfWork",
    "InstitutionRepository",
    "InviteRepository",
    "Repository",
    "RepositoryCollection",
    "SourceFetcher",
    "SourceStore",
    "UnitOfWork",
]
