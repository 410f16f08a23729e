"""SQLAlchemy adapter package for outreach imports."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyImportJobItemRepository,
    SqlAlchemyImportJobRepository,
    SqlAlchemyInstitutionRepository,
    SqlAlchemyInviteRepository,
)
from .unit_of_work import (
    SqlAlchemyImportUnitOfWork,
    create_database_engine,
    startup,
)

__all__ = [
    "SqlAlchemyImportJobItemRepository",
    "SqlAlchemyImportJobRepository",
    "SqlAlchemyImportUnitOfWork",
    "SqlAlchemyInstitutionRepository",
    "SqlAlchemyInviteRepository",
    "create_database_engine",
    "mapper_registry",
    "start_mappers",
    "startup",
]
