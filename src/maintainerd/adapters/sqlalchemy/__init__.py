"""SQLAlchemy adapter package for the maintainer registry."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyAuditLogRepository,
    SqlAlchemyCompanyRepository,
    SqlAlchemyMaintainerRepository,
    SqlAlchemyProjectRepository,
    SqlAlchemyServiceRepository,
    SqlAlchemyServiceTeamRepository,
)
from .unit_of_work import SqlAlchemyRegistryUnitOfWork, shutdown, startup

__all__ = [
    "SqlAlchemyAuditLogRepository",
    "SqlAlchemyCompanyRepository",
    "SqlAlchemyMaintainerRepository",
    "SqlAlchemyProjectRepository",
    "SqlAlchemyRegistryUnitOfWork",
    "SqlAlchemyServiceRepository",
    "SqlAlchemyServiceTeamRepository",
    "create_all_tables",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
