"""SQLAlchemy mapping metadata for the maintainer registry."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    func,
    orm,
)
from sqlalchemy.orm import configure_mappers, relationship

from maintainerd.domain.model import (
    AuditLog,
    Company,
    Maintainer,
    MaintainerStatus,
    Maturity,
    Project,
    Service,
    ServiceTeam,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _enum_values(enum_cls: type[MaintainerStatus] | type[Maturity]) -> list[str]:
    return [member.value for member in enum_cls]


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

company_table = Table(
    "company",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False, unique=True),
)

project_table = Table(
    "project",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False, unique=True),
    Column(
        "parent_project_id",
        UUIDColumnType,
        ForeignKey("project.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    ),
    Column(
        "maturity",
        Enum(Maturity, native_enum=False, values_callable=_enum_values),
        nullable=True,
    ),
    Column("maintainer_ref", String, nullable=True),
    Column("mailing_list", String(254), nullable=True),
)

maintainer_table = Table(
    "maintainer",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False),
    Column("email", String(254), nullable=True, index=True),
    Column("github_account", String(100), nullable=True, index=True),
    Column(
        "status",
        Enum(MaintainerStatus, native_enum=False, values_callable=_enum_values),
        nullable=False,
    ),
    Column(
        "company_id",
        UUIDColumnType,
        ForeignKey("company.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("import_warnings", String, nullable=True),
    Column("registered_at", UTCDateTime(), nullable=True),
)

maintainer_project_table = Table(
    "maintainer_project",
    mapper_registry.metadata,
    Column(
        "maintainer_id",
        UUIDColumnType,
        ForeignKey("maintainer.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "project_id",
        UUIDColumnType,
        ForeignKey("project.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("joined_at", UTCDateTime(), nullable=False, server_default=func.now()),
)

service_table = Table(
    "service",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False, unique=True),
    Column("description", String, nullable=True),
)

service_team_table = Table(
    "service_team",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "project_id",
        UUIDColumnType,
        ForeignKey("project.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "service_id",
        UUIDColumnType,
        ForeignKey("service.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("remote_id", Integer, nullable=False),
    Column("created_at", UTCDateTime(), nullable=True, server_default=func.now()),
    UniqueConstraint("project_id", "service_id", name="uq_service_team_project_service"),
)

audit_log_table = Table(
    "audit_log",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "project_id",
        UUIDColumnType,
        ForeignKey("project.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    ),
    Column(
        "maintainer_id",
        UUIDColumnType,
        ForeignKey("maintainer.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column(
        "service_id",
        UUIDColumnType,
        ForeignKey("service.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("action", String(100), nullable=False),
    Column("message", String, nullable=False),
    Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Company, company_table)

    mapper_registry.map_imperatively(
        Project,
        project_table,
        properties={
            "parent": relationship(
                Project,
                remote_side=[project_table.c.id],
            ),
            "maintainers": relationship(
                Maintainer,
                secondary=maintainer_project_table,
                back_populates="projects",
                order_by=maintainer_table.c.name,
            ),
        },
    )

    mapper_registry.map_imperatively(
        Maintainer,
        maintainer_table,
        properties={
            "company": relationship(Company),
            "projects": relationship(
                Project,
                secondary=maintainer_project_table,
                back_populates="maintainers",
            ),
        },
    )

    mapper_registry.map_imperatively(Service, service_table)

    mapper_registry.map_imperatively(
        ServiceTeam,
        service_team_table,
        properties={
            "project": relationship(Project),
            "service": relationship(Service),
        },
    )

    mapper_registry.map_imperatively(
        AuditLog,
        audit_log_table,
        properties={
            "project": relationship(Project),
            "maintainer": relationship(Maintainer),
            "service": relationship(Service),
        },
    )

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
