"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import func, select

from maintainerd.adapters.sqlalchemy.mappings import (
    audit_log_table,
    company_table,
    maintainer_project_table,
    maintainer_table,
    project_table,
    service_table,
    service_team_table,
)
from maintainerd.domain.model import (
    AuditLog,
    Company,
    Maintainer,
    Project,
    Service,
    ServiceTeam,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy.orm import Session

log = getLogger(__name__)


class SqlAlchemyProjectRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Project) -> None:
        self.session.add(entity)

    def get_by_name(self, name: str) -> Project | None:
        stmt = select(Project).where(project_table.c.name == name).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_all(self) -> Sequence[Project]:
        stmt = select(Project).order_by(project_table.c.name)
        return self.session.execute(stmt).scalars().all()

    def list_using_service(self, service: Service) -> Sequence[Project]:
        stmt = (
            select(Project)
            .join(service_team_table, service_team_table.c.project_id == project_table.c.id)
            .where(service_team_table.c.service_id == service.id)
            .order_by(project_table.c.name)
        )
        return self.session.execute(stmt).scalars().all()


class SqlAlchemyMaintainerRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Maintainer) -> None:
        self.session.add(entity)

    def get_by_email(self, email: str) -> Maintainer | None:
        stmt = (
            select(Maintainer)
            .where(func.lower(maintainer_table.c.email) == email.strip().lower())
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def get_by_github_account(self, account: str) -> Maintainer | None:
        stmt = (
            select(Maintainer)
            .where(func.lower(maintainer_table.c.github_account) == account.strip().lower())
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_by_project(self, project_id: UUID) -> Sequence[Maintainer]:
        stmt = (
            select(Maintainer)
            .join(
                maintainer_project_table,
                maintainer_project_table.c.maintainer_id == maintainer_table.c.id,
            )
            .where(maintainer_project_table.c.project_id == project_id)
            .order_by(maintainer_table.c.name)
        )
        return self.session.execute(stmt).scalars().all()


class SqlAlchemyCompanyRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Company) -> None:
        self.session.add(entity)

    def get_by_name(self, name: str) -> Company | None:
        stmt = select(Company).where(company_table.c.name == name).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyServiceRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Service) -> None:
        self.session.add(entity)

    def get_by_name(self, name: str) -> Service | None:
        stmt = select(Service).where(service_table.c.name == name).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyServiceTeamRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ServiceTeam) -> None:
        self.session.add(entity)

    def get(self, *, project: Project, service: Service) -> ServiceTeam | None:
        stmt = (
            select(ServiceTeam)
            .where(service_team_table.c.project_id == project.id)
            .where(service_team_table.c.service_id == service.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_for_service(self, service: Service) -> Sequence[ServiceTeam]:
        stmt = (
            select(ServiceTeam)
            .join(project_table, project_table.c.id == service_team_table.c.project_id)
            .where(service_team_table.c.service_id == service.id)
            .order_by(project_table.c.name)
        )
        return self.session.execute(stmt).scalars().all()


class SqlAlchemyAuditLogRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: AuditLog) -> None:
        self.session.add(entity)

    def record(
        self,
        action: str,
        *,
        project: Project | None = None,
        maintainer: Maintainer | None = None,
        service: Service | None = None,
        message: str = "",
    ) -> AuditLog:
        """Add an audit entry to the session; it is written with the next commit."""

        entry = AuditLog(
            action=action,
            message=message,
            project=project,
            maintainer=maintainer,
            service=service,
        )
        self.session.add(entry)
        log.info(
            "Audit log recorded: %s (project=%s, maintainer=%s, service=%s): %s",
            entry.action,
            project.name if project else None,
            maintainer.email if maintainer else None,
            service.name if service else None,
            entry.message,
        )
        return entry

    def list_for_project(self, project_id: UUID) -> Sequence[AuditLog]:
        stmt = (
            select(AuditLog)
            .where(audit_log_table.c.project_id == project_id)
            .order_by(audit_log_table.c.created_at)
        )
        return self.session.execute(stmt).scalars().all()

    def list_by_action(self, action: str) -> Sequence[AuditLog]:
        stmt = (
            select(AuditLog)
            .where(audit_log_table.c.action == action)
            .order_by(audit_log_table.c.created_at)
        )
        return self.session.execute(stmt).scalars().all()


if TYPE_CHECKING:
    from maintainerd.domain.ports.persistence import (
        AuditLogRepository,
        CompanyRepository,
        MaintainerRepository,
        ProjectRepository,
        ServiceRepository,
        ServiceTeamRepository,
    )

    def _check_ports(session: Session) -> None:
        _projects: ProjectRepository = SqlAlchemyProjectRepository(session)
        _maintainers: MaintainerRepository = SqlAlchemyMaintainerRepository(session)
        _companies: CompanyRepository = SqlAlchemyCompanyRepository(session)
        _services: ServiceRepository = SqlAlchemyServiceRepository(session)
        _teams: ServiceTeamRepository = SqlAlchemyServiceTeamRepository(session)
        _audit: AuditLogRepository = SqlAlchemyAuditLogRepository(session)
