"""Ports for persisting registry aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

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


TEntity = TypeVar("TEntity")


@runtime_checkable
class Repository(Protocol[TEntity]):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class ProjectRepository(Repository[Project], Protocol):
    def get_by_name(self, name: str) -> Project | None: ...

    def list_all(self) -> Sequence[Project]: ...

    def list_using_service(self, service: Service) -> Sequence[Project]: ...


@runtime_checkable
class MaintainerRepository(Repository[Maintainer], Protocol):
    def get_by_email(self, email: str) -> Maintainer | None: ...

    def get_by_github_account(self, account: str) -> Maintainer | None: ...

    def list_by_project(self, project_id: UUID) -> Sequence[Maintainer]: ...


@runtime_checkable
class CompanyRepository(Repository[Company], Protocol):
    def get_by_name(self, name: str) -> Company | None: ...


@runtime_checkable
class ServiceRepository(Repository[Service], Protocol):
    def get_by_name(self, name: str) -> Service | None: ...


@runtime_checkable
class ServiceTeamRepository(Repository[ServiceTeam], Protocol):
    def get(self, *, project: Project, service: Service) -> ServiceTeam | None: ...

    def list_for_service(self, service: Service) -> Sequence[ServiceTeam]: ...


@runtime_checkable
class AuditLogRepository(Repository[AuditLog], Protocol):
    def record(
        self,
        action: str,
        *,
        project: Project | None = None,
        maintainer: Maintainer | None = None,
        service: Service | None = None,
        message: str = "",
    ) -> AuditLog: ...

    def list_for_project(self, project_id: UUID) -> Sequence[AuditLog]: ...

    def list_by_action(self, action: str) -> Sequence[AuditLog]: ...
