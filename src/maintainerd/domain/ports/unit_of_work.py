"""Transaction boundary around the registry repositories."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, Self

if TYPE_CHECKING:
    from types import TracebackType

    from maintainerd.domain.ports.persistence import (
        AuditLogRepository,
        CompanyRepository,
        MaintainerRepository,
        ProjectRepository,
        ServiceRepository,
        ServiceTeamRepository,
    )


@dataclass(slots=True)
class RegistryRepositories:
    projects: ProjectRepository
    maintainers: MaintainerRepository
    companies: CompanyRepository
    services: ServiceRepository
    service_teams: ServiceTeamRepository
    audit_log: AuditLogRepository


class RegistryUnitOfWork(Protocol):
    """Context manager owning one transaction; nothing is committed implicitly."""

    @property
    def repositories(self) -> RegistryRepositories: ...

    def __enter__(self) -> Self: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool | None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def savepoint(self) -> AbstractContextManager[object]:
        """Nested transaction; rolled back on its own if the block raises."""
        ...
