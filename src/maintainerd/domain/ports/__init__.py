"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import (
    InvitationSender,
    IssueLike,
    IssueSource,
    TeamLike,
    TeamMembershipProvider,
    WorksheetReader,
)
from .persistence import (
    CompanyRepository,
    MaintainerRepository,
    ProjectRepository,
    Repository,
    ServiceRepository,
    ServiceTeamRepository,
)
from .unit_of_work import RegistryRepositories, RegistryUnitOfWork

__all__ = [
    "CompanyRepository",
    "InvitationSender",
    "IssueLike",
    "IssueSource",
    "MaintainerRepository",
    "ProjectRepository",
    "RegistryRepositories",
    "RegistryUnitOfWork",
    "Repository",
    "ServiceRepository",
    "ServiceTeamRepository",
    "TeamLike",
    "TeamMembershipProvider",
    "WorksheetReader",
]
