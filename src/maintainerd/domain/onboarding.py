"""Project onboarding: checklist tasks and FOSSA sign-up."""

from __future__ import annotations

import re
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from maintainerd.domain.fossa_sync import (
    FossaInvitationSender,
    LoggingOutcomeConsumer,
    reconcile_fossa_teams,
    require_fossa_service,
)
from maintainerd.domain.model import ServiceTeam

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from maintainerd.domain.fossa_sync import TeamSettingsUrl
    from maintainerd.domain.ports.fetching import (
        InvitationSender,
        IssueSource,
        TeamMembershipProvider,
    )
    from maintainerd.domain.ports.unit_of_work import RegistryUnitOfWork
    from maintainerd.domain.reconciliation import ReconciliationOutcome

log = getLogger(__name__)

_TITLE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^\s*\[\s*project\s+onboarding\s*\]\s*(?P<name>.*?)\s*$",
    re.IGNORECASE,
)
_TASK_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^\s*[-*+]\s+\[(?P<mark>[ xX])\]\s+(?P<description>.+?)\s*$"
)

SIGN_UP_ACTION: Final[str] = "fossa_sign_up"


class UnknownProjectError(LookupError):
    """Raised when an onboarding request names a project missing from the registry."""


@dataclass(slots=True, frozen=True)
class OnboardingTask:
    project: str
    description: str
    done: bool


def project_name_from_title(title: str) -> str:
    """Extract ``name`` from an issue titled ``[PROJECT ONBOARDING] name``."""

    match = _TITLE_PATTERN.match(title or "")
    if match is None or not match.group("name"):
        raise ValueError(f"Not a project onboarding title: {title!r}")
    return match.group("name")


def onboarding_tasks(project: str, body: str | None) -> list[OnboardingTask]:
    """Return the markdown checklist items of an onboarding issue body."""

    tasks: list[OnboardingTask] = []
    for line in (body or "").splitlines():
        match = _TASK_PATTERN.match(line)
        if match is None:
            continue
        tasks.append(
            OnboardingTask(
                project=project,
                description=match.group("description"),
                done=match.group("mark") != " ",
            )
        )
    return tasks


def fetch_onboarding_tasks(
    source: IssueSource,
    *,
    owner: str,
    repo: str,
    labels: Sequence[str],
) -> list[OnboardingTask]:
    tasks: list[OnboardingTask] = []
    for issue in source.list_issues(owner, repo, labels):
        if issue.is_pull_request:
            continue
        try:
            project = project_name_from_title(issue.title)
        except ValueError:
            log.warning("Failed to parse project name for issue %d: %r", issue.number, issue.title)
            continue
        tasks.extend(onboarding_tasks(project, issue.body))
    return tasks


@dataclass(slots=True, frozen=True)
class SignUpResult:
    project_name: str
    team_id: int
    newly_linked: bool
    outcome: ReconciliationOutcome | None
    invited: tuple[str, ...]


@dataclass(slots=True)
class FossaOnboarding:
    """Signs a registered project up for FOSSA.

    The project's FOSSA team is created (or reused when it exists), recorded
    as the project's FOSSA service team, and its missing maintainers are
    invited.
    """

    unit_of_work_factory: Callable[[], RegistryUnitOfWork]
    teams: TeamMembershipProvider
    invitations: InvitationSender
    benign_errors: tuple[type[Exception], ...] = ()
    team_settings_url: TeamSettingsUrl | None = None

    def sign_up(self, project_name: str) -> SignUpResult:
        team_id, linked = self._ensure_team(project_name)

        sender = FossaInvitationSender(
            self.invitations,
            benign_errors=self.benign_errors,
            unit_of_work_factory=self.unit_of_work_factory,
        )
        outcomes = reconcile_fossa_teams(
            self.unit_of_work_factory,
            self.teams,
            (LoggingOutcomeConsumer(), sender),
            project_names=(project_name,),
            team_settings_url=self.team_settings_url,
        )
        outcome = outcomes[0][1] if outcomes else None
        return SignUpResult(
            project_name=project_name,
            team_id=team_id,
            newly_linked=linked,
            outcome=outcome,
            invited=tuple(sender.sent),
        )

    def _ensure_team(self, project_name: str) -> tuple[int, bool]:
        with self.unit_of_work_factory() as uow:
            repositories = uow.repositories
            project = repositories.projects.get_by_name(project_name)
            if project is None:
                raise UnknownProjectError(f"Project {project_name!r} is not registered")
            fossa = require_fossa_service(repositories)

            existing = repositories.service_teams.get(project=project, service=fossa)
            if existing is not None:
                log.info("%s already has FOSSA team %d", project_name, existing.remote_id)
                return existing.remote_id, False

            team = self.teams.create_team(project.name)
            repositories.service_teams.add(
                ServiceTeam(project=project, service=fossa, remote_id=team.id)
            )
            repositories.audit_log.record(
                SIGN_UP_ACTION,
                project=project,
                service=fossa,
                message=f"Signed {project.name} up for FOSSA with team {team.id}",
            )
            uow.commit()
        log.info("Signed %s up for FOSSA with team %d", project_name, team.id)
        return team.id, True
