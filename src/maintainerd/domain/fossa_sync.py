"""Application services keeping FOSSA teams in line with the maintainer registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final, Protocol, TypeAlias

from maintainerd.domain.model import Service, ServiceName, ServiceTeam
from maintainerd.domain.reconciliation import ProjectMembershipSnapshot, reconcile

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from maintainerd.domain.ports.fetching import InvitationSender, TeamMembershipProvider
    from maintainerd.domain.ports.unit_of_work import RegistryRepositories, RegistryUnitOfWork
    from maintainerd.domain.reconciliation import ReconciliationOutcome

log = getLogger(__name__)

TeamSettingsUrl: TypeAlias = "Callable[[int], str]"

INVITATION_SENT_ACTION: Final[str] = "fossa_invitation_sent"


class ServiceNotRegisteredError(RuntimeError):
    """Raised when the FOSSA service row is missing; run the seed first."""


class OutcomeConsumer(Protocol):
    """Receives the reconciliation outcome of one project."""

    def __call__(self, project_name: str, outcome: ReconciliationOutcome) -> None: ...


@dataclass(slots=True, frozen=True)
class LinkTeamsResult:
    linked: int
    already_linked: int
    unmatched_teams: tuple[str, ...]


def require_fossa_service(repositories: RegistryRepositories) -> Service:
    service = repositories.services.get_by_name(ServiceName.FOSSA)
    if service is None:
        raise ServiceNotRegisteredError(f"Service {ServiceName.FOSSA!s} is not registered")
    return service


def link_fossa_teams(
    unit_of_work_factory: Callable[[], RegistryUnitOfWork],
    client: TeamMembershipProvider,
) -> LinkTeamsResult:
    """Record a FOSSA service team for every project whose name matches a FOSSA team."""

    teams = client.fetch_teams_map()
    linked = 0
    already_linked = 0
    unmatched: list[str] = []

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        fossa = require_fossa_service(repositories)
        for team_name, team in sorted(teams.items()):
            project = repositories.projects.get_by_name(team_name)
            if project is None:
                unmatched.append(team_name)
                continue
            existing = repositories.service_teams.get(project=project, service=fossa)
            if existing is not None:
                if existing.remote_id != team.id:
                    log.warning(
                        "Project %s is linked to FOSSA team %d, FOSSA reports team %d",
                        project.name,
                        existing.remote_id,
                        team.id,
                    )
                already_linked += 1
                continue
            repositories.service_teams.add(
                ServiceTeam(project=project, service=fossa, remote_id=team.id)
            )
            linked += 1
        uow.commit()

    log.info(
        "Linked %d FOSSA teams (%d already linked, %d without a project)",
        linked,
        already_linked,
        len(unmatched),
    )
    return LinkTeamsResult(
        linked=linked,
        already_linked=already_linked,
        unmatched_teams=tuple(unmatched),
    )


@dataclass(slots=True, frozen=True)
class _RegisteredTeam:
    project_name: str
    team_id: int
    emails: tuple[str | None, ...]


def _registered_fossa_teams(
    unit_of_work_factory: Callable[[], RegistryUnitOfWork],
    project_names: Iterable[str] | None = None,
) -> list[_RegisteredTeam]:
    wanted = set(project_names) if project_names is not None else None
    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        fossa = require_fossa_service(repositories)
        teams: list[_RegisteredTeam] = []
        for service_team in repositories.service_teams.list_for_service(fossa):
            project = service_team.project
            if wanted is not None and project.name not in wanted:
                continue
            maintainers = repositories.maintainers.list_by_project(project.id)
            teams.append(
                _RegisteredTeam(
                    project_name=project.name,
                    team_id=service_team.remote_id,
                    emails=tuple(maintainer.email for maintainer in maintainers),
                )
            )
    return teams


def reconcile_fossa_teams(
    unit_of_work_factory: Callable[[], RegistryUnitOfWork],
    client: TeamMembershipProvider,
    consumers: Sequence[OutcomeConsumer] = (),
    *,
    project_names: Iterable[str] | None = None,
    team_settings_url: TeamSettingsUrl | None = None,
) -> list[tuple[str, ReconciliationOutcome]]:
    """Reconcile each FOSSA-linked project and hand every outcome to the consumers.

    Registered e-mails are read from the registry first; provider listings are
    then fetched team by team. A provider failure for one team is logged and
    that project is left out of the results. A consumer failure is logged too;
    the outcome stays in the results and the remaining consumers and projects
    still run.
    """

    outcomes: list[tuple[str, ReconciliationOutcome]] = []
    for team in _registered_fossa_teams(unit_of_work_factory, project_names):
        settings = team_settings_url(team.team_id) if team_settings_url else team.team_id
        try:
            member_emails = client.fetch_team_member_emails(team.team_id)
        except Exception:
            log.exception(
                "Unable to list FOSSA team members of %s, check %s",
                team.project_name,
                settings,
            )
            continue
        snapshot = ProjectMembershipSnapshot.capture(
            team.project_name,
            registered=team.emails,
            external=member_emails,
        )
        outcome = reconcile(snapshot)
        outcomes.append((team.project_name, outcome))
        for consumer in consumers:
            try:
                consumer(team.project_name, outcome)
            except Exception:
                log.exception(
                    "Unable to act on the FOSSA reconciliation of %s, check %s",
                    team.project_name,
                    settings,
                )
    return outcomes


class LoggingOutcomeConsumer:
    """Surfaces reconciliation outcomes through the log."""

    def __call__(self, project_name: str, outcome: ReconciliationOutcome) -> None:
        if outcome.fully_covered:
            log.info("%s: all registered maintainers are FOSSA team members", project_name)
        else:
            log.info(
                "%s: %d maintainers to invite: %s",
                project_name,
                len(outcome.missing_externally),
                ", ".join(outcome.missing_externally),
            )
        if outcome.unregistered_external:
            log.info(
                "%s: %d FOSSA team members are not registered maintainers: %s",
                project_name,
                len(outcome.unregistered_external),
                ", ".join(outcome.unregistered_external),
            )
        if outcome.invalid_registered or outcome.invalid_external:
            log.warning(
                "%s: ignored %d registered and %d FOSSA entries without a usable e-mail",
                project_name,
                outcome.invalid_registered,
                outcome.invalid_external,
            )


@dataclass(slots=True)
class FossaInvitationSender:
    """Invites the registered maintainers missing from a FOSSA team.

    ``benign_errors`` are provider errors meaning the person is already invited
    or already a member; they are logged and counted, not raised. With a
    ``unit_of_work_factory`` every sent invitation is also written to the
    audit log.
    """

    sender: InvitationSender
    benign_errors: tuple[type[Exception], ...] = ()
    unit_of_work_factory: Callable[[], RegistryUnitOfWork] | None = None
    sent: list[str] = field(default_factory=list[str])
    skipped: list[str] = field(default_factory=list[str])

    def __call__(self, project_name: str, outcome: ReconciliationOutcome) -> None:
        for email in outcome.missing_externally:
            try:
                self.sender.send_user_invitation(email)
            except self.benign_errors as exc:
                log.info("%s: not inviting %s: %s", project_name, email, exc)
                self.skipped.append(email)
                continue
            log.info("%s: invited %s to FOSSA", project_name, email)
            self.sent.append(email)
            self._record_invitation(project_name, email)

    def _record_invitation(self, project_name: str, email: str) -> None:
        if self.unit_of_work_factory is None:
            return
        with self.unit_of_work_factory() as uow:
            repositories = uow.repositories
            repositories.audit_log.record(
                INVITATION_SENT_ACTION,
                project=repositories.projects.get_by_name(project_name),
                maintainer=repositories.maintainers.get_by_email(email),
                service=repositories.services.get_by_name(ServiceName.FOSSA),
                message=f"Invited {email} to FOSSA for {project_name}",
            )
            uow.commit()
