"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from maintainerd.adapters.fossa import (
    FossaClient,
    InvitationAlreadyExistsError,
    UserAlreadyMemberError,
)
from maintainerd.adapters.github import GitHubIssuesClient
from maintainerd.adapters.sheets import SheetsValuesReader
from maintainerd.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyRegistryUnitOfWork,
    is_started,
    startup,
)
from maintainerd.config import get_github_config
from maintainerd.domain.fossa_sync import (
    FossaInvitationSender,
    LinkTeamsResult,
    LoggingOutcomeConsumer,
    OutcomeConsumer,
    link_fossa_teams,
    reconcile_fossa_teams,
)
from maintainerd.domain.onboarding import FossaOnboarding, OnboardingTask, fetch_onboarding_tasks
from maintainerd.domain.ports.unit_of_work import RegistryUnitOfWork
from maintainerd.domain.registry_import import (
    ImportSummary,
    import_registry_rows,
    rows_from_values,
    seed_services,
)

if TYPE_CHECKING:
    from maintainerd.config import GitHubConfig
    from maintainerd.domain.ports.fetching import IssueSource, WorksheetReader
    from maintainerd.domain.reconciliation import ReconciliationOutcome

UnitOfWorkFactory = Callable[[], RegistryUnitOfWork]

BENIGN_INVITATION_ERRORS: tuple[type[Exception], ...] = (
    InvitationAlreadyExistsError,
    UserAlreadyMemberError,
)

log = getLogger(__name__)


@dataclass(slots=True)
class SeedResult:
    services: int
    imported: ImportSummary
    fossa_teams: LinkTeamsResult | None


def _ensure_started() -> None:
    if not is_started():
        startup()


def seed_registry(
    *,
    reader: WorksheetReader | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    fossa_client: FossaClient | None = None,
    link_fossa: bool = True,
) -> SeedResult:
    """Seed services, projects and maintainers, then link the existing FOSSA teams."""

    _ensure_started()
    effective_uow = unit_of_work_factory or SqlAlchemyRegistryUnitOfWork
    effective_reader = reader or SheetsValuesReader()

    services = seed_services(effective_uow)
    rows = rows_from_values(effective_reader())
    log.info("Importing %d worksheet rows", len(rows))
    summary = import_registry_rows(rows, effective_uow)

    linked: LinkTeamsResult | None = None
    if link_fossa:
        linked = link_fossa_teams(effective_uow, fossa_client or FossaClient())

    return SeedResult(services=len(services), imported=summary, fossa_teams=linked)


def reconcile_fossa(
    *,
    invite: bool = False,
    client: FossaClient | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[tuple[str, ReconciliationOutcome]]:
    """Reconcile every FOSSA-linked project; optionally invite missing maintainers."""

    _ensure_started()
    effective_client = client or FossaClient()
    effective_uow = unit_of_work_factory or SqlAlchemyRegistryUnitOfWork
    consumers: list[OutcomeConsumer] = [LoggingOutcomeConsumer()]
    sender: FossaInvitationSender | None = None
    if invite:
        sender = FossaInvitationSender(
            effective_client,
            benign_errors=BENIGN_INVITATION_ERRORS,
            unit_of_work_factory=effective_uow,
        )
        consumers.append(sender)

    outcomes = reconcile_fossa_teams(
        effective_uow,
        effective_client,
        consumers,
        team_settings_url=effective_client.config.team_settings_url,
    )

    covered = sum(1 for _, outcome in outcomes if outcome.fully_covered)
    log.info(
        "Reconciled %d FOSSA teams: %d fully covered, %d with missing maintainers",
        len(outcomes),
        covered,
        len(outcomes) - covered,
    )
    if sender is not None:
        log.info(
            "Sent %d invitations, %d already pending or accepted",
            len(sender.sent),
            len(sender.skipped),
        )
    return outcomes


def list_onboarding_tasks(
    *,
    source: IssueSource | None = None,
    config: GitHubConfig | None = None,
) -> list[OnboardingTask]:
    effective_config = config or get_github_config()
    effective_source = source or GitHubIssuesClient(config=effective_config)
    return fetch_onboarding_tasks(
        effective_source,
        owner=effective_config.org,
        repo=effective_config.repo,
        labels=effective_config.onboarding_labels,
    )


def build_fossa_onboarding(
    *,
    client: FossaClient | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> FossaOnboarding:
    _ensure_started()
    effective_client = client or FossaClient()
    return FossaOnboarding(
        unit_of_work_factory=unit_of_work_factory or SqlAlchemyRegistryUnitOfWork,
        teams=effective_client,
        invitations=effective_client,
        benign_errors=BENIGN_INVITATION_ERRORS,
        team_settings_url=effective_client.config.team_settings_url,
    )
