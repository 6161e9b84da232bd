from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeAlias

import pytest

from maintainerd.adapters.fossa import InvitationAlreadyExistsError
from maintainerd.app import (
    build_fossa_onboarding,
    list_onboarding_tasks,
    reconcile_fossa,
    seed_registry,
)
from maintainerd.config.fossa import FossaConfig, default_fossa_resilience
from maintainerd.config.github import get_github_config
from maintainerd.domain.model import ServiceName
from tests.helpers.registry import HEADER_ROW, FakeFossa, FakeTeam, seed_project

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from maintainerd.adapters.sqlalchemy.unit_of_work import SqlAlchemyRegistryUnitOfWork

    UowFactory: TypeAlias = Callable[[], SqlAlchemyRegistryUnitOfWork]


def _fossa_config() -> FossaConfig:
    return FossaConfig(
        api_token="token",
        organization_id=162,
        resilience=default_fossa_resilience("token"),
    )


@dataclass(slots=True)
class ConfiguredFakeFossa(FakeFossa):
    config: FossaConfig = field(default_factory=_fossa_config)


@dataclass(slots=True, frozen=True)
class StubIssue:
    number: int
    title: str
    body: str | None = None
    is_pull_request: bool = False


@dataclass(slots=True)
class StubIssueSource:
    issues: list[StubIssue]

    def list_issues(self, owner: str, repo: str, labels: Sequence[str]) -> list[StubIssue]:
        return self.issues


def _worksheet() -> list[list[object]]:
    return [
        list(HEADER_ROW),
        ["Graduated", "Envoy", "Ada", "Acme", "ada@example.org", "ada"],
        ["", "", "Bob", "", "bob@example.org", "bob"],
        ["Sandbox", "Kepler", "Cy", "Acme", "cy@example.org", "cy"],
        ["Nonsense", "Broken", "Dee", "", "dee@example.org", "dee"],
    ]


def test_seed_registry_imports_rows_and_links_teams(sqlite_unit_of_work: UowFactory) -> None:
    fossa = ConfiguredFakeFossa(
        teams={"Envoy": FakeTeam(id=10, name="Envoy"), "Retired": FakeTeam(id=11, name="Retired")}
    )

    result = seed_registry(
        reader=_worksheet,
        unit_of_work_factory=sqlite_unit_of_work,
        fossa_client=fossa,  # type: ignore[arg-type]
    )

    assert result.services == 4
    assert (result.imported.rows, result.imported.imported, result.imported.skipped) == (4, 3, 1)
    assert result.fossa_teams is not None
    assert result.fossa_teams.linked == 1
    assert result.fossa_teams.unmatched_teams == ("Retired",)

    with sqlite_unit_of_work() as uow:
        envoy = uow.repositories.projects.get_by_name("Envoy")
        fossa_service = uow.repositories.services.get_by_name(ServiceName.FOSSA)
        assert envoy is not None
        assert fossa_service is not None
        assert sorted(m.email for m in envoy.maintainers) == ["ada@example.org", "bob@example.org"]
        team = uow.repositories.service_teams.get(project=envoy, service=fossa_service)
        assert team is not None
        assert team.remote_id == 10


def test_seed_registry_is_idempotent(sqlite_unit_of_work: UowFactory) -> None:
    seed_registry(reader=_worksheet, unit_of_work_factory=sqlite_unit_of_work, link_fossa=False)
    again = seed_registry(
        reader=_worksheet,
        unit_of_work_factory=sqlite_unit_of_work,
        link_fossa=False,
    )

    assert again.fossa_teams is None
    assert again.imported.imported == 3
    with sqlite_unit_of_work() as uow:
        envoy = uow.repositories.projects.get_by_name("Envoy")
        assert envoy is not None
        assert len(envoy.maintainers) == 2
        assert len(uow.repositories.projects.list_all()) == 2


def test_reconcile_fossa_reports_without_inviting(sqlite_unit_of_work: UowFactory) -> None:
    seed_project(
        sqlite_unit_of_work,
        "Envoy",
        ["ada@example.org", "bob@example.org"],
        fossa_team_id=1,
    )
    fossa = ConfiguredFakeFossa(members={1: ["ada@example.org"]})

    outcomes = reconcile_fossa(
        client=fossa,  # type: ignore[arg-type]
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert [(name, outcome.missing_externally) for name, outcome in outcomes] == [
        ("Envoy", ("bob@example.org",))
    ]
    assert fossa.invited == []


def test_reconcile_fossa_invites_and_tolerates_pending_invitations(
    sqlite_unit_of_work: UowFactory,
) -> None:
    seed_project(
        sqlite_unit_of_work,
        "Envoy",
        ["ada@example.org", "bob@example.org", "cy@example.org"],
        fossa_team_id=1,
    )
    fossa = ConfiguredFakeFossa(
        members={1: ["ada@example.org"]},
        rejected={"cy@example.org": InvitationAlreadyExistsError("pending", code=2011)},
    )

    reconcile_fossa(
        invite=True,
        client=fossa,  # type: ignore[arg-type]
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert fossa.invited == ["bob@example.org"]


def test_reconcile_fossa_logs_unexpected_invitation_errors_and_continues(
    sqlite_unit_of_work: UowFactory,
    caplog: pytest.LogCaptureFixture,
) -> None:
    seed_project(sqlite_unit_of_work, "Envoy", ["ada@example.org"], fossa_team_id=1)
    seed_project(sqlite_unit_of_work, "Linkerd", ["bob@example.org"], fossa_team_id=2)
    fossa = ConfiguredFakeFossa(rejected={"ada@example.org": RuntimeError("boom")})

    with caplog.at_level(logging.ERROR):
        outcomes = reconcile_fossa(
            invite=True,
            client=fossa,  # type: ignore[arg-type]
            unit_of_work_factory=sqlite_unit_of_work,
        )

    assert [name for name, _ in outcomes] == ["Envoy", "Linkerd"]
    assert fossa.invited == ["bob@example.org"]
    assert "boom" in caplog.text
    assert "Unable to act on the FOSSA reconciliation of Envoy" in caplog.text


def test_build_fossa_onboarding_signs_up_a_project(sqlite_unit_of_work: UowFactory) -> None:
    seed_project(sqlite_unit_of_work, "Kepler", ["cy@example.org"])
    fossa = ConfiguredFakeFossa()

    onboarding = build_fossa_onboarding(
        client=fossa,  # type: ignore[arg-type]
        unit_of_work_factory=sqlite_unit_of_work,
    )
    result = onboarding.sign_up("Kepler")

    assert result.newly_linked
    assert result.invited == ("cy@example.org",)
    assert fossa.created == ["Kepler"]


def test_list_onboarding_tasks_uses_the_configured_repository() -> None:
    source = StubIssueSource(
        [StubIssue(number=1, title="[PROJECT ONBOARDING] Envoy", body="- [x] Done\n- [ ] Todo")]
    )

    tasks = list_onboarding_tasks(
        source=source,
        config=get_github_config(org="cncf", repo="sandbox", api_token="t"),
    )

    assert [(task.description, task.done) for task in tasks] == [("Done", True), ("Todo", False)]
