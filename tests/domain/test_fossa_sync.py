from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from maintainerd.adapters.fossa import FossaAPIError
from maintainerd.domain.fossa_sync import (
    INVITATION_SENT_ACTION,
    FossaInvitationSender,
    LoggingOutcomeConsumer,
    ServiceNotRegisteredError,
    link_fossa_teams,
    reconcile_fossa_teams,
)
from maintainerd.domain.model import ServiceName
from maintainerd.domain.reconciliation import ProjectMembershipSnapshot, reconcile
from maintainerd.domain.registry_import import seed_services
from tests.helpers.registry import FakeFossa, FakeTeam, seed_project

if TYPE_CHECKING:
    from collections.abc import Callable

    from maintainerd.adapters.sqlalchemy.unit_of_work import SqlAlchemyRegistryUnitOfWork
    from maintainerd.domain.reconciliation import ReconciliationOutcome


class AlreadyInvitedError(RuntimeError):
    pass


def test_link_fossa_teams_matches_teams_to_projects_by_name(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRegistryUnitOfWork],
) -> None:
    seed_project(sqlite_unit_of_work, "Envoy", ["a@x.org"])
    seed_project(sqlite_unit_of_work, "Linkerd", ["b@x.org"])
    fossa = FakeFossa(
        teams={
            "Envoy": FakeTeam(id=11, name="Envoy"),
            "Linkerd": FakeTeam(id=12, name="Linkerd"),
            "Unrelated": FakeTeam(id=13, name="Unrelated"),
        }
    )

    first = link_fossa_teams(sqlite_unit_of_work, fossa)
    second = link_fossa_teams(sqlite_unit_of_work, fossa)

    assert (first.linked, first.already_linked) == (2, 0)
    assert first.unmatched_teams == ("Unrelated",)
    assert (second.linked, second.already_linked) == (0, 2)
    with sqlite_unit_of_work() as uow:
        fossa_service = uow.repositories.services.get_by_name(ServiceName.FOSSA)
        assert fossa_service is not None
        teams = uow.repositories.service_teams.list_for_service(fossa_service)
        assert [(team.project.name, team.remote_id) for team in teams] == [
            ("Envoy", 11),
            ("Linkerd", 12),
        ]


def test_link_fossa_teams_requires_the_fossa_service(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRegistryUnitOfWork],
) -> None:
    with pytest.raises(ServiceNotRegisteredError):
        link_fossa_teams(sqlite_unit_of_work, FakeFossa())


def test_reconcile_fossa_teams_hands_outcomes_to_consumers(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRegistryUnitOfWork],
) -> None:
    seed_project(sqlite_unit_of_work, "Envoy", ["A@x.org", "b@x.org", None], fossa_team_id=11)
    fossa = FakeFossa(members={11: ["a@x.org", "c@x.org"]})
    received: list[tuple[str, ReconciliationOutcome]] = []

    outcomes = reconcile_fossa_teams(
        sqlite_unit_of_work,
        fossa,
        [lambda name, outcome: received.append((name, outcome))],
    )

    assert outcomes == received
    name, outcome = outcomes[0]
    assert name == "Envoy"
    assert outcome.missing_externally == ("b@x.org",)
    assert outcome.unregistered_external == ("c@x.org",)
    assert outcome.invalid_registered == 1
    assert outcome.fully_covered is False


def test_reconcile_fossa_teams_counts_members_without_an_email(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRegistryUnitOfWork],
) -> None:
    seed_project(sqlite_unit_of_work, "Envoy", ["a@x.org"], fossa_team_id=11)
    fossa = FakeFossa(members={11: ["a@x.org", None]})

    outcomes = reconcile_fossa_teams(sqlite_unit_of_work, fossa)

    outcome = outcomes[0][1]
    assert outcome.invalid_external == 1
    assert outcome.unregistered_external == ()
    assert outcome.fully_covered is True


def test_reconcile_fossa_teams_keeps_going_when_a_consumer_fails(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRegistryUnitOfWork],
    caplog: pytest.LogCaptureFixture,
) -> None:
    seed_project(sqlite_unit_of_work, "Envoy", ["a@x.org"], fossa_team_id=31)
    seed_project(sqlite_unit_of_work, "Linkerd", ["b@x.org"], fossa_team_id=32)
    fossa = FakeFossa(rejected={"a@x.org": FossaAPIError("organization seat limit", code=9)})
    sender = FossaInvitationSender(fossa, benign_errors=(AlreadyInvitedError,))
    received: list[str] = []

    with caplog.at_level(logging.ERROR):
        outcomes = reconcile_fossa_teams(
            sqlite_unit_of_work,
            fossa,
            [sender, lambda name, _outcome: received.append(name)],
            team_settings_url=lambda team_id: f"https://fossa.example/teams/{team_id}",
        )

    assert [name for name, _ in outcomes] == ["Envoy", "Linkerd"]
    assert received == ["Envoy", "Linkerd"]
    assert fossa.invited == ["b@x.org"]
    assert sender.sent == ["b@x.org"]
    assert "organization seat limit" in caplog.text
    assert "https://fossa.example/teams/31" in caplog.text


def test_reconcile_fossa_teams_skips_a_failing_team(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRegistryUnitOfWork],
    caplog: pytest.LogCaptureFixture,
) -> None:
    seed_project(sqlite_unit_of_work, "Broken", ["a@x.org"], fossa_team_id=21)
    seed_project(sqlite_unit_of_work, "Healthy", ["b@x.org"], fossa_team_id=22)
    fossa = FakeFossa(members={22: ["b@x.org"]}, failing_teams={21})

    with caplog.at_level(logging.ERROR):
        outcomes = reconcile_fossa_teams(
            sqlite_unit_of_work,
            fossa,
            team_settings_url=lambda team_id: f"https://fossa.example/teams/{team_id}",
        )

    assert [name for name, _ in outcomes] == ["Healthy"]
    assert outcomes[0][1].fully_covered is True
    assert "https://fossa.example/teams/21" in caplog.text


def test_reconcile_fossa_teams_can_be_limited_to_projects(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRegistryUnitOfWork],
) -> None:
    seed_project(sqlite_unit_of_work, "One", ["a@x.org"], fossa_team_id=1)
    seed_project(sqlite_unit_of_work, "Two", ["b@x.org"], fossa_team_id=2)

    outcomes = reconcile_fossa_teams(sqlite_unit_of_work, FakeFossa(), project_names=["Two"])

    assert [name for name, _ in outcomes] == ["Two"]


def test_projects_without_a_fossa_team_are_not_reconciled(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRegistryUnitOfWork],
) -> None:
    seed_services(sqlite_unit_of_work)
    seed_project(sqlite_unit_of_work, "Unlinked", ["a@x.org"])

    assert reconcile_fossa_teams(sqlite_unit_of_work, FakeFossa()) == []


def test_invitation_sender_invites_missing_and_tolerates_benign_errors() -> None:
    fossa = FakeFossa(rejected={"b@x.org": AlreadyInvitedError("pending")})
    sender = FossaInvitationSender(fossa, benign_errors=(AlreadyInvitedError,))
    outcome = reconcile(
        ProjectMembershipSnapshot.capture(
            "Envoy",
            registered=["a@x.org", "b@x.org", "c@x.org"],
            external=["c@x.org"],
        )
    )

    sender("Envoy", outcome)

    assert fossa.invited == ["a@x.org"]
    assert sender.sent == ["a@x.org"]
    assert sender.skipped == ["b@x.org"]


def test_invitation_sender_propagates_unexpected_errors() -> None:
    fossa = FakeFossa(rejected={"a@x.org": RuntimeError("boom")})
    sender = FossaInvitationSender(fossa, benign_errors=(AlreadyInvitedError,))
    outcome = reconcile(
        ProjectMembershipSnapshot.capture("Envoy", registered=["a@x.org"], external=[])
    )

    with pytest.raises(RuntimeError, match="boom"):
        sender("Envoy", outcome)


def test_logging_consumer_reports_coverage(caplog: pytest.LogCaptureFixture) -> None:
    outcome = reconcile(
        ProjectMembershipSnapshot.capture(
            "Envoy",
            registered=["a@x.org", ""],
            external=["z@x.org"],
        )
    )

    with caplog.at_level(logging.INFO, logger="maintainerd.domain.fossa_sync"):
        LoggingOutcomeConsumer()("Envoy", outcome)

    assert "1 maintainers to invite: a@x.org" in caplog.text
    assert "not registered maintainers: z@x.org" in caplog.text
    assert "ignored 1 registered and 0 FOSSA entries" in caplog.text


def test_invitation_sender_records_sent_invitations_in_the_audit_log(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRegistryUnitOfWork],
) -> None:
    seed_project(sqlite_unit_of_work, "Envoy", ["a@x.org", "b@x.org"], fossa_team_id=41)
    fossa = FakeFossa(rejected={"b@x.org": AlreadyInvitedError("pending")})
    sender = FossaInvitationSender(
        fossa,
        benign_errors=(AlreadyInvitedError,),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    reconcile_fossa_teams(sqlite_unit_of_work, fossa, [sender])

    with sqlite_unit_of_work() as uow:
        entries = uow.repositories.audit_log.list_by_action(INVITATION_SENT_ACTION)
        assert len(entries) == 1
        entry = entries[0]
        assert entry.project is not None
        assert entry.project.name == "Envoy"
        assert entry.maintainer is not None
        assert entry.maintainer.email == "a@x.org"
        assert entry.service is not None
        assert entry.service.name == ServiceName.FOSSA
        assert entry.message == "Invited a@x.org to FOSSA for Envoy"
