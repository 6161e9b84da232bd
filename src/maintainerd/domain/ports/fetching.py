"""Ports for reading data held by external systems."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


@runtime_checkable
class WorksheetReader(Protocol):
    """Callable port returning the raw cell grid of the maintainer worksheet.

    The first row must be the header row.
    """

    def __call__(self) -> Sequence[Sequence[object]]: ...


class TeamLike(Protocol):
    @property
    def id(self) -> int: ...

    @property
    def name(self) -> str: ...


@runtime_checkable
class TeamMembershipProvider(Protocol):
    """A service exposing teams and the e-mails of their members."""

    def fetch_teams_map(self) -> Mapping[str, TeamLike]: ...

    def fetch_team_member_emails(self, team_id: int) -> list[str | None]: ...

    def create_team(self, name: str) -> TeamLike: ...


@runtime_checkable
class InvitationSender(Protocol):
    def send_user_invitation(self, email: str) -> None: ...


class IssueLike(Protocol):
    @property
    def number(self) -> int: ...

    @property
    def title(self) -> str: ...

    @property
    def body(self) -> str | None: ...

    @property
    def is_pull_request(self) -> bool: ...


@runtime_checkable
class IssueSource(Protocol):
    """Lists the open issues of a repository carrying all of the given labels."""

    def list_issues(self, owner: str, repo: str, labels: Sequence[str]) -> Sequence[IssueLike]: ...


__all__ = [
    "InvitationSender",
    "IssueLike",
    "IssueSource",
    "TeamLike",
    "TeamMembershipProvider",
    "WorksheetReader",
]
