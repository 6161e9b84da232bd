"""HTTP client for the FOSSA API."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError

from maintainerd.adapters.http_resilience import ResilientClient
from maintainerd.config.fossa import get_fossa_config
from maintainerd.domain.ports.fetching import InvitationSender, TeamMembershipProvider

from .schema import FossaErrorPayload, Team, TeamMembers, User, UserInvitation

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from maintainerd.config.fossa import FossaConfig
    from maintainerd.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

USERS_PAGE_SIZE: Final[int] = 100
TEAM_MEMBERS_PAGE_SIZE: Final[int] = 100

ERROR_CODE_USER_ALREADY_MEMBER: Final[int] = 2001
ERROR_CODE_TEAM_ALREADY_EXISTS: Final[int] = 2003
ERROR_CODE_INVITATION_ALREADY_EXISTS: Final[int] = 2011


class FossaAPIError(RuntimeError):
    """Raised when the FOSSA API returns an error or an unexpected payload."""

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class InvitationAlreadyExistsError(FossaAPIError):
    """An invitation for this e-mail address is already pending."""


class UserAlreadyMemberError(FossaAPIError):
    """The e-mail address already belongs to a member of the organization."""


class TeamNotFoundError(FossaAPIError):
    """No team with the requested name exists."""


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class FossaClient:
    """Client for the parts of the FOSSA API used to manage project teams."""

    def __init__(
        self,
        *,
        config: FossaConfig | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config or get_fossa_config()
        self._resilience = self._config.resilience
        self._client_factory = client_factory or _default_client_factory

    @property
    def config(self) -> FossaConfig:
        return self._config

    def fetch_users(self) -> list[User]:
        return asyncio.run(self._fetch_users_async())

    def fetch_user_invitations(self) -> list[UserInvitation]:
        return asyncio.run(self._fetch_user_invitations_async())

    def send_user_invitation(self, email: str) -> None:
        asyncio.run(self._send_user_invitation_async(email))

    def fetch_teams(self) -> list[Team]:
        return asyncio.run(self._fetch_teams_async())

    def fetch_team(self, name: str) -> Team:
        for team in self.fetch_teams():
            if team.name == name:
                return team
        raise TeamNotFoundError(f"Failed to find FOSSA team named {name!r}")

    def fetch_teams_map(self) -> dict[str, Team]:
        """Return FOSSA teams keyed by team name."""
        return {team.name: team for team in self.fetch_teams()}

    def fetch_team_member_emails(self, team_id: int) -> list[str | None]:
        """Return one entry per team member; members without an e-mail give ``None``."""
        return asyncio.run(self._fetch_team_member_emails_async(team_id))

    def create_team(self, name: str) -> Team:
        """Create a team, or return the existing one when the name is already taken."""
        try:
            return asyncio.run(self._create_team_async(name))
        except FossaAPIError as exc:
            if exc.code != ERROR_CODE_TEAM_ALREADY_EXISTS:
                raise
            log.info("FOSSA team %r already exists, reusing it", name)
            return self.fetch_team(name)

    async def _fetch_users_async(self) -> list[User]:
        users: list[User] = []
        page = 1
        async with self._client_factory(self._resilience) as client:
            while True:
                response = await client.get(
                    "users",
                    params={"count": USERS_PAGE_SIZE, "page": page},
                )
                payload = _expect_list(self._checked_json(response), "users")
                batch = [User.model_validate(item) for item in payload]
                users.extend(batch)
                if len(batch) < USERS_PAGE_SIZE:
                    break
                page += 1
        return users

    async def _fetch_user_invitations_async(self) -> list[UserInvitation]:
        async with self._client_factory(self._resilience) as client:
            response = await client.get("user-invitations")
        payload = _expect_list(self._checked_json(response), "user-invitations")
        return [UserInvitation.model_validate(item) for item in payload]

    async def _send_user_invitation_async(self, email: str) -> None:
        path = f"organizations/{self._config.organization_id}/invite"
        async with self._client_factory(self._resilience) as client:
            response = await client.post(path, json={"email": email})
        if response.is_success:
            log.info("Sent FOSSA invitation to %s", email)
            return
        error = _parse_error(response)
        if error is None:
            raise FossaAPIError(
                f"SendUserInvitation failed for {email}: {response.status_code} {response.text}",
                status_code=response.status_code,
            )
        if error.code == ERROR_CODE_INVITATION_ALREADY_EXISTS:
            raise InvitationAlreadyExistsError(
                error.message, code=error.code, status_code=response.status_code
            )
        if error.code == ERROR_CODE_USER_ALREADY_MEMBER:
            raise UserAlreadyMemberError(
                error.message, code=error.code, status_code=response.status_code
            )
        raise FossaAPIError(
            f"SendUserInvitation failed for {email} (code {error.code}): {error.message}",
            code=error.code,
            status_code=response.status_code,
        )

    async def _fetch_teams_async(self) -> list[Team]:
        async with self._client_factory(self._resilience) as client:
            response = await client.get("teams")
        payload = _expect_list(self._checked_json(response), "teams")
        return [Team.model_validate(item) for item in payload]

    async def _fetch_team_member_emails_async(self, team_id: int) -> list[str | None]:
        emails: list[str | None] = []
        seen = 0
        page = 1
        async with self._client_factory(self._resilience) as client:
            while True:
                response = await client.get(
                    f"teams/{team_id}/members",
                    params={"count": TEAM_MEMBERS_PAGE_SIZE, "page": page},
                )
                payload = self._checked_json(response)
                try:
                    members = TeamMembers.model_validate(payload)
                except ValidationError as exc:
                    raise FossaAPIError(
                        f"Unexpected FOSSA team members payload for team {team_id}"
                    ) from exc
                seen += len(members.results)
                emails.extend(member.email for member in members.results)
                if not members.results or seen >= members.total_count:
                    break
                page += 1
        return emails

    async def _create_team_async(self, name: str) -> Team:
        async with self._client_factory(self._resilience) as client:
            response = await client.post("teams", json={"name": name})
        if response.is_success:
            log.info("Created FOSSA team %r", name)
            return Team.model_validate(response.json())
        error = _parse_error(response)
        if error is None:
            raise FossaAPIError(
                f"CreateTeam failed: {response.status_code} {response.text}",
                status_code=response.status_code,
            )
        raise FossaAPIError(
            f"CreateTeam failed with FOSSA error code {error.code}: {error.message}",
            code=error.code,
            status_code=response.status_code,
        )

    def _checked_json(self, response: httpx.Response) -> object:
        if not response.is_success:
            error = _parse_error(response)
            log.error(
                "FOSSA API error %s for %s %s",
                response.status_code,
                response.request.method,
                response.request.url,
            )
            raise FossaAPIError(
                f"FOSSA request failed: {response.status_code} {response.text}",
                code=error.code if error else None,
                status_code=response.status_code,
            )
        return response.json()


def _parse_error(response: httpx.Response) -> FossaErrorPayload | None:
    try:
        return FossaErrorPayload.model_validate_json(response.content)
    except ValidationError:
        return None


def _expect_list(payload: object, resource: str) -> list[object]:
    if not isinstance(payload, list):
        raise FossaAPIError(f"Unexpected FOSSA {resource} payload")
    return list(payload)


if TYPE_CHECKING:
    _provider_check: TeamMembershipProvider = FossaClient()
    _sender_check: InvitationSender = FossaClient()
