from __future__ import annotations

import json
from typing import TYPE_CHECKING

import httpx
import pytest

from maintainerd.adapters.fossa import (
    FossaAPIError,
    FossaClient,
    InvitationAlreadyExistsError,
    TeamNotFoundError,
    UserAlreadyMemberError,
)
from maintainerd.config.fossa import FossaConfig, default_fossa_resilience
from tests.helpers.http import make_client_factory

if TYPE_CHECKING:
    from collections.abc import Callable


def _team(team_id: int, name: str) -> dict[str, object]:
    return {
        "id": team_id,
        "organizationId": 162,
        "name": name,
        "defaultRoleId": 3,
        "autoAddUsers": False,
        "createdAt": "2024-05-01T10:00:00.000Z",
        "teamUsers": [{"userId": 1, "roleId": 3}],
        "teamProjectsCount": 4,
    }


def _user(user_id: int) -> dict[str, object]:
    return {"id": user_id, "username": f"user{user_id}", "email": f"user{user_id}@x.org"}


def _error(code: int, message: str) -> dict[str, object]:
    return {"uuid": "abc", "code": code, "message": message, "name": "Err", "httpStatusCode": 400}


def _client(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    organization_id: int = 162,
) -> FossaClient:
    config = FossaConfig(
        api_token="token",
        organization_id=organization_id,
        resilience=default_fossa_resilience("token"),
    )
    return FossaClient(config=config, client_factory=make_client_factory(handler))


def test_fetch_users_pages_until_a_short_page() -> None:
    requested_pages: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/users"
        assert request.headers["Authorization"] == "Bearer token"
        page = request.url.params["page"]
        requested_pages.append(page)
        assert request.url.params["count"] == "100"
        if page == "1":
            return httpx.Response(200, json=[_user(i) for i in range(100)])
        return httpx.Response(200, json=[_user(100), _user(101)])

    users = _client(handler).fetch_users()

    assert len(users) == 102
    assert requested_pages == ["1", "2"]
    assert users[-1].email == "user101@x.org"


def test_fetch_teams_map_keys_teams_by_name() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/teams"
        return httpx.Response(200, json=[_team(1, "Envoy"), _team(2, "Linkerd")])

    teams = _client(handler).fetch_teams_map()

    assert sorted(teams) == ["Envoy", "Linkerd"]
    assert teams["Linkerd"].id == 2
    assert teams["Envoy"].team_users[0].user_id == 1


def test_fetch_team_raises_when_the_name_is_unknown() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[_team(1, "Envoy")])

    client = _client(handler)

    assert client.fetch_team("Envoy").id == 1
    with pytest.raises(TeamNotFoundError):
        client.fetch_team("Missing")


def test_fetch_team_member_emails_reads_all_pages() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/teams/7/members"
        page = int(request.url.params["page"])
        results = {
            1: [
                {"userId": 1, "roleId": 2, "username": "a", "email": "a@x.org"},
                {"userId": 2, "roleId": 2, "username": "b", "email": ""},
            ],
            2: [{"userId": 3, "roleId": 2, "username": "c", "email": "c@x.org"}],
        }[page]
        return httpx.Response(
            200,
            json={"results": results, "pageSize": 2, "page": page, "totalCount": 3},
        )

    emails = _client(handler).fetch_team_member_emails(7)

    assert emails == ["a@x.org", "", "c@x.org"]


def test_fetch_team_member_emails_of_an_empty_team() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"results": [], "pageSize": 100, "page": 1, "totalCount": 0},
        )

    assert _client(handler).fetch_team_member_emails(7) == []


def test_fetch_team_member_emails_keeps_members_without_an_email() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "results": [
                    {"userId": 1, "username": "a", "email": "a@x.org"},
                    {"userId": 2, "username": "sso-only"},
                    {"userId": 3, "username": "c", "email": None},
                ],
                "pageSize": 100,
                "page": 1,
                "totalCount": 3,
            },
        )

    assert _client(handler).fetch_team_member_emails(7) == ["a@x.org", None, None]


def test_send_user_invitation_posts_to_the_organization() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={})

    _client(handler, organization_id=42).send_user_invitation("new@x.org")

    assert captured[0].method == "POST"
    assert captured[0].url.path == "/api/organizations/42/invite"
    assert json.loads(captured[0].content) == {"email": "new@x.org"}


@pytest.mark.parametrize(
    ("code", "error_type"),
    [
        (2011, InvitationAlreadyExistsError),
        (2001, UserAlreadyMemberError),
    ],
)
def test_send_user_invitation_maps_known_error_codes(
    code: int,
    error_type: type[FossaAPIError],
) -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json=_error(code, "already"))

    with pytest.raises(error_type) as excinfo:
        _client(handler).send_user_invitation("a@x.org")

    assert excinfo.value.code == code


def test_send_user_invitation_reports_other_codes() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json=_error(1000, "forbidden"))

    with pytest.raises(FossaAPIError) as excinfo:
        _client(handler).send_user_invitation("a@x.org")

    assert type(excinfo.value) is FossaAPIError
    assert excinfo.value.code == 1000
    assert excinfo.value.status_code == 403


def test_send_user_invitation_with_an_unparsable_error_body() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    with pytest.raises(FossaAPIError) as excinfo:
        _client(handler).send_user_invitation("a@x.org")

    assert excinfo.value.code is None
    assert excinfo.value.status_code == 502


def test_create_team_returns_the_new_team() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert json.loads(request.content) == {"name": "Envoy"}
        return httpx.Response(201, json=_team(9, "Envoy"))

    team = _client(handler).create_team("Envoy")

    assert (team.id, team.name) == (9, "Envoy")


def test_create_team_reuses_an_existing_team() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            return httpx.Response(400, json=_error(2003, "team exists"))
        return httpx.Response(200, json=[_team(3, "Other"), _team(4, "Envoy")])

    team = _client(handler).create_team("Envoy")

    assert team.id == 4


def test_create_team_raises_on_other_errors() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json=_error(1234, "nope"))

    with pytest.raises(FossaAPIError) as excinfo:
        _client(handler).create_team("Envoy")

    assert excinfo.value.code == 1234


def test_failed_listing_raises_fossa_api_error() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json=_error(401, "unauthorized"))

    with pytest.raises(FossaAPIError) as excinfo:
        _client(handler).fetch_teams()

    assert excinfo.value.status_code == 401


def test_unexpected_payload_shape_raises() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"teams": []})

    with pytest.raises(FossaAPIError, match="Unexpected"):
        _client(handler).fetch_teams()


def test_fetch_user_invitations() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/user-invitations"
        return httpx.Response(
            200,
            json=[
                {
                    "email": "pending@x.org",
                    "createdAt": "2024-05-01T10:00:00.000Z",
                    "expiresAt": "2024-05-15T10:00:00.000Z",
                }
            ],
        )

    invitations = _client(handler).fetch_user_invitations()

    assert [invitation.email for invitation in invitations] == ["pending@x.org"]
    assert invitations[0].expires_at is not None
