"""Pydantic models describing the FOSSA API payloads."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field


class FossaBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TeamUser(FossaBaseModel):
    user_id: int = Field(alias="userId")
    role_id: int | None = Field(default=None, alias="roleId")


class Team(FossaBaseModel):
    id: int
    name: str
    organization_id: int | None = Field(default=None, alias="organizationId")
    default_role_id: int | None = Field(default=None, alias="defaultRoleId")
    auto_add_users: bool = Field(default=False, alias="autoAddUsers")
    unique_identifier: str | None = Field(default=None, alias="uniqueIdentifier")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    team_users: list[TeamUser] = Field(default_factory=list["TeamUser"], alias="teamUsers")
    team_release_groups_count: int = Field(default=0, alias="teamReleaseGroupsCount")
    team_projects_count: int = Field(default=0, alias="teamProjectsCount")


class UserTeamRef(FossaBaseModel):
    id: int
    name: str


class UserTeam(FossaBaseModel):
    role_id: int | None = Field(default=None, alias="roleId")
    team: UserTeamRef


class User(FossaBaseModel):
    id: int
    username: str
    email: str | None = None
    email_verified: bool = False
    full_name: str | None = None
    role: str | None = None
    organization_id: int | None = Field(default=None, alias="organizationId")
    enabled: bool = True
    joined: datetime | None = None
    last_visit: datetime | None = None
    team_users: list[UserTeam] = Field(default_factory=list["UserTeam"], alias="teamUsers")


class UserInvitation(FossaBaseModel):
    email: str
    created_at: datetime | None = Field(default=None, alias="createdAt")
    expires_at: datetime | None = Field(default=None, alias="expiresAt")


class TeamMember(FossaBaseModel):
    user_id: int = Field(alias="userId")
    role_id: int | None = Field(default=None, alias="roleId")
    username: str | None = None
    email: str | None = None


class TeamMembers(FossaBaseModel):
    results: list[TeamMember] = Field(default_factory=list["TeamMember"])
    page_size: int = Field(default=0, alias="pageSize")
    page: int = 1
    total_count: int = Field(default=0, alias="totalCount")


class FossaErrorPayload(FossaBaseModel):
    code: int
    message: str = ""
    name: str | None = None
    uuid: str | None = None
    http_status_code: int | None = Field(default=None, alias="httpStatusCode")
