"""Pydantic models for GitHub issues and issue webhook events."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GitHubBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Label(GitHubBaseModel):
    name: str
    id: int | None = None
    color: str | None = None


class GitHubUser(GitHubBaseModel):
    login: str
    id: int | None = None


class Issue(GitHubBaseModel):
    number: int
    title: str
    body: str | None = None
    state: str = "open"
    html_url: str | None = None
    user: GitHubUser | None = None
    labels: list[Label] = Field(default_factory=list["Label"])
    pull_request: dict[str, object] | None = None

    @property
    def is_pull_request(self) -> bool:
        return self.pull_request is not None

    @property
    def label_names(self) -> list[str]:
        return [label.name for label in self.labels]


class Repository(GitHubBaseModel):
    name: str
    full_name: str | None = None


class IssuesEvent(GitHubBaseModel):
    """Payload of an ``issues`` webhook delivery."""

    action: str
    issue: Issue
    label: Label | None = None
    repository: Repository | None = None
    sender: GitHubUser | None = None
