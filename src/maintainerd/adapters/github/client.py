"""HTTP client for the GitHub issues API."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from maintainerd.adapters.http_resilience import ResilientClient
from maintainerd.config.github import get_github_config
from maintainerd.domain.ports.fetching import IssueSource

from .schema import Issue

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from maintainerd.config.github import GitHubConfig
    from maintainerd.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

ISSUES_PAGE_SIZE = 100


class GitHubAPIError(RuntimeError):
    """Raised when the GitHub API returns an error or an unexpected payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class GitHubIssuesClient:
    """Lists open issues of a repository, following ``Link`` pagination."""

    def __init__(
        self,
        *,
        config: GitHubConfig | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config or get_github_config()
        self._client_factory = client_factory or _default_client_factory

    @property
    def config(self) -> GitHubConfig:
        return self._config

    def list_issues(self, owner: str, repo: str, labels: Sequence[str]) -> list[Issue]:
        return asyncio.run(self._list_issues_async(owner, repo, labels))

    async def _list_issues_async(
        self,
        owner: str,
        repo: str,
        labels: Sequence[str],
    ) -> list[Issue]:
        issues: list[Issue] = []
        url: str | None = f"repos/{owner}/{repo}/issues"
        params: dict[str, str | int] | None = {
            "state": "open",
            "labels": ",".join(labels),
            "per_page": ISSUES_PAGE_SIZE,
        }
        async with self._client_factory(self._config.resilience) as client:
            while url is not None:
                response = await client.get(url, params=params)
                if not response.is_success:
                    log.error("GitHub API error %s: %s", response.status_code, response.text)
                    raise GitHubAPIError(
                        f"Listing issues of {owner}/{repo} failed: {response.status_code}",
                        status_code=response.status_code,
                    )
                payload = response.json()
                if not isinstance(payload, list):
                    raise GitHubAPIError("Unexpected GitHub issues payload")
                try:
                    issues.extend(Issue.model_validate(item) for item in payload)
                except ValidationError as exc:
                    raise GitHubAPIError("Unexpected GitHub issue payload") from exc
                # the next link already carries the query string
                url = response.links.get("next", {}).get("url")
                params = None
        log.debug("Listed %d open issues in %s/%s", len(issues), owner, repo)
        return issues


if TYPE_CHECKING:
    _source_check: IssueSource = GitHubIssuesClient()
