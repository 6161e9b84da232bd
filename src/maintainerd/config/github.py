"""GitHub configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import optional_env_var, require_env_var
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig

GITHUB_API_URL = "https://api.github.com"
DEFAULT_GITHUB_ORG = "cncf"
DEFAULT_GITHUB_REPO = "sandbox"
DEFAULT_ONBOARDING_LABELS = ("project onboarding", "sandbox")


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    """Repository coordinates and credentials for the onboarding issues."""

    org: str
    repo: str
    api_token: str | None
    onboarding_labels: tuple[str, ...]
    resilience: ResilienceConfig


def default_github_resilience(api_token: str | None) -> ResilienceConfig:
    headers = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
    }
    if api_token:
        headers["Authorization"] = f"Bearer {api_token}"
    return ResilienceConfig(
        name="github",
        base_url=GITHUB_API_URL,
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        cache=CacheConfig(backend="memory"),
        default_headers=headers,
    )


def get_github_config(
    *,
    org: str | None = None,
    repo: str | None = None,
    api_token: str | None = None,
) -> GitHubConfig:
    token = api_token or os.getenv("GITHUB_API_TOKEN") or None
    return GitHubConfig(
        org=org or optional_env_var("GITHUB_ORG", DEFAULT_GITHUB_ORG),
        repo=repo or optional_env_var("GITHUB_REPO", DEFAULT_GITHUB_REPO),
        api_token=token,
        onboarding_labels=DEFAULT_ONBOARDING_LABELS,
        resilience=default_github_resilience(token),
    )


@dataclass(frozen=True, slots=True)
class WebhookConfig:
    secret: bytes
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 2525


def get_webhook_config(*, secret: str | None = None) -> WebhookConfig:
    raw_secret = secret or require_env_var("GITHUB_WEBHOOK_SECRET")
    return WebhookConfig(secret=raw_secret.encode("utf-8"))
