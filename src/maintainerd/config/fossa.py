"""FOSSA configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_int_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

FOSSA_BASE_URL = "https://app.fossa.com/api"
FOSSA_TOKEN_ENV_VAR = "FOSSA_API_TOKEN"
FOSSA_ORGANIZATION_ENV_VAR = "FOSSA_ORGANIZATION_ID"
DEFAULT_FOSSA_ORGANIZATION_ID = 162
FOSSA_TIMEOUT_SECONDS = 20.0
FOSSA_TEAM_SETTINGS_URL = "https://app.fossa.com/account/settings/organization/teams/{team_id}"


@dataclass(frozen=True, slots=True)
class FossaConfig:
    """Holds FOSSA API configuration values."""

    api_token: str
    organization_id: int
    resilience: ResilienceConfig

    def team_settings_url(self, team_id: int) -> str:
        return FOSSA_TEAM_SETTINGS_URL.format(team_id=team_id)


def default_fossa_resilience(api_token: str) -> ResilienceConfig:
    return ResilienceConfig(
        name="fossa",
        base_url=FOSSA_BASE_URL,
        timeout_seconds=FOSSA_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=3),
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        default_headers={
            "Authorization": f"Bearer {api_token}",
            "Accept": "application/json",
        },
    )


def get_fossa_config(
    *,
    token_env_var: str = FOSSA_TOKEN_ENV_VAR,
    resilience: ResilienceConfig | None = None,
) -> FossaConfig:
    values = require_env_vars((token_env_var,))
    api_token = values[token_env_var]
    return FossaConfig(
        api_token=api_token,
        organization_id=optional_int_env_var(
            FOSSA_ORGANIZATION_ENV_VAR, DEFAULT_FOSSA_ORGANIZATION_ID
        ),
        resilience=resilience or default_fossa_resilience(api_token),
    )
