"""Google Sheets configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .http_resilience import CacheConfig, ResilienceConfig, RetryPolicy

SHEETS_BASE_URL = "https://sheets.googleapis.com/v4"
DEFAULT_READ_RANGE = "Active!A1:J1639"


@dataclass(frozen=True, slots=True)
class SheetsConfig:
    """Location of the maintainer worksheet and the key used to read it."""

    spreadsheet_id: str
    read_range: str
    api_key: str
    resilience: ResilienceConfig


def get_sheets_config(*, resilience: ResilienceConfig | None = None) -> SheetsConfig:
    values = require_env_vars(("MD_WORKSHEET", "GOOGLE_API_KEY"))
    return SheetsConfig(
        spreadsheet_id=values["MD_WORKSHEET"],
        read_range=optional_env_var("MD_WORKSHEET_RANGE", DEFAULT_READ_RANGE),
        api_key=values["GOOGLE_API_KEY"],
        resilience=resilience
        or ResilienceConfig(
            name="sheets",
            base_url=SHEETS_BASE_URL,
            retry=RetryPolicy(total=3),
            cache=CacheConfig(backend="memory"),
        ),
    )
