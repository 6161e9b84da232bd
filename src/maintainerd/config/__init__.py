"""Application configuration helpers."""

from __future__ import annotations

from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .fossa import FossaConfig, get_fossa_config
from .github import GitHubConfig, WebhookConfig, get_github_config, get_webhook_config
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .sheets import SheetsConfig, get_sheets_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "FossaConfig",
    "GitHubConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SheetsConfig",
    "StorageConfig",
    "WebhookConfig",
    "configure_logging",
    "get_database_config",
    "get_fossa_config",
    "get_github_config",
    "get_sheets_config",
    "get_storage_config",
    "get_webhook_config",
    "require_env_var",
    "require_env_vars",
]
