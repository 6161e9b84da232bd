"""Errors raised while reading maintainerd settings from the environment."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class ConfigurationError(RuntimeError):
    """A maintainerd setting is present but unusable, e.g. a non-numeric FOSSA organization id."""


class MissingConfigurationError(ConfigurationError):
    """Settings the command needs (API tokens, worksheet ids, ...) are unset or blank.

    ``names`` lists every missing environment variable, sorted, so one run
    reports all of them at once.
    """

    def __init__(self, names: Iterable[str]) -> None:
        self.names = tuple(sorted(names))
        super().__init__(f"Missing configuration for: {', '.join(self.names)}")
