"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class MaintainerStatus(StrEnum):
    ACTIVE = "Active"
    EMERITUS = "Emeritus"
    RETIRED = "Retired"


class Maturity(StrEnum):
    """A project's maturity level, used by end-users to assess deployability."""

    SANDBOX = "Sandbox"
    INCUBATING = "Incubating"
    GRADUATED = "Graduated"
    ARCHIVED = "Archived"

    @classmethod
    def parse(cls, value: str) -> Maturity:
        cleaned = value.strip().lower()
        for member in cls:
            if member.value.lower() == cleaned:
                return member
        raise ValueError(f"Invalid maturity: {value!r}")


class ServiceName(StrEnum):
    FOSSA = "FOSSA"
    SERVICE_DESK = "Service Desk"
    GROUPS_IO = "cncf.groups.io"
    SNYK = "Snyk"
