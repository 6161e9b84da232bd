"""Public domain model surface."""

from __future__ import annotations

from maintainerd.domain.model.base import Entity, new_id
from maintainerd.domain.model.enums import MaintainerStatus, Maturity, ServiceName
from maintainerd.domain.model.registry import (
    AuditLog,
    Company,
    Maintainer,
    Project,
    Service,
    ServiceTeam,
)

__all__ = [
    "AuditLog",
    "Company",
    "Entity",
    "Maintainer",
    "MaintainerStatus",
    "Maturity",
    "Project",
    "Service",
    "ServiceName",
    "ServiceTeam",
    "new_id",
]
