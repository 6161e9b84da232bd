"""Maintainer registry entities.

These are plain dataclasses; the SQLAlchemy adapter maps them imperatively,
so nothing in here knows about sessions or tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from maintainerd.domain.model.base import Entity
from maintainerd.domain.model.enums import MaintainerStatus, Maturity


@dataclass(eq=False, kw_only=True)
class Company(Entity):
    name: str


@dataclass(eq=False, kw_only=True)
class Maintainer(Entity):
    """A leader that can speak for one or more projects.

    An e-mail is expected at registration but the spreadsheet does not always
    have one; missing fields are recorded in ``import_warnings``.
    """

    name: str
    email: str | None = None
    github_account: str | None = None
    status: MaintainerStatus = MaintainerStatus.ACTIVE
    company: Company | None = None
    import_warnings: str | None = None
    registered_at: datetime | None = None

    projects: list[Project] = field(default_factory=list["Project"], repr=False)


@dataclass(eq=False, kw_only=True)
class Project(Entity):
    name: str
    maturity: Maturity | None = None
    parent: Project | None = field(default=None, repr=False)
    maintainer_ref: str | None = None
    mailing_list: str | None = None

    maintainers: list[Maintainer] = field(default_factory=list["Maintainer"], repr=False)

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Project name must not be blank")
        if self.parent is not None and self.maturity is None:
            self.maturity = self.parent.maturity

    def add_maintainer(self, maintainer: Maintainer) -> None:
        # With the ORM mapped, appending one side populates the other through
        # back_populates; the membership checks keep this idempotent either way.
        if maintainer not in self.maintainers:
            self.maintainers.append(maintainer)
        if self not in maintainer.projects:
            maintainer.projects.append(self)

    @property
    def maintainer_emails(self) -> tuple[str | None, ...]:
        return tuple(maintainer.email for maintainer in self.maintainers)


@dataclass(eq=False, kw_only=True)
class Service(Entity):
    """An external service on which projects get a group of maintainers."""

    name: str
    description: str | None = None


@dataclass(eq=False, kw_only=True)
class ServiceTeam(Entity):
    """The group (team, channel, ...) that holds a project's maintainers on a service.

    ``remote_id`` is the service specific identifier, e.g. the FOSSA team id.
    """

    project: Project
    service: Service
    remote_id: int


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False, kw_only=True)
class AuditLog(Entity):
    """A change made on behalf of the registry, kept for later review.

    Any of ``project``, ``maintainer`` and ``service`` may be left out when
    the action does not concern one. ``message`` falls back to ``action``.
    """

    action: str
    message: str = ""
    project: Project | None = field(default=None, repr=False)
    maintainer: Maintainer | None = field(default=None, repr=False)
    service: Service | None = field(default=None, repr=False)
    created_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        if not self.action or not self.action.strip():
            raise ValueError("Audit log action must not be blank")
        if not self.message:
            self.message = self.action
