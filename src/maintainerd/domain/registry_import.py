"""Application services for seeding the maintainer registry from the worksheet."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final, TypeAlias

from maintainerd.domain.model import (
    Company,
    Maintainer,
    MaintainerStatus,
    Maturity,
    Project,
    Service,
    ServiceName,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, Sequence

    from maintainerd.domain.ports.unit_of_work import RegistryRepositories, RegistryUnitOfWork

log = getLogger(__name__)

STATUS_HEADER: Final[str] = "Status"
PROJECT_HEADER: Final[str] = "Project"
MAINTAINER_NAME_HEADER: Final[str] = "Maintainer Name"
COMPANY_HEADER: Final[str] = "Company"
EMAIL_HEADER: Final[str] = "Emails"
GITHUB_HEADER: Final[str] = "Github Name"
PARENT_PROJECT_HEADER: Final[str] = "Parent Project"
MAINTAINER_FILE_REF_HEADER: Final[str] = "OWNERS/MAINTAINERS"
MAILING_LIST_HEADER: Final[str] = "Mailing List Address"

FORWARD_FILLED_HEADERS: Final[tuple[str, ...]] = (PROJECT_HEADER, STATUS_HEADER)

DEFAULT_SERVICES: Final[tuple[tuple[ServiceName, str], ...]] = (
    (ServiceName.FOSSA, "Static code check we use to ensure 3rd Party License Policy"),
    (ServiceName.SERVICE_DESK, "Jira"),
    (ServiceName.GROUPS_IO, "Mailing list channels"),
    (
        ServiceName.SNYK,
        "Static code checker for 3rd Party License Policy monitoring and compliance",
    ),
)

RegistryRow: TypeAlias = "Mapping[str, str]"


class EmptyWorksheetError(ValueError):
    """Raised when the worksheet has no rows at all, not even a header row."""


@dataclass(slots=True, frozen=True)
class ImportSummary:
    """Outcome of a registry import."""

    rows: int
    imported: int
    skipped: int


def rows_from_values(values: Sequence[Sequence[object]]) -> list[dict[str, str]]:
    """Turn a raw cell grid into header-keyed rows.

    Cells are stringified and trimmed, short rows are padded with ``""`` and a
    blank ``Project`` or ``Status`` cell repeats the value of the previous row,
    since the worksheet only names a project on its first maintainer row.
    """

    if not values:
        raise EmptyWorksheetError("Worksheet is empty")

    headers = [_cell_text(cell) for cell in values[0]]
    last_seen: dict[str, str] = dict.fromkeys(FORWARD_FILLED_HEADERS, "")

    rows: list[dict[str, str]] = []
    for raw_row in values[1:]:
        row: dict[str, str] = {}
        for index, header in enumerate(headers):
            cell = _cell_text(raw_row[index]) if index < len(raw_row) else ""
            if header in last_seen:
                if cell:
                    last_seen[header] = cell
                cell = last_seen[header]
            row[header] = cell
        rows.append(row)
    return rows


def _cell_text(cell: object) -> str:
    if cell is None:
        return ""
    return str(cell).strip()


def seed_services(unit_of_work_factory: Callable[[], RegistryUnitOfWork]) -> list[Service]:
    """Create the default services that are missing; return all default services."""

    services: list[Service] = []
    with unit_of_work_factory() as uow:
        repository = uow.repositories.services
        for name, description in DEFAULT_SERVICES:
            service = repository.get_by_name(name)
            if service is None:
                service = Service(name=name, description=description)
                repository.add(service)
                log.info("Registered service %s", name)
            services.append(service)
        uow.commit()
    return services


def import_registry_rows(
    rows: Iterable[RegistryRow],
    unit_of_work_factory: Callable[[], RegistryUnitOfWork],
) -> ImportSummary:
    """Persist projects, companies and maintainers described by worksheet rows.

    Each row runs in its own savepoint; a row that fails is logged and skipped
    without affecting the rows before or after it.
    """

    total = 0
    imported = 0
    with unit_of_work_factory() as uow:
        for row in rows:
            total += 1
            try:
                with uow.savepoint():
                    _import_row(uow.repositories, row)
            except ValueError as exc:
                log.warning("Row %d skipped (%s): %s", total, exc, dict(row))
                continue
            imported += 1
        uow.commit()

    summary = ImportSummary(rows=total, imported=imported, skipped=total - imported)
    log.info(
        "Imported %d of %d worksheet rows (%d skipped)",
        summary.imported,
        summary.rows,
        summary.skipped,
    )
    return summary


def _import_row(repositories: RegistryRepositories, row: RegistryRow) -> None:
    project = _get_or_create_project(repositories, row)
    company = _get_or_create_company(repositories, row.get(COMPANY_HEADER, ""))
    maintainer = _get_or_create_maintainer(repositories, row, company)
    project.add_maintainer(maintainer)


def _get_or_create_project(repositories: RegistryRepositories, row: RegistryRow) -> Project:
    name = row.get(PROJECT_HEADER, "")
    if not name:
        raise ValueError("row has no project")

    existing = repositories.projects.get_by_name(name)
    if existing is not None:
        return existing

    parent: Project | None = None
    parent_name = row.get(PARENT_PROJECT_HEADER, "")
    if parent_name:
        parent = repositories.projects.get_by_name(parent_name)
        if parent is None:
            log.warning("Parent project %r of %r is not registered", parent_name, name)

    status = row.get(STATUS_HEADER, "")
    maturity = None
    if parent is None and status:
        maturity = Maturity.parse(status)

    project = Project(
        name=name,
        maturity=maturity,
        parent=parent,
        maintainer_ref=row.get(MAINTAINER_FILE_REF_HEADER) or None,
        mailing_list=row.get(MAILING_LIST_HEADER) or None,
    )
    repositories.projects.add(project)
    log.debug("Registered project %s", name)
    return project


def _get_or_create_company(repositories: RegistryRepositories, name: str) -> Company | None:
    if not name:
        return None
    company = repositories.companies.get_by_name(name)
    if company is None:
        company = Company(name=name)
        repositories.companies.add(company)
    return company


def _get_or_create_maintainer(
    repositories: RegistryRepositories,
    row: RegistryRow,
    company: Company | None,
) -> Maintainer:
    name = row.get(MAINTAINER_NAME_HEADER, "")
    email = row.get(EMAIL_HEADER, "")
    github_account = row.get(GITHUB_HEADER, "")

    maintainer: Maintainer | None = None
    if email:
        maintainer = repositories.maintainers.get_by_email(email)
    if maintainer is None and github_account:
        maintainer = repositories.maintainers.get_by_github_account(github_account)
    if maintainer is not None:
        return maintainer

    if not (name or email or github_account):
        raise ValueError("row has no maintainer")

    maintainer = Maintainer(
        name=name,
        email=email or None,
        github_account=github_account or None,
        status=MaintainerStatus.ACTIVE,
        company=company,
        import_warnings=missing_fields_warning(row),
        registered_at=datetime.now(UTC),
    )
    repositories.maintainers.add(maintainer)
    return maintainer


def missing_fields_warning(row: RegistryRow) -> str | None:
    """Return the blank maintainer columns as ``:Header:Header`` or None."""

    missing = [
        f":{header}"
        for header in (MAINTAINER_NAME_HEADER, COMPANY_HEADER, EMAIL_HEADER, GITHUB_HEADER)
        if not row.get(header, "")
    ]
    return "".join(missing) or None
