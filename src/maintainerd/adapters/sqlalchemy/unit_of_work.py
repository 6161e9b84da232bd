"""SQLAlchemy-backed unit of work for the maintainer registry.

The engine lives at module level: :func:`startup` binds it (running the
migrations), :func:`shutdown` disposes of it, and every
:class:`SqlAlchemyRegistryUnitOfWork` opens one session on it.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Literal, Self

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, SessionTransaction, sessionmaker

from maintainerd.adapters.sqlalchemy.mappings import start_mappers
from maintainerd.adapters.sqlalchemy.migrations import upgrade_head
from maintainerd.adapters.sqlalchemy.repositories import (
    SqlAlchemyAuditLogRepository,
    SqlAlchemyCompanyRepository,
    SqlAlchemyMaintainerRepository,
    SqlAlchemyProjectRepository,
    SqlAlchemyServiceRepository,
    SqlAlchemyServiceTeamRepository,
)
from maintainerd.config import get_database_config
from maintainerd.domain.ports.unit_of_work import RegistryRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Connection, Engine
    from sqlalchemy.engine.interfaces import DBAPIConnection
    from sqlalchemy.pool import ConnectionPoolEntry

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the registry database is used before or during reconfiguration."""


_engine: Engine | None = None
_sessions: sessionmaker[Session] | None = None


def _disable_pysqlite_transactions(
    dbapi_connection: DBAPIConnection, connection_record: ConnectionPoolEntry
) -> None:
    _ = connection_record
    dbapi_connection.isolation_level = None  # type: ignore[attr-defined]


def _emit_begin(conn: Connection) -> None:
    conn.exec_driver_sql("BEGIN")


def enable_sqlite_savepoints(engine: Engine) -> None:
    """Let SQLAlchemy own BEGIN on SQLite so SAVEPOINT and ROLLBACK TO behave.

    pysqlite otherwise defers BEGIN until the first write, which leaves a
    released savepoint outside any transaction. Must be applied before the
    engine opens its first connection. Other dialects are left untouched.
    """

    if engine.dialect.name != "sqlite":
        return
    if not event.contains(engine, "connect", _disable_pysqlite_transactions):
        event.listen(engine, "connect", _disable_pysqlite_transactions)
    if not event.contains(engine, "begin", _emit_begin):
        event.listen(engine, "begin", _emit_begin)


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the registry to ``engine`` (or a new one for ``database_uri``) and migrate it."""

    global _engine, _sessions  # noqa: PLW0603
    if _engine is not None and not force:
        raise StartupError("Registry database already started; pass force=True to rebind")

    bound = engine or create_engine(database_uri or get_database_config().uri, future=True)
    enable_sqlite_savepoints(bound)
    start_mappers()
    upgrade_head(engine=bound)
    _engine = bound
    _sessions = sessionmaker(bind=bound, expire_on_commit=False)
    log.debug("Registry database bound to %s", bound.url)


def configured_engine() -> Engine | None:
    return _engine


def is_started() -> bool:
    return _engine is not None


def shutdown() -> None:
    global _engine, _sessions  # noqa: PLW0603
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _sessions = None


class SqlAlchemyRegistryUnitOfWork:
    """One session over the registry tables.

    Leaving the block closes the session; an exception rolls it back first.
    Work is only persisted by an explicit :meth:`commit`.
    """

    def __init__(self) -> None:
        if _sessions is None:
            raise StartupError(
                "Registry database not started; call "
                "maintainerd.adapters.sqlalchemy.unit_of_work.startup() first"
            )
        self._session_factory = _sessions
        self._session: Session | None = None
        self._repositories: RegistryRepositories | None = None

    def __enter__(self) -> Self:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        session = self._session_factory()
        self._session = session
        self._repositories = RegistryRepositories(
            projects=SqlAlchemyProjectRepository(session),
            maintainers=SqlAlchemyMaintainerRepository(session),
            companies=SqlAlchemyCompanyRepository(session),
            services=SqlAlchemyServiceRepository(session),
            service_teams=SqlAlchemyServiceTeamRepository(session),
            audit_log=SqlAlchemyAuditLogRepository(session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not open")
        return self._session

    @property
    def repositories(self) -> RegistryRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not open")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    def savepoint(self) -> SessionTransaction:
        return self.session.begin_nested()


if TYPE_CHECKING:
    from maintainerd.domain.ports.unit_of_work import RegistryUnitOfWork

    _uow_check: RegistryUnitOfWork = SqlAlchemyRegistryUnitOfWork()
