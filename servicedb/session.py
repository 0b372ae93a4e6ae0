"""Single-use database sessions that run existence checks and DDL scripts.

A DatabaseSession drives asyncpg from synchronous code: each open session owns
a private event loop and runs every backend round-trip to completion on it in
the calling thread. Sessions carry no locking; one thread drives an instance
between ``open()`` and ``close()``.
"""

from __future__ import annotations

import asyncio
import importlib
import logging
import os
from types import ModuleType, TracebackType
from typing import Any, Callable, Coroutine, Mapping

from .errors import (
    ConnectionFailure,
    DdlExecutionError,
    DriverLoadError,
    EnvironmentVariableMissingError,
    QueryError,
    ResourceCloseWarning,
)
from .models import ServiceEntry
from .scripts import DdlAction, DdlScriptLoader

LOG = logging.getLogger(__name__)

DEFAULT_DRIVER = "asyncpg"


class Statement:
    """Runs SQL text on one connection, blocking until the backend answers."""

    def __init__(self, connection: Any, loop: asyncio.AbstractEventLoop) -> None:
        self._connection = connection
        self._loop = loop
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def execute(self, sql: str) -> object:
        return self._run(self._connection.execute(sql))

    def fetch(self, sql: str, *args: object) -> list[Any]:
        return list(self._run(self._connection.fetch(sql, *args)))

    def close(self) -> None:
        self._closed = True

    def _run(self, coro: Coroutine[Any, Any, Any]) -> Any:
        if self._closed:
            coro.close()
            raise RuntimeError("Statement is closed.")
        return self._loop.run_until_complete(coro)


class SessionHandle:
    """The live connection/statement pair of an open session.

    Leaving a ``with`` block releases this handle on every exit path and
    closes the owning session only while this is its current handle.
    """

    def __init__(
        self,
        session: DatabaseSession,
        connection: Any,
        statement: Statement,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        self._session = session
        self._connection = connection
        self._statement = statement
        self._loop = loop
        self._released = False

    @property
    def connection(self) -> Any:
        return self._connection

    @property
    def statement(self) -> Statement:
        return self._statement

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Release the statement, the connection and the event loop; never raises."""

        if self._released:
            return
        self._released = True
        _release("statement", self._statement, self._statement.close)
        _release(
            "connection",
            self._connection,
            lambda: self._loop.run_until_complete(self._connection.close()),
        )
        _release("event loop", self._loop, self._loop.close)

    def __enter__(self) -> SessionHandle:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._session._close_handle(self)


class DatabaseSession:
    """Owns at most one live connection to a service database."""

    def __init__(
        self,
        entry: ServiceEntry,
        *,
        scripts: DdlScriptLoader | None = None,
        driver: str = DEFAULT_DRIVER,
        environ: Mapping[str, str] | None = None,
        connect_timeout: float | None = None,
    ) -> None:
        self._entry = entry
        self._scripts = scripts or DdlScriptLoader()
        self._driver = driver
        self._environ = environ
        self._connect_timeout = connect_timeout
        self._handle: SessionHandle | None = None

    @property
    def entry(self) -> ServiceEntry:
        return self._entry

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def open(self) -> SessionHandle:
        """Resolve credentials, load the driver and connect; reuse an open handle."""

        if self._handle is not None:
            return self._handle

        url = self._resolve(self._entry.url_variable)
        user = self._resolve(self._entry.user_variable)
        password = self._resolve(self._entry.password_variable)
        driver = self._load_driver()

        kwargs: dict[str, object] = {"dsn": _normalize_url(url), "user": user, "password": password}
        if self._connect_timeout is not None:
            kwargs["timeout"] = self._connect_timeout

        loop = asyncio.new_event_loop()
        try:
            connection = loop.run_until_complete(driver.connect(**kwargs))
        except Exception as exc:
            _release("event loop", loop, loop.close)
            raise ConnectionFailure(
                f'Failed to connect to the {self._entry.name} database at "{url}" '
                f'with the username "{user}": {exc}'
            ) from exc

        self._handle = SessionHandle(self, connection, Statement(connection, loop), loop)
        LOG.debug("Opened database session", extra={"service": self._entry.name, "url": url, "user": user})
        return self._handle

    def exists(self, table: str, column: str, value: object) -> bool:
        """Return True when ``table`` has a row whose ``column`` equals ``value``.

        The session is closed before returning, so each call connects afresh.
        """

        sql = f"select {column} from {table} where {column} = $1"
        with self.open() as handle:
            try:
                rows = handle.statement.fetch(sql, value)
            except Exception as exc:
                raise QueryError(f"SQL statement [{sql}] failed: {exc}", sql=sql) from exc
            return bool(rows)

    def clean(self) -> None:
        """Run the drop script, then the create script, and close the session."""

        with self.open() as handle:
            self._execute_script(handle.statement, DdlAction.DROP)
            self._execute_script(handle.statement, DdlAction.CREATE)
            LOG.info("Successfully cleaned %s.", self._entry.name, extra={"service": self._entry.name})

    def close(self) -> None:
        """Release the open handle, if any. Release failures are only logged."""

        handle, self._handle = self._handle, None
        if handle is not None:
            handle.release()

    def _close_handle(self, handle: SessionHandle) -> None:
        # A handle from an earlier open() must not tear down the current one.
        if self._handle is handle:
            self._handle = None
        handle.release()

    def __enter__(self) -> SessionHandle:
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _execute_script(self, statement: Statement, action: DdlAction) -> None:
        for line in self._scripts.load(action, self._entry.name):
            sql = line.rstrip().rstrip(";")
            if not sql.strip():
                continue
            LOG.debug("Executing DDL", extra={"service": self._entry.name, "action": action.value, "sql": sql})
            try:
                statement.execute(sql)
            except Exception as exc:
                if action is DdlAction.CREATE:
                    raise DdlExecutionError(f"Create statement [{sql}] failed: {exc}", statement=sql) from exc
                LOG.warning(
                    "Warning - statement [%s] failed: %s",
                    sql,
                    exc,
                    extra={"service": self._entry.name, "action": action.value},
                )

    def _resolve(self, variable: str) -> str:
        environ = self._environ if self._environ is not None else os.environ
        value = environ.get(variable)
        if value is None:
            raise EnvironmentVariableMissingError(variable)
        return value

    def _load_driver(self) -> ModuleType:
        try:
            module = importlib.import_module(self._driver)
        except ImportError as exc:
            raise DriverLoadError(f"Unable to load database driver: {self._driver}") from exc
        if not callable(getattr(module, "connect", None)):
            raise DriverLoadError(f"Database driver {self._driver} does not provide connect().")
        return module


def _normalize_url(url: str) -> str:
    # JDBC-style URLs (jdbc:postgresql://...) are accepted as-is from older configs.
    return url.removeprefix("jdbc:")


def _release(resource: str, target: object, action: Callable[[], object]) -> None:
    try:
        action()
    except Exception as exc:
        LOG.warning(
            "Warning: closing %s %r failed: %s.",
            resource,
            target,
            exc,
            extra={"resource": resource, "category": ResourceCloseWarning.__name__},
        )


__all__ = ["DEFAULT_DRIVER", "DatabaseSession", "SessionHandle", "Statement"]
