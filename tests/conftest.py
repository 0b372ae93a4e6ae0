"""Shared fixtures: throwaway resource packages and fake asyncpg connections."""

from __future__ import annotations

import sys
import uuid
from pathlib import Path
from typing import Any, Iterator

import pytest

ORDERS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<services>
    <service>
        <name>orders</name>
        <db-url-env>ORD_URL</db-url-env>
        <db-user-env>ORD_USER</db-user-env>
        <db-password-env>ORD_PASS</db-password-env>
    </service>
</services>
"""


class ResourcePackage:
    """An importable package created under tmp_path for resource lookups."""

    def __init__(self, root: Path, name: str) -> None:
        self.name = name
        self.path = root / name
        self.path.mkdir()
        (self.path / "__init__.py").write_text("")

    def write(self, filename: str, content: str) -> Path:
        target = self.path / filename
        target.write_text(content)
        return target

    def write_bytes(self, filename: str, content: bytes) -> Path:
        target = self.path / filename
        target.write_bytes(content)
        return target


@pytest.fixture
def resource_package(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[ResourcePackage]:
    package = ResourcePackage(tmp_path, f"svc_resources_{uuid.uuid4().hex}")
    monkeypatch.syspath_prepend(str(tmp_path))
    yield package
    sys.modules.pop(package.name, None)


class FakeConnection:
    """Mimics the parts of asyncpg.Connection the session uses."""

    def __init__(
        self,
        *,
        rows: list[dict[str, Any]] | None = None,
        failing: tuple[str, ...] = (),
        fetch_error: Exception | None = None,
        close_error: Exception | None = None,
    ) -> None:
        self.rows = rows or []
        self.failing = set(failing)
        self.fetch_error = fetch_error
        self.close_error = close_error
        self.executed: list[str] = []
        self.fetched: list[tuple[str, tuple[Any, ...]]] = []
        self.closed = False

    async def execute(self, sql: str) -> str:
        self.executed.append(sql)
        if sql in self.failing:
            raise RuntimeError(f'relation in "{sql}" failed')
        return "OK"

    async def fetch(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        self.fetched.append((sql, args))
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.rows

    async def close(self) -> None:
        self.closed = True
        if self.close_error is not None:
            raise self.close_error


class FakeDriver:
    """Records connect() calls and hands out a fresh FakeConnection each time."""

    def __init__(self, **connection_kwargs: Any) -> None:
        self.connection_kwargs = connection_kwargs
        self.calls: list[dict[str, Any]] = []
        self.connections: list[FakeConnection] = []
        self.error: Exception | None = None

    async def connect(self, **kwargs: Any) -> FakeConnection:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        connection = FakeConnection(**self.connection_kwargs)
        self.connections.append(connection)
        return connection


@pytest.fixture
def fake_driver(monkeypatch: pytest.MonkeyPatch) -> FakeDriver:
    driver = FakeDriver()
    monkeypatch.setattr("asyncpg.connect", driver.connect)
    return driver


@pytest.fixture
def orders_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    values = {
        "ORD_URL": "postgresql://localhost:5432/orders",
        "ORD_USER": "orders",
        "ORD_PASS": "s3cret-password",
    }
    for key, value in values.items():
        monkeypatch.setenv(key, value)
    return values
