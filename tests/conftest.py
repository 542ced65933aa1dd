"""Root conftest: in-memory store fakes and the FastAPI test client.

FakePool mimics the slice of asyncpg.Pool the API uses: direct
fetch/fetchrow/fetchval/execute plus `acquire()` as an async context manager.
Every statement, from the pool or a reserved connection, lands in one
ordered log on the shared FakeConnection, so tests can assert statement order,
bound arguments, checkouts, releases and transaction outcomes.

Responses and failures are keyed by SQL fragments matched against the
whitespace-normalized statement text.
"""

from __future__ import annotations

from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from core import db


class FakeStoreError(Exception):
    pass


class FakeTransaction:
    def __init__(self, conn: "FakeConnection") -> None:
        self.conn = conn

    async def __aenter__(self) -> "FakeTransaction":
        self.conn.transactions += 1
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.conn.commits += 1
        else:
            self.conn.rollbacks += 1
        return False


class FakeConnection:
    def __init__(self) -> None:
        self.statements: list[tuple[str, tuple]] = []
        self._responses: list[tuple[str, Any]] = []
        self._failures: list[tuple[str, str]] = []
        self.transactions = 0
        self.commits = 0
        self.rollbacks = 0

    def respond(self, fragment: str, value: Any) -> None:
        """Return `value` (or `value(*args)` when callable) for matching SQL."""
        self._responses.append((fragment, value))

    def fail_on(self, fragment: str, message: str = "store rejected the statement") -> None:
        self._failures.append((fragment, message))

    def sql(self) -> list[str]:
        return [statement for statement, _ in self.statements]

    def matching(self, fragment: str) -> list[tuple[str, tuple]]:
        return [(s, args) for (s, args) in self.statements if fragment in s]

    def _run(self, sql: str, args: tuple, default: Any) -> Any:
        normalized = " ".join(sql.split())
        self.statements.append((normalized, args))
        for fragment, message in self._failures:
            if fragment in normalized:
                raise FakeStoreError(message)
        for fragment, value in self._responses:
            if fragment in normalized:
                return value(*args) if callable(value) else value
        return default

    async def fetch(self, sql: str, *args: Any) -> list[dict]:
        return self._run(sql, args, [])

    async def fetchrow(self, sql: str, *args: Any) -> dict | None:
        return self._run(sql, args, None)

    async def fetchval(self, sql: str, *args: Any) -> Any:
        return self._run(sql, args, None)

    async def execute(self, sql: str, *args: Any) -> str:
        return self._run(sql, args, "SELECT 1")

    def transaction(self) -> FakeTransaction:
        return FakeTransaction(self)


class FakeAcquire:
    def __init__(self, pool: "FakePool") -> None:
        self.pool = pool

    async def __aenter__(self) -> FakeConnection:
        self.pool.checkouts += 1
        return self.pool.conn

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        self.pool.releases += 1
        return False


class FakePool:
    def __init__(self) -> None:
        self.conn = FakeConnection()
        self.checkouts = 0
        self.releases = 0
        self.direct_calls = 0

    @property
    def touched(self) -> int:
        return self.checkouts + self.direct_calls

    def acquire(self) -> FakeAcquire:
        return FakeAcquire(self)

    async def fetch(self, sql: str, *args: Any) -> list[dict]:
        self.direct_calls += 1
        return await self.conn.fetch(sql, *args)

    async def fetchrow(self, sql: str, *args: Any) -> dict | None:
        self.direct_calls += 1
        return await self.conn.fetchrow(sql, *args)

    async def fetchval(self, sql: str, *args: Any) -> Any:
        self.direct_calls += 1
        return await self.conn.fetchval(sql, *args)

    async def execute(self, sql: str, *args: Any) -> str:
        self.direct_calls += 1
        return await self.conn.execute(sql, *args)


@pytest.fixture
def pool() -> FakePool:
    return FakePool()


@pytest.fixture
def conn(pool: FakePool) -> FakeConnection:
    return pool.conn


@pytest.fixture
async def client(pool: FakePool, monkeypatch):
    """FastAPI test client with the module-level pool swapped for a fake."""
    from main import app

    monkeypatch.setattr(db, "_pool", pool)

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
