"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Pool model:
- the pool is bounded by `DB_POOL_MAX_SIZE`; `acquire()` waits for a free
  connection instead of failing when the ceiling is reached
- multi-statement sequences reserve one connection with
  `async with pool().acquire() as conn`, which releases it on every exit path
"""

from __future__ import annotations

from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from . import settings

_pool: asyncpg.Pool | None = None


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = settings.env_str("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    max_size = settings.pool_max_size()
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=min(settings.pool_min_size(), max_size),
        max_size=max_size,
        command_timeout=settings.command_timeout(),
    )


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


def record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


def affected_rows(status: str) -> int:
    """
    Row count from a command status tag ("DELETE 3", "INSERT 0 1", "UPDATE 0").
    """
    tail = (status or "").rsplit(" ", 1)[-1]
    try:
        return int(tail)
    except ValueError:
        return 0


async def fetch_one(executor: asyncpg.Pool | asyncpg.Connection, sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query on the given pool or connection and return one row as a dict (or None).
    """
    row = await executor.fetchrow(sql, *args)
    return record_to_dict(row) if row is not None else None


async def fetch_all(executor: asyncpg.Pool | asyncpg.Connection, sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query on the given pool or connection and return all rows as dicts.
    """
    rows = await executor.fetch(sql, *args)
    return [record_to_dict(r) for r in rows]


async def execute(executor: asyncpg.Pool | asyncpg.Connection, sql: str, *args: Any) -> int:
    """
    Run a statement (INSERT/UPDATE/DELETE) and return the affected row count.
    """
    status = await executor.execute(sql, *args)
    return affected_rows(status)
