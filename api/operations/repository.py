"""
Operation persistence helpers (raw SQL).

Stored routines report their results through session variables: the caller
passes the variable name as the routine's trailing argument, the routine
writes it with `set_config(name, value, false)`, and the value is read back
with `current_setting(name, true)` on the same connection.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Any

import asyncpg

from core import db

EVENT_ID_VAR = "zoo.out_ev_id"
ASSIGN_SUCCESS_VAR = "zoo.p_success"

_TRUTHY = {"1", "t", "true", "y", "yes", "on"}


async def call_with_output(
    conn: asyncpg.Connection,
    routine: str,
    *args: Any,
    outputs: Mapping[str, str],
) -> dict[str, str | None]:
    """
    Call a routine and return its output variables as `{name: value}`.

    Each output variable is reset to its default first so a value left on a
    pooled connection by an earlier call is never read back.
    """
    for variable, default in outputs.items():
        await conn.execute("SELECT set_config($1, $2, false)", variable, default)

    count = len(args) + len(outputs)
    placeholders = ", ".join(f"${i}" for i in range(1, count + 1))
    await conn.execute(f"CALL {routine}({placeholders})", *args, *outputs.keys())

    values: dict[str, str | None] = {}
    for variable in outputs:
        values[variable] = await conn.fetchval("SELECT current_setting($1, true)", variable)
    return values


async def call_schedule_event(
    conn: asyncpg.Connection,
    *,
    title: str,
    e_date: date,
    e_id: int,
    capacity: int | None,
) -> int:
    values = await call_with_output(
        conn,
        "schedule_event",
        title,
        e_date,
        e_id,
        capacity,
        outputs={EVENT_ID_VAR: ""},
    )
    raw = (values[EVENT_ID_VAR] or "").strip()
    if not raw:
        raise RuntimeError("schedule_event did not report an event id.")
    return int(raw)


async def call_assign_employee(
    conn: asyncpg.Connection,
    *,
    emp_id: int,
    e_id: int,
    role_desc: str | None,
) -> int:
    values = await call_with_output(
        conn,
        "assign_employee",
        emp_id,
        e_id,
        role_desc,
        outputs={ASSIGN_SUCCESS_VAR: "0"},
    )
    raw = (values[ASSIGN_SUCCESS_VAR] or "").strip().lower()
    return 1 if raw in _TRUTHY else 0


async def assign_event_infra(conn: asyncpg.Connection, event_id: int, infra_id: int) -> bool:
    """
    Link an infra item to an event at quantity 1.

    An existing (event, infra) pair keeps its stored quantity. Returns whether
    a new row was written.
    """
    inserted = await db.execute(
        conn,
        """
        INSERT INTO event_infra (ev_id, i_id, quantity)
        VALUES ($1, $2, 1)
        ON CONFLICT (ev_id, i_id) DO NOTHING
        """,
        event_id,
        infra_id,
    )
    return inserted > 0


async def insert_notification(conn: asyncpg.Connection, *, level: str, message: str) -> None:
    await conn.execute(
        "INSERT INTO notifications (level, message) VALUES ($1, $2)",
        level,
        message,
    )


async def insert_feed_log(
    pool: asyncpg.Pool,
    *,
    a_id: int,
    f_id: int,
    amount: Decimal,
    unit: str,
    fed_by: int | None,
) -> int:
    row = await db.fetch_one(
        pool,
        """
        INSERT INTO feed_log (a_id, f_id, amount, unit, fed_by)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING fl_id
        """,
        a_id,
        f_id,
        amount,
        unit,
        fed_by,
    )
    if row is None or "fl_id" not in row:
        raise RuntimeError("Failed to insert feed log entry.")
    return int(row["fl_id"])


async def animal_age(pool: asyncpg.Pool, a_id: int) -> dict | None:
    return await db.fetch_one(pool, "SELECT animal_age($1) AS age", a_id)


async def enclosure_remaining(pool: asyncpg.Pool, e_id: int) -> dict | None:
    return await db.fetch_one(pool, "SELECT enclosure_remaining_capacity($1) AS remaining", e_id)


async def recent_notifications(pool: asyncpg.Pool, *, limit: int = 50) -> list[dict]:
    return await db.fetch_all(
        pool,
        """
        SELECT *
        FROM notifications
        ORDER BY created_at DESC
        LIMIT $1
        """,
        limit,
    )
