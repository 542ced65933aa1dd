"""
Procedure orchestration: routine calls plus their dependent statements.

Every invocation reserves one pooled connection; the routine call, the
output-variable read and any follow-up writes run on it in issue order.

The schedule-event sequence runs inside a single transaction. If a follow-up
write fails, the event row created by the routine is rolled back with it, so
callers never observe a half-scheduled event.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date

import asyncpg
from fastapi import Depends

from core import db
from core.errors import store_failure

from . import repository

logger = logging.getLogger(__name__)


class ProcedureOrchestrator:
    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    async def schedule_event(
        self,
        *,
        title: str,
        e_date: date,
        e_id: int,
        capacity: int | None,
        infra_ids: Iterable[int] | None = None,
    ) -> dict:
        assigned = list(infra_ids or [])
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    event_id = await repository.call_schedule_event(
                        conn,
                        title=title,
                        e_date=e_date,
                        e_id=e_id,
                        capacity=capacity,
                    )
                    for infra_id in assigned:
                        await repository.assign_event_infra(conn, event_id, infra_id)
                    if assigned:
                        await repository.insert_notification(
                            conn,
                            level="INFO",
                            message=f"Infra assigned manually for event {event_id}",
                        )
        except Exception as exc:
            logger.exception("schedule_event_failed title=%s e_id=%s", title, e_id)
            raise store_failure(exc) from exc

        logger.info("event_scheduled event_id=%s infra_count=%s", event_id, len(assigned))
        return {"event_id": event_id, "assigned_infra": assigned}

    async def assign_employee(self, *, emp_id: int, e_id: int, role_desc: str | None) -> dict:
        try:
            async with self._pool.acquire() as conn:
                success = await repository.call_assign_employee(
                    conn,
                    emp_id=emp_id,
                    e_id=e_id,
                    role_desc=role_desc,
                )
        except Exception as exc:
            logger.exception("assign_employee_failed emp_id=%s e_id=%s", emp_id, e_id)
            raise store_failure(exc) from exc
        return {"success": success}


def get_orchestrator(pool: asyncpg.Pool = Depends(db.pool)) -> ProcedureOrchestrator:
    return ProcedureOrchestrator(pool)
