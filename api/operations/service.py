"""
Operation business logic that runs single statements on an injected pool.
"""

from __future__ import annotations

import logging
from decimal import Decimal

import asyncpg
from fastapi import Depends

from core import db
from core.errors import store_failure

from . import repository, schemas

DEFAULT_FEED_UNIT = "kg"
NOTIFICATION_LIMIT = 50

logger = logging.getLogger(__name__)


class OperationsService:
    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    async def record_feeding(self, payload: schemas.FeedLogRequest) -> dict:
        """
        Append one feeding event. Missing amount is 0, missing unit is kg.
        """
        try:
            feed_log_id = await repository.insert_feed_log(
                self._pool,
                a_id=payload.a_id,
                f_id=payload.f_id,
                amount=payload.amount or Decimal(0),
                unit=payload.unit or DEFAULT_FEED_UNIT,
                fed_by=payload.fed_by or None,
            )
        except Exception as exc:
            logger.exception("feed_log_insert_failed a_id=%s f_id=%s", payload.a_id, payload.f_id)
            raise store_failure(exc) from exc
        return {"insertId": feed_log_id}

    async def animal_age(self, a_id: int) -> dict:
        try:
            row = await repository.animal_age(self._pool, a_id)
        except Exception as exc:
            logger.exception("animal_age_failed a_id=%s", a_id)
            raise store_failure(exc) from exc
        return row or {"age": None}

    async def enclosure_remaining(self, e_id: int) -> dict:
        try:
            row = await repository.enclosure_remaining(self._pool, e_id)
        except Exception as exc:
            logger.exception("enclosure_remaining_failed e_id=%s", e_id)
            raise store_failure(exc) from exc
        return row or {"remaining": None}

    async def recent_notifications(self, limit: int = NOTIFICATION_LIMIT) -> list[dict]:
        try:
            return await repository.recent_notifications(self._pool, limit=limit)
        except Exception as exc:
            logger.exception("notifications_failed")
            raise store_failure(exc) from exc


def get_operations_service(pool: asyncpg.Pool = Depends(db.pool)) -> OperationsService:
    return OperationsService(pool)
