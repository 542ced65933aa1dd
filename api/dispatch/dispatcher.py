"""
Generic command dispatcher.

Resolves a query or resource name against the read-only registries, then runs
the matching statement. Name resolution always happens before the pool is
touched, so unknown names never reach the store.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import asyncpg
from fastapi import Depends

from core import db
from core.errors import InvalidInput, store_failure

from . import catalog as catalog_module
from . import registry

logger = logging.getLogger(__name__)


def coerce_value(value: Any) -> str | None:
    """
    Adapt one input value for binding.

    Empty strings and missing values become NULL. Everything else is bound
    in its text form and cast by the insert statement. Booleans and integral
    floats (`3.0` from a JSON client) bind as integer text so integer, numeric
    and boolean columns all accept them.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=True)
    return str(value)


def bind_values(schema: registry.ResourceSchema, record: Mapping[str, Any]) -> list[str | None]:
    return [coerce_value(record.get(field)) for field in schema.fields]


class Dispatcher:
    def __init__(
        self,
        pool: asyncpg.Pool,
        *,
        catalog: Mapping[str, str] = catalog_module.QUERIES,
        schemas: Mapping[str, registry.ResourceSchema] = registry.SCHEMAS,
        primary_keys: Mapping[str, str] = registry.PRIMARY_KEYS,
    ) -> None:
        self._pool = pool
        self._catalog = catalog
        self._schemas = schemas
        self._primary_keys = primary_keys

    async def run_query(self, name: str | None) -> list[dict[str, Any]]:
        statement = catalog_module.resolve(name, self._catalog)
        try:
            return await db.fetch_all(self._pool, statement)
        except Exception as exc:
            logger.exception("query_failed name=%s", name)
            raise store_failure(exc) from exc

    async def run_insert(self, name: str, record: Any) -> int:
        """
        Insert one row of a registered resource and return its generated id.

        The resource is resolved before the record is inspected, so an unknown
        name is reported whatever the body looks like. The before-insert hook,
        coercion and insert share one reserved connection and one transaction;
        a failing hook means the insert statement never runs.
        """
        schema = registry.lookup(name, self._schemas)
        if record is not None and not isinstance(record, Mapping):
            raise InvalidInput(f"Insert into {schema.table} expects a JSON object.")
        values: dict[str, Any] = dict(record or {})

        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    if schema.before_insert is not None:
                        await schema.before_insert(conn, values)
                    inserted_id = await conn.fetchval(schema.insert_sql, *bind_values(schema, values))
        except Exception as exc:
            logger.exception("insert_failed resource=%s", name)
            raise store_failure(exc) from exc

        if inserted_id is None:
            raise store_failure(RuntimeError(f"Insert into {schema.table} returned no id."))
        return int(inserted_id)

    async def run_delete(self, name: str, identity: int | str) -> dict[str, Any]:
        column = registry.key_column(name, self._primary_keys)
        row_id = parse_identity(identity)
        try:
            deleted = await db.execute(self._pool, f'DELETE FROM "{name}" WHERE "{column}" = $1', row_id)
        except Exception as exc:
            logger.exception("delete_failed resource=%s id=%s", name, row_id)
            raise store_failure(exc) from exc
        return {"deleted": deleted > 0, "id": row_id, "resource": name}


def parse_identity(identity: int | str) -> int:
    if isinstance(identity, int) and not isinstance(identity, bool):
        return identity
    try:
        return int(str(identity).strip())
    except ValueError:
        raise InvalidInput(f"Invalid id: {identity}") from None


def get_dispatcher(pool: asyncpg.Pool = Depends(db.pool)) -> Dispatcher:
    return Dispatcher(pool)
