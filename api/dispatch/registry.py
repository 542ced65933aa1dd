"""
Resource schema and primary-key registries.

A resource schema lists the accepted input fields in binding order, the
insert statement those fields bind into, and an optional before-insert hook.
Values are bound as text (see `dispatcher.coerce_value`), so every non-text
column is cast server side with `$n::text::<type>`.

Both registries are read-only after import.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

import asyncpg

from core.errors import UnknownResource

BeforeInsert = Callable[[asyncpg.Connection, dict[str, Any]], Awaitable[None]]

PLACEHOLDER_VISITOR = ("Child Visitor", "12", None)


@dataclass(frozen=True)
class ResourceSchema:
    table: str
    key: str
    fields: tuple[str, ...]
    insert_sql: str
    before_insert: BeforeInsert | None = None


async def ensure_ticket_visitor(conn: asyncpg.Connection, record: dict[str, Any]) -> None:
    """
    Create a placeholder visitor when a ticket arrives without one.

    Runs on the connection that will execute the ticket insert, so the
    visitor row always exists before the ticket row references it.
    """
    if record.get("visitor_id"):
        return
    visitor_id = await conn.fetchval(
        """
        INSERT INTO visitor (name, age, contact)
        VALUES ($1, $2::text::int, $3)
        RETURNING v_id
        """,
        *PLACEHOLDER_VISITOR,
    )
    if visitor_id is None:
        raise RuntimeError("Failed to create placeholder visitor.")
    record["visitor_id"] = int(visitor_id)


SCHEMAS: Mapping[str, ResourceSchema] = MappingProxyType(
    {
        "animal": ResourceSchema(
            table="animal",
            key="a_id",
            fields=("name", "species_id", "birth_date", "gender", "arrival_date"),
            insert_sql="""
                INSERT INTO animal (name, species_id, birth_date, gender, arrival_date)
                VALUES ($1, $2::text::int, $3::text::date, $4, $5::text::date)
                RETURNING a_id
            """,
        ),
        "species": ResourceSchema(
            table="species",
            key="s_id",
            fields=("scientific_name", "common_name", "conservation_status", "size"),
            insert_sql="""
                INSERT INTO species (scientific_name, common_name, conservation_status, size)
                VALUES ($1, $2, $3, $4)
                RETURNING s_id
            """,
        ),
        "enclosure": ResourceSchema(
            table="enclosure",
            key="e_id",
            fields=("name", "location", "capacity", "size"),
            insert_sql="""
                INSERT INTO enclosure (name, location, capacity, size)
                VALUES ($1, $2, $3::text::int, $4::text::numeric)
                RETURNING e_id
            """,
        ),
        "medrec": ResourceSchema(
            table="medrec",
            key="mr_id",
            fields=("a_id", "last_checked", "next_check", "diseases", "notes"),
            insert_sql="""
                INSERT INTO medrec (a_id, last_checked, next_check, diseases, notes)
                VALUES ($1::text::int, $2::text::date, $3::text::date, $4, $5)
                RETURNING mr_id
            """,
        ),
        "eats": ResourceSchema(
            table="eats",
            key="eats_id",
            fields=("a_id", "species_id", "f_id", "preference"),
            insert_sql="""
                INSERT INTO eats (a_id, species_id, f_id, preference)
                VALUES ($1::text::int, $2::text::int, $3::text::int, $4)
                RETURNING eats_id
            """,
        ),
        "visitor": ResourceSchema(
            table="visitor",
            key="v_id",
            fields=("name", "age", "contact"),
            insert_sql="""
                INSERT INTO visitor (name, age, contact)
                VALUES ($1, $2::text::int, $3)
                RETURNING v_id
            """,
        ),
        "ticket": ResourceSchema(
            table="ticket",
            key="t_id",
            fields=("type", "price", "visitor_id"),
            insert_sql="""
                INSERT INTO ticket (type, price, visitor_id)
                VALUES ($1, $2::text::numeric, $3::text::int)
                RETURNING t_id
            """,
            before_insert=ensure_ticket_visitor,
        ),
        "food": ResourceSchema(
            table="food",
            key="f_id",
            fields=("name", "type", "quantity", "unit", "price_per_unit"),
            insert_sql="""
                INSERT INTO food (name, type, quantity, unit, price_per_unit)
                VALUES ($1, $2, $3::text::numeric, $4, $5::text::numeric)
                RETURNING f_id
            """,
        ),
        "employee": ResourceSchema(
            table="employee",
            key="emp_id",
            fields=("name", "role", "salary", "hire_date"),
            insert_sql="""
                INSERT INTO employee (name, role, salary, hire_date)
                VALUES ($1, $2, $3::text::numeric, $4::text::date)
                RETURNING emp_id
            """,
        ),
        "infra": ResourceSchema(
            table="infra",
            key="i_id",
            fields=("name", "type", "size"),
            insert_sql="""
                INSERT INTO infra (name, type, size)
                VALUES ($1, $2, $3)
                RETURNING i_id
            """,
        ),
        "event": ResourceSchema(
            table="event",
            key="ev_id",
            fields=("title", "e_date", "e_id", "location", "capacity"),
            insert_sql="""
                INSERT INTO event (title, e_date, e_id, location, capacity)
                VALUES ($1, $2::text::date, $3::text::int, $4, $5::text::int)
                RETURNING ev_id
            """,
        ),
        "event_infra": ResourceSchema(
            table="event_infra",
            key="ei_id",
            fields=("ev_id", "i_id", "quantity"),
            insert_sql="""
                INSERT INTO event_infra (ev_id, i_id, quantity)
                VALUES ($1::text::int, $2::text::int, $3::text::int)
                RETURNING ei_id
            """,
        ),
        "employee_enclosure": ResourceSchema(
            table="employee_enclosure",
            key="ee_id",
            fields=("emp_id", "e_id", "assigned_from", "assigned_to", "role_desc"),
            insert_sql="""
                INSERT INTO employee_enclosure (emp_id, e_id, assigned_from, assigned_to, role_desc)
                VALUES ($1::text::int, $2::text::int, $3::text::date, $4::text::date, $5)
                RETURNING ee_id
            """,
        ),
        "animal_enclosure": ResourceSchema(
            table="animal_enclosure",
            key="ae_id",
            fields=("a_id", "e_id", "assigned_from", "assigned_to"),
            insert_sql="""
                INSERT INTO animal_enclosure (a_id, e_id, assigned_from, assigned_to)
                VALUES ($1::text::int, $2::text::int, $3::text::date, $4::text::date)
                RETURNING ae_id
            """,
        ),
    }
)

# Deletable resources. feed_log and notifications are append-only: they can be
# removed here but have no insert schema and no update path.
PRIMARY_KEYS: Mapping[str, str] = MappingProxyType(
    {
        **{name: schema.key for name, schema in SCHEMAS.items()},
        "feed_log": "fl_id",
        "notifications": "n_id",
    }
)


def lookup(name: str, schemas: Mapping[str, ResourceSchema] = SCHEMAS) -> ResourceSchema:
    schema = schemas.get(name)
    if schema is None:
        raise UnknownResource(name)
    return schema


def key_column(name: str, primary_keys: Mapping[str, str] = PRIMARY_KEYS) -> str:
    column = primary_keys.get(name)
    if column is None:
        raise UnknownResource(name)
    return column


def hooked_resources(schemas: Mapping[str, ResourceSchema] = SCHEMAS) -> list[str]:
    return sorted(name for name, schema in schemas.items() if schema.before_insert is not None)
