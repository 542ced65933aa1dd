"""
Generic read / insert / delete endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from .dispatcher import Dispatcher, get_dispatcher

router = APIRouter()


@router.get("/query")
async def run_query(
    v: str | None = Query(default=None),
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> list[dict]:
    return await dispatcher.run_query(v)


@router.post("/insert/{resource}")
async def insert_row(
    resource: str,
    body: Any = Body(default=None),
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> dict:
    inserted_id = await dispatcher.run_insert(resource, body)
    return {"inserted_id": inserted_id}


@router.delete("/delete/{resource}/{identity}")
async def delete_row(
    resource: str,
    identity: str,
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> dict:
    """
    Delete one row by its identity column. A missing row is `deleted: false`.
    """
    return await dispatcher.run_delete(resource, identity)
