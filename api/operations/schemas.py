"""
Pydantic schemas for operation endpoints.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, Field


def _blank_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


# Browser forms submit untouched inputs as "".
Blank = BeforeValidator(_blank_to_none)


class ScheduleEventRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    e_date: date
    e_id: int
    capacity: Annotated[int | None, Blank] = Field(default=None, ge=0)
    infra_ids: list[int] | None = None


class AssignEmployeeRequest(BaseModel):
    emp_id: int
    e_id: int
    role_desc: str | None = Field(default=None, max_length=200)


class FeedLogRequest(BaseModel):
    a_id: int
    f_id: int
    amount: Annotated[Decimal | None, Blank] = None
    unit: Annotated[str | None, Blank] = Field(default=None, max_length=20)
    fed_by: Annotated[int | None, Blank] = None
