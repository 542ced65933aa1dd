"""
Operation endpoints: stored routines, stored functions and the feed log.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from . import schemas
from .orchestrator import ProcedureOrchestrator, get_orchestrator
from .service import OperationsService, get_operations_service

router = APIRouter()


@router.post("/schedule_event")
async def schedule_event(
    request: schemas.ScheduleEventRequest,
    orchestrator: ProcedureOrchestrator = Depends(get_orchestrator),
) -> dict:
    return await orchestrator.schedule_event(
        title=request.title,
        e_date=request.e_date,
        e_id=request.e_id,
        capacity=request.capacity,
        infra_ids=request.infra_ids,
    )


@router.post("/assign_employee")
async def assign_employee(
    request: schemas.AssignEmployeeRequest,
    orchestrator: ProcedureOrchestrator = Depends(get_orchestrator),
) -> dict:
    return await orchestrator.assign_employee(
        emp_id=request.emp_id,
        e_id=request.e_id,
        role_desc=request.role_desc,
    )


@router.post("/feed_log")
async def record_feeding(
    request: schemas.FeedLogRequest,
    operations: OperationsService = Depends(get_operations_service),
) -> dict:
    return await operations.record_feeding(request)


@router.get("/animal_age/{a_id}")
async def animal_age(
    a_id: int,
    operations: OperationsService = Depends(get_operations_service),
) -> dict:
    return await operations.animal_age(a_id)


@router.get("/enclosure_remaining/{e_id}")
async def enclosure_remaining(
    e_id: int,
    operations: OperationsService = Depends(get_operations_service),
) -> dict:
    return await operations.enclosure_remaining(e_id)


@router.get("/notifications")
async def notifications(
    operations: OperationsService = Depends(get_operations_service),
) -> list[dict]:
    return await operations.recent_notifications()
