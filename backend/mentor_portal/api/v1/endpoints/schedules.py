from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_portal.core.database import get_db
from mentor_portal.modules.auth import Principal, get_current_principal
from mentor_portal.schemas.review import (
    ScheduleCreate,
    ScheduleCreateResponse,
    ScheduleListResponse,
    ScheduleResponse,
)
from mentor_portal.services import aggregation, workflow


router = APIRouter()


@router.get("", response_model=ScheduleListResponse)
async def list_schedules(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    schedules = await aggregation.list_schedules(db, principal)
    return ScheduleListResponse(schedules=schedules)


@router.post("/create", response_model=ScheduleCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_schedule(
    body: ScheduleCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """
    Open a review window for a department.

    Creates one pending review for every approved team in the department
    (the caller's section only, for a class advisor who is not an HOD).
    """
    outcome = await workflow.create_schedule(db, principal, body)
    return ScheduleCreateResponse(
        message=outcome.message,
        schedule=ScheduleResponse.model_validate(outcome.schedule),
        teams_scheduled=outcome.teams_scheduled,
        reviews_created=outcome.reviews_created,
    )
