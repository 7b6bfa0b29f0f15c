from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_portal.core.database import get_db
from mentor_portal.modules.auth import Principal, get_current_principal
from mentor_portal.schemas.log import (
    LogApproval,
    LogMutationResponse,
    LogResponse,
    MentorStudentsResponse,
    PendingLogsResponse,
    StudentLogsResponse,
)
from mentor_portal.services import aggregation, workflow


router = APIRouter()


@router.patch("/approve", response_model=LogMutationResponse)
async def approve_log(
    body: LogApproval,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Approve or reject a student's log (mentor of the log's team)"""
    log = await workflow.approve_log(db, principal, body.log_id, body.approved, body.comments)
    status_text = "approved" if body.approved else "rejected"
    return LogMutationResponse(
        message=f"Log {status_text} successfully",
        log=LogResponse.model_validate(log),
    )


@router.get("/pending", response_model=PendingLogsResponse)
async def pending_logs(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    logs = await aggregation.pending_logs(db, principal)
    return PendingLogsResponse(logs=logs)


@router.get("/student", response_model=StudentLogsResponse)
async def student_logs(
    student_id: str = Query(..., min_length=1),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    student, logs = await aggregation.student_logs(db, principal, student_id)
    return StudentLogsResponse(student=student, logs=logs)


@router.get("/students", response_model=MentorStudentsResponse)
async def mentor_students(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Students who have logged work in the caller's teams"""
    students = await aggregation.mentor_students(db, principal)
    return MentorStudentsResponse(students=students)
