from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_portal.core.database import get_db
from mentor_portal.modules.auth import Principal, get_current_principal
from mentor_portal.schemas.project import (
    ProjectApproval,
    ProjectDetailResponse,
    ProjectListResponse,
    ProjectMutationResponse,
    ProjectResponse,
)
from mentor_portal.services import aggregation, workflow


router = APIRouter()


def _approval_text(approved: bool) -> str:
    return "approved" if approved else "unapproved"


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Projects of the teams visible to the caller, newest first"""
    projects = await aggregation.list_projects(db, principal)
    return ProjectListResponse(projects=projects)


@router.get("/details", response_model=ProjectDetailResponse)
async def get_project_details(
    project_id: str = Query(..., min_length=1),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    return await aggregation.project_detail(db, principal, project_id)


@router.patch("/approve-mentors", response_model=ProjectMutationResponse)
async def approve_by_mentor(
    body: ProjectApproval,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """First-stage approval by the team's mentor"""
    project = await workflow.approve_project_by_mentor(db, principal, body.project_id, body.approved)
    return ProjectMutationResponse(
        message=f"Project {_approval_text(body.approved)} successfully",
        project=ProjectResponse.model_validate(project),
    )


@router.patch("/approve-hod", response_model=ProjectMutationResponse)
async def approve_by_hod(
    body: ProjectApproval,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Final approval by the HOD; requires mentor approval first"""
    project = await workflow.approve_project_by_hod(db, principal, body.project_id, body.approved)
    return ProjectMutationResponse(
        message=f"Project {_approval_text(body.approved)} by HOD successfully",
        project=ProjectResponse.model_validate(project),
    )
