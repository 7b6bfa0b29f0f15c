from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_portal.core.database import get_db
from mentor_portal.modules.auth import Principal, get_current_principal
from mentor_portal.schemas.team import (
    MentorAssignment,
    TeamApprovalUpdate,
    TeamDetailResponse,
    TeamListResponse,
    TeamMutationResponse,
    TeamResponse,
)
from mentor_portal.services import aggregation, workflow


router = APIRouter()


@router.get("", response_model=TeamListResponse)
async def list_teams(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Teams visible to the caller, newest first"""
    teams = await aggregation.list_teams(db, principal)
    return TeamListResponse(teams=teams)


@router.get("/details", response_model=TeamDetailResponse)
async def get_team_details(
    team_id: str = Query(..., min_length=1),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    return await aggregation.team_detail(db, principal, team_id)


@router.patch("/update-approval", response_model=TeamMutationResponse)
async def update_team_approval(
    body: TeamApprovalUpdate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Approve or reject a team (HOD of the team's department)"""
    team = await workflow.set_team_approval(db, principal, body.team_id, body.is_approved)
    status_text = "approved" if body.is_approved else "rejected"
    return TeamMutationResponse(
        message=f"Team {status_text} successfully",
        team=TeamResponse.model_validate(team),
    )


@router.patch("/assign-mentor", response_model=TeamMutationResponse)
async def assign_mentor(
    body: MentorAssignment,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Assign a project mentor to a team (HOD or class advisor)"""
    team = await workflow.assign_mentor(db, principal, body.team_id, body.mentor_id)
    return TeamMutationResponse(
        message="Mentor assigned successfully",
        team=TeamResponse.model_validate(team),
    )
