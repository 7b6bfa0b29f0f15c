from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_portal.core.database import get_db
from mentor_portal.modules.auth import Principal, get_current_principal
from mentor_portal.schemas.staff import (
    AvailableStaffResponse,
    StaffCreate,
    StaffCreateResponse,
    StaffResponse,
)
from mentor_portal.services import aggregation, workflow


router = APIRouter()


@router.post("/create", response_model=StaffCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_staff(
    body: StaffCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Create a staff account (HOD only)"""
    staff = await workflow.create_staff(db, principal, body)
    return StaffCreateResponse(
        message="Staff account created successfully",
        staff=StaffResponse.model_validate(staff),
    )


@router.get("/available", response_model=AvailableStaffResponse)
async def available_staff(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Project mentors who can take another team"""
    staff = await aggregation.available_staff(db, principal)
    return AvailableStaffResponse(staff=staff)
