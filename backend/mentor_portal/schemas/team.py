"""Pydantic schemas for teams and students"""
from pydantic import BaseModel, Field, ConfigDict, StrictBool
from typing import Optional, List
from datetime import datetime

from mentor_portal.schemas.staff import StaffSummary
from mentor_portal.schemas.review import ReviewResponse, ScheduleResponse


class StudentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    student_id: str
    register_number: Optional[str] = None
    name: str
    department: Optional[str] = None
    section: Optional[str] = None
    team_id: Optional[str] = None


class TeamResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    team_id: str
    topic: Optional[str] = None
    code: Optional[str] = None
    theme: Optional[str] = None
    department: str
    section: Optional[str] = None
    team_lead: Optional[str] = None
    mentor: Optional[str] = None
    is_approved: Optional[bool] = None
    current_status: Optional[str] = None
    created_at: datetime


class TeamListItem(TeamResponse):
    mentor_name: Optional[str] = None
    team_lead_name: Optional[str] = None


class TeamListResponse(BaseModel):
    teams: List[TeamListItem]


class TeamDetailResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    team: TeamResponse
    team_lead: Optional[StudentResponse] = Field(None, serialization_alias="teamLead")
    mentor: Optional[StaffSummary] = None
    reviews: List[ReviewResponse] = []
    schedules: List[ScheduleResponse] = []


class TeamApprovalUpdate(BaseModel):
    team_id: str = Field(..., min_length=1)
    is_approved: StrictBool


class MentorAssignment(BaseModel):
    team_id: str = Field(..., min_length=1)
    mentor_id: str = Field(..., min_length=1)


class TeamMutationResponse(BaseModel):
    message: str
    team: TeamResponse
