"""Pydantic schemas for projects"""
from pydantic import BaseModel, Field, ConfigDict, StrictBool, field_validator
from typing import Optional, List, Any
from datetime import datetime

from mentor_portal.schemas.staff import StaffSummary
from mentor_portal.schemas.review import ReviewResponse
from mentor_portal.schemas.team import TeamResponse, StudentResponse


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    project_id: str
    title: str
    team_id: str
    theme: List[str] = []
    is_approved: bool
    is_hod_approved: bool
    created_at: datetime

    @field_validator("theme", mode="before")
    @classmethod
    def _theme_list(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return list(v)


class ProjectListItem(ProjectResponse):
    team_department: Optional[str] = None
    team_section: Optional[str] = None
    team_lead_name: Optional[str] = None
    mentor_name: Optional[str] = None
    mentor_id: Optional[str] = None


class ProjectListResponse(BaseModel):
    projects: List[ProjectListItem]


class ProjectDetailResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project: ProjectResponse
    team: Optional[TeamResponse] = None
    team_lead: Optional[StudentResponse] = Field(None, serialization_alias="teamLead")
    mentor: Optional[StaffSummary] = None
    reviews: List[ReviewResponse] = []


class ProjectApproval(BaseModel):
    project_id: str = Field(..., min_length=1)
    approved: StrictBool


class ProjectMutationResponse(BaseModel):
    message: str
    project: ProjectResponse
