"""Pydantic schemas for project diary generation"""
from pydantic import BaseModel, Field, ConfigDict, AliasChoices
from typing import Optional, List

from mentor_portal.schemas.staff import StaffSummary
from mentor_portal.schemas.team import TeamResponse, StudentResponse
from mentor_portal.schemas.project import ProjectResponse
from mentor_portal.schemas.review import ReviewResponse
from mentor_portal.schemas.log import LogResponse


class DiaryRequest(BaseModel):
    team_id: str = Field(..., min_length=1, validation_alias=AliasChoices("teamId", "team_id"))


class DiaryLogEntry(LogResponse):
    student: Optional[StudentResponse] = None


class DiaryTableSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    columns: List[str]
    rows: List[List[str]]


class DiaryDocumentSchema(BaseModel):
    """Built document: header fields, sections I-VII and signature captions"""
    model_config = ConfigDict(from_attributes=True)

    header_lines: List[str]
    doc_ref: str
    department: str
    year_sem_sec: str
    course: str
    project_title: str
    sections: List[DiaryTableSchema]
    signatures: List[List[str]]


class DiaryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    team: TeamResponse
    students: List[StudentResponse] = []
    team_lead: Optional[StudentResponse] = Field(None, serialization_alias="teamLead")
    mentor: Optional[StaffSummary] = None
    logs: List[DiaryLogEntry] = []
    reviews: List[ReviewResponse] = []
    project: Optional[ProjectResponse] = None
    document: DiaryDocumentSchema
