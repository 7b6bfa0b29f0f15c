"""Pydantic schemas for student activity logs"""
from pydantic import BaseModel, Field, ConfigDict, StrictBool
from typing import Optional, List
from datetime import datetime, date


class LogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    student_id: str
    team_id: str
    date: date
    expected_task: Optional[str] = None
    completed_task: Optional[str] = None
    comments: Optional[str] = None
    mentor_approved: Optional[bool] = None
    created_at: datetime


class PendingLogItem(BaseModel):
    id: str
    created_at: datetime
    date: date
    expected_task: Optional[str] = None
    completed_task: Optional[str] = None
    comments: Optional[str] = None
    student_id: str
    student_name: str
    team_id: str
    team_topic: Optional[str] = None
    team_code: Optional[str] = None


class StudentLogItem(BaseModel):
    id: str
    created_at: datetime
    date: date
    expected_task: Optional[str] = None
    completed_task: Optional[str] = None
    comments: Optional[str] = None
    mentor_approved: Optional[bool] = None
    team_id: str
    team_topic: Optional[str] = None
    team_code: Optional[str] = None


class StudentSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    student_id: str
    name: str
    department: Optional[str] = None
    section: Optional[str] = None


class PendingLogsResponse(BaseModel):
    logs: List[PendingLogItem]


class StudentLogsResponse(BaseModel):
    student: Optional[StudentSummary] = None
    logs: List[StudentLogItem]


class MentorStudentsResponse(BaseModel):
    students: List[StudentSummary]


class LogApproval(BaseModel):
    log_id: str = Field(..., min_length=1)
    approved: StrictBool
    comments: Optional[str] = None


class LogMutationResponse(BaseModel):
    message: str
    log: LogResponse
