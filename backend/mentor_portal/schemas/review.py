"""Pydantic schemas for reviews, schedules, attachments and templates"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime, timezone

from mentor_portal.models.review import ReviewStage, ReviewResult


# ==================== Reviews ====================

class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    team_id: str
    stage: str
    department: str
    is_completed: bool
    completed_on: Optional[datetime] = None
    result: Optional[str] = None
    marks: Optional[int] = None
    created_at: datetime


class AttachmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    review_id: str
    attachment_name: str
    link: str
    created_at: datetime


class ReviewListItem(ReviewResponse):
    """Review with the team fields a dashboard row needs"""
    team_topic: Optional[str] = None
    team_code: Optional[str] = None
    team_section: Optional[str] = None
    team_lead_id: Optional[str] = None
    team_lead_name: Optional[str] = None
    attachments: List[AttachmentResponse] = []


class ReviewListResponse(BaseModel):
    reviews: List[ReviewListItem]


class ReviewUpdate(BaseModel):
    """Evaluation of a review. Omitted fields are left unchanged"""
    review_id: str = Field(..., min_length=1)
    result: Optional[ReviewResult] = None
    marks: Optional[int] = Field(None, ge=0, le=100)
    is_completed: Optional[bool] = None


class ReviewMutationResponse(BaseModel):
    message: str
    review: ReviewResponse


class AttachmentCreate(BaseModel):
    review_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    link: str = Field(..., min_length=1)


class AttachmentCreateResponse(BaseModel):
    message: str
    attachment: AttachmentResponse


# ==================== Templates ====================

class TemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    link: str = Field(..., min_length=1)
    review: ReviewStage


class TemplateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    link: str
    review: str
    created_at: datetime


class TemplateCreateResponse(BaseModel):
    message: str
    template: TemplateResponse


class TemplateListResponse(BaseModel):
    templates: List[TemplateResponse]


# ==================== Schedules ====================

class ScheduleCreate(BaseModel):
    stage: ReviewStage
    department: str = Field(..., min_length=1, max_length=100)
    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def to_naive_utc(cls, v: datetime) -> datetime:
        """Stored timestamps are naive UTC; offsets are converted, naive values taken as UTC"""
        if v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class ScheduleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    stage: str
    department: str
    start: datetime
    end: datetime
    created_at: datetime


class ScheduleListResponse(BaseModel):
    schedules: List[ScheduleResponse]


class ScheduleCreateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    schedule: ScheduleResponse
    teams_scheduled: int = Field(0, serialization_alias="teamsScheduled")
    reviews_created: int = Field(0, serialization_alias="reviewsCreated")
