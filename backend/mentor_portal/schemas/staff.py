"""Pydantic schemas for staff accounts and authentication"""
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime


# ==================== Staff ====================

class StaffCreate(BaseModel):
    """New staff account. Role-dependent fields are checked by the workflow service"""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    role: str = Field(..., min_length=1)
    staff_id: Optional[str] = Field(None, max_length=50)
    department: Optional[str] = None
    section: Optional[str] = None
    domain: Optional[str] = None
    ie_allocated: bool = False


class StaffResponse(BaseModel):
    """Staff account as returned to clients - never includes the password"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    staff_id: str
    name: str
    email: str
    role: str
    department: Optional[str] = None
    section: Optional[str] = None
    domain: Optional[str] = None
    ie_allocated: bool = False
    created_at: Optional[datetime] = None


class StaffSummary(BaseModel):
    """Mentor projection embedded in team/project detail views"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: str
    staff_id: str
    department: Optional[str] = None
    section: Optional[str] = None


class AvailableStaff(StaffResponse):
    team_count: int = 0


class StaffCreateResponse(BaseModel):
    message: str
    staff: StaffResponse


class AvailableStaffResponse(BaseModel):
    staff: List[AvailableStaff]


# ==================== Auth ====================

class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    message: str
    user: StaffResponse


class SessionInfo(BaseModel):
    """Session fields exposed to the client, serialized in camelCase"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str
    staff_id: str
    email: str
    role: str
    department: Optional[str] = None
    section: Optional[str] = None


class SessionResponse(BaseModel):
    message: str
    session: SessionInfo


class MessageResponse(BaseModel):
    message: str
