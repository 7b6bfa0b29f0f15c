# Pydantic schemas
from mentor_portal.schemas.staff import (
    StaffCreate,
    StaffResponse,
    StaffSummary,
    AvailableStaff,
    LoginRequest,
    LoginResponse,
    SessionInfo,
    SessionResponse,
    MessageResponse,
)
from mentor_portal.schemas.review import (
    ReviewResponse,
    ReviewListItem,
    ReviewUpdate,
    AttachmentCreate,
    AttachmentResponse,
    TemplateCreate,
    TemplateResponse,
    ScheduleCreate,
    ScheduleResponse,
)
from mentor_portal.schemas.team import (
    StudentResponse,
    TeamResponse,
    TeamListItem,
    TeamDetailResponse,
    TeamApprovalUpdate,
    MentorAssignment,
)
from mentor_portal.schemas.project import (
    ProjectResponse,
    ProjectListItem,
    ProjectDetailResponse,
    ProjectApproval,
)
from mentor_portal.schemas.log import (
    LogResponse,
    PendingLogItem,
    StudentLogItem,
    StudentSummary,
    LogApproval,
)
from mentor_portal.schemas.diary import (
    DiaryRequest,
    DiaryResponse,
    DiaryDocumentSchema,
)
