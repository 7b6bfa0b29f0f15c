# Re-export all models for convenient imports
from mentor_portal.models.staff import Staff
from mentor_portal.models.student import Student
from mentor_portal.models.team import Team
from mentor_portal.models.project import Project
from mentor_portal.models.review import (
    Review,
    ReviewAttachment,
    ReviewTemplate,
    ReviewStage,
    ReviewResult,
)
from mentor_portal.models.schedule import Schedule
from mentor_portal.models.log import Log

__all__ = [
    "Staff",
    "Student",
    "Team",
    "Project",
    "Review",
    "ReviewAttachment",
    "ReviewTemplate",
    "ReviewStage",
    "ReviewResult",
    "Schedule",
    "Log",
]
