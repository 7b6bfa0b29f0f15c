"""Student project teams"""
from sqlalchemy import Column, String, DateTime, Boolean, Index
from datetime import datetime

from mentor_portal.core.database import Base
from mentor_portal.core.types import GUID, generate_uuid


class Team(Base):
    """
    A student group working on one project topic.

    `team_lead` holds a student_id and `mentor` a staff code (Staff.staff_id).
    Both are plain references resolved by the aggregation service, so a
    dangling value shows up as a null name rather than an error.
    `is_approved` is tri-state: None = pending, True = approved, False = rejected.
    """
    __tablename__ = "teams"

    __table_args__ = (
        Index('ix_teams_department_section', 'department', 'section'),
        Index('ix_teams_mentor', 'mentor'),
    )

    team_id = Column(GUID, primary_key=True, default=generate_uuid)
    topic = Column(String(500), nullable=True)
    code = Column(String(50), nullable=True)
    theme = Column(String(255), nullable=True)

    department = Column(String(100), nullable=False)
    section = Column(String(20), nullable=True)

    team_lead = Column(String(50), nullable=True)
    mentor = Column(String(50), nullable=True)

    is_approved = Column(Boolean, nullable=True)
    current_status = Column(String(100), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Team {self.code or self.team_id}>"
