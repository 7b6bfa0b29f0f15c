from sqlalchemy import Column, String, DateTime, Date, Boolean, Text, ForeignKey, Index
from datetime import datetime

from mentor_portal.core.database import Base
from mentor_portal.core.types import GUID, generate_uuid


class Log(Base):
    """
    Daily activity entry written by a student.

    `mentor_approved` is tri-state (None = pending) and is decided once by
    the mentor of the owning team.
    """
    __tablename__ = "logs"

    __table_args__ = (
        Index('ix_logs_team_id', 'team_id'),
        Index('ix_logs_student_id', 'student_id'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    student_id = Column(String(50), ForeignKey("students.student_id", ondelete="CASCADE"), nullable=False)
    team_id = Column(GUID, ForeignKey("teams.team_id", ondelete="CASCADE"), nullable=False)

    date = Column(Date, nullable=False)
    expected_task = Column(Text, nullable=True)
    completed_task = Column(Text, nullable=True)
    comments = Column(Text, nullable=True)
    mentor_approved = Column(Boolean, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Log {self.student_id} {self.date}>"
