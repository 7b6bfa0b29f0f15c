from sqlalchemy import Column, String, DateTime, ForeignKey, Index
from datetime import datetime

from mentor_portal.core.database import Base
from mentor_portal.core.types import GUID


class Student(Base):
    """Student record. Owned by the student-facing system; read-only here"""
    __tablename__ = "students"

    __table_args__ = (
        Index('ix_students_team_id', 'team_id'),
    )

    student_id = Column(String(50), primary_key=True)
    register_number = Column(String(50), nullable=True)
    name = Column(String(255), nullable=False)
    department = Column(String(100), nullable=True)
    section = Column(String(20), nullable=True)
    team_id = Column(GUID, ForeignKey("teams.team_id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Student {self.student_id}>"
