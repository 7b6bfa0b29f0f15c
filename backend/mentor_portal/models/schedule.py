from sqlalchemy import Column, String, DateTime, Index
from datetime import datetime

from mentor_portal.core.database import Base
from mentor_portal.core.types import GUID, generate_uuid


class Schedule(Base):
    """Review window for a stage in one department"""
    __tablename__ = "project_review"

    __table_args__ = (
        Index('ix_project_review_department', 'department'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    stage = Column(String(50), nullable=False)
    department = Column(String(100), nullable=False)
    start = Column(DateTime, nullable=False)
    end = Column(DateTime, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Schedule {self.stage} {self.department}>"
