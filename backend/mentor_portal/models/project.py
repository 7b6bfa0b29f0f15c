from sqlalchemy import Column, String, DateTime, Boolean, JSON, ForeignKey, Index
from datetime import datetime

from mentor_portal.core.database import Base
from mentor_portal.core.types import GUID, generate_uuid


class Project(Base):
    """
    A team's project proposal.

    Approval is a two-stage gate: the team's mentor sets `is_approved`, then
    an HOD of the team's department sets `is_hod_approved`.
    """
    __tablename__ = "projects"

    __table_args__ = (
        Index('ix_projects_team_id', 'team_id'),
    )

    project_id = Column(GUID, primary_key=True, default=generate_uuid)
    title = Column(String(500), nullable=False)
    team_id = Column(GUID, ForeignKey("teams.team_id", ondelete="CASCADE"), nullable=False)
    theme = Column(JSON, default=list)  # list of tags

    is_approved = Column(Boolean, default=False, nullable=False)
    is_hod_approved = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Project {self.title}>"
