"""Review checkpoints, their evidence attachments and reference templates"""
from sqlalchemy import Column, String, DateTime, Boolean, Integer, Text, ForeignKey, Index
from datetime import datetime
import enum

from mentor_portal.core.database import Base
from mentor_portal.core.types import GUID, generate_uuid


class ReviewStage(str, enum.Enum):
    """Named checkpoints in the project evaluation calendar"""
    REVIEW_1 = "Review 1"
    REVIEW_2 = "Review 2"
    REVIEW_3 = "Review 3"
    FINAL_REVIEW = "Final Review"


class ReviewResult(str, enum.Enum):
    """Evaluation labels an evaluator can record"""
    EXCELLENT = "Excellent"
    GOOD = "Good"
    SATISFACTORY = "Satisfactory"
    NEEDS_IMPROVEMENT = "Needs Improvement"
    UNSATISFACTORY = "Unsatisfactory"


class Review(Base):
    """
    One team's slot in a scheduled review stage.

    Rows are created in bulk by schedule creation and later evaluated by an
    HOD or by the team's mentor.
    """
    __tablename__ = "reviews"

    __table_args__ = (
        Index('ix_reviews_team_id', 'team_id'),
        Index('ix_reviews_department', 'department'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    team_id = Column(GUID, ForeignKey("teams.team_id", ondelete="CASCADE"), nullable=False)
    stage = Column(String(50), nullable=False)
    department = Column(String(100), nullable=False)

    is_completed = Column(Boolean, default=False, nullable=False)
    completed_on = Column(DateTime, nullable=True)
    result = Column(String(50), nullable=True)
    marks = Column(Integer, nullable=True)  # 0-100

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Review {self.stage} team={self.team_id}>"


class ReviewAttachment(Base):
    """Append-only evidence link attached to a review"""
    __tablename__ = "review_attachments"

    __table_args__ = (
        Index('ix_review_attachments_review_id', 'review_id'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    review_id = Column(GUID, ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False)
    attachment_name = Column(String(255), nullable=False)
    link = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class ReviewTemplate(Base):
    """Reference document for a review stage"""
    __tablename__ = "review_templates"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    link = Column(Text, nullable=False)
    review = Column(String(50), nullable=False)  # stage

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<ReviewTemplate {self.name} ({self.review})>"
