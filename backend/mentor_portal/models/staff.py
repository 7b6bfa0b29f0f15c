"""Staff accounts: HODs, class advisors and project mentors"""
from sqlalchemy import Column, String, DateTime, Boolean, Index
from datetime import datetime

from mentor_portal.core.database import Base
from mentor_portal.core.types import GUID, generate_uuid, generate_staff_code


class Staff(Base):
    """Staff member. `role` is a '+'-joined combination such as HOD+PROJECT_MENTOR"""
    __tablename__ = "staffs"

    __table_args__ = (
        Index('ix_staffs_department', 'department'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    staff_id = Column(String(50), unique=True, nullable=False, default=generate_staff_code)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # bcrypt hash
    role = Column(String(100), nullable=False)

    department = Column(String(100), nullable=True)
    section = Column(String(20), nullable=True)
    domain = Column(String(255), nullable=True)
    ie_allocated = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Staff {self.staff_id} {self.role}>"
