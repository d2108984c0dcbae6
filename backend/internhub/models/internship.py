from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from internhub.core.database import Base
from internhub.core.types import GUID, generate_uuid


class InternshipStatus(str, enum.Enum):
    """Internship lifecycle status"""
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Internship(Base):
    """A time-bounded assignment of a user to a role/program.

    Invariant: start_date < end_date (checked by InternshipService).
    Dates are stored as naive UTC.
    """
    __tablename__ = "internships"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(500), nullable=False)
    role = Column(String(255), nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(
        SQLEnum(InternshipStatus, name="internshipstatus"),
        default=InternshipStatus.ACTIVE,
        nullable=False
    )
    # Kept for the wire contract; certificates are rendered on demand, never stored
    certificate_url = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="internships", lazy="joined")
    remarks = relationship("Remark", back_populates="internship", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Internship {self.id} {self.title} ({self.status.value if self.status else None})>"
