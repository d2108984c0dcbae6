from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from internhub.core.database import Base
from internhub.core.types import GUID, generate_uuid


class RemarkRequestType(str, enum.Enum):
    CHANGE_REQUEST = "CHANGE_REQUEST"
    GENERAL_REMARK = "GENERAL_REMARK"
    EXTENSION_REQUEST = "EXTENSION_REQUEST"


class RemarkStatus(str, enum.Enum):
    PENDING = "PENDING"
    REVIEWED = "REVIEWED"
    RESOLVED = "RESOLVED"


class Remark(Base):
    """A note or request a user files against one of their internships"""
    __tablename__ = "remarks"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    internship_id = Column(GUID, ForeignKey("internships.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    message = Column(Text, nullable=False)
    # Plain strings, matching the original TEXT columns
    request_type = Column(String(50), default=RemarkRequestType.GENERAL_REMARK.value, nullable=False)
    status = Column(String(20), default=RemarkStatus.PENDING.value, nullable=False)
    admin_response = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="remarks", lazy="joined")
    internship = relationship("Internship", back_populates="remarks", lazy="joined")

    def __repr__(self):
        return f"<Remark {self.id} {self.request_type} ({self.status})>"
