from sqlalchemy import Column, String, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from internhub.core.database import Base
from internhub.core.types import GUID, generate_uuid


class UserRole(str, enum.Enum):
    """User roles"""
    ADMIN = "ADMIN"
    USER = "USER"


class User(Base):
    """User account.

    Owned by the external user-management service; this backend only reads
    id, email, name and role.
    """
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    hashed_password = Column(String(255), nullable=True)

    role = Column(SQLEnum(UserRole, name="role"), default=UserRole.USER, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    internships = relationship("Internship", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    remarks = relationship("Remark", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def display_name(self) -> str:
        return self.name or self.email

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self):
        return f"<User {self.email}>"
