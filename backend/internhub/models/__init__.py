# Re-export all models for convenient imports
from internhub.models.user import User, UserRole
from internhub.models.internship import Internship, InternshipStatus
from internhub.models.remark import Remark, RemarkStatus, RemarkRequestType

__all__ = [
    "User",
    "UserRole",
    "Internship",
    "InternshipStatus",
    "Remark",
    "RemarkStatus",
    "RemarkRequestType",
]
