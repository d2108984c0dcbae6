from pydantic import Field
from typing import Optional, Literal
from datetime import datetime

from internhub.models.remark import RemarkRequestType
from internhub.schemas.common import CamelModel
from internhub.schemas.internship import UserSummary


class InternshipSummary(CamelModel):
    id: str
    title: str
    role: str


class RemarkCreate(CamelModel):
    internship_id: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    request_type: RemarkRequestType = RemarkRequestType.GENERAL_REMARK


class RemarkAdminResponse(CamelModel):
    admin_response: str = Field(..., min_length=1)
    # PENDING is only ever set on creation
    status: Literal["REVIEWED", "RESOLVED"]


class RemarkResponse(CamelModel):
    id: str
    internship_id: str
    user_id: str
    message: str
    request_type: str
    status: str
    admin_response: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    user: UserSummary
    internship: InternshipSummary
