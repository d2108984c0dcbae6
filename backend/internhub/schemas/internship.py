from pydantic import Field, model_validator
from typing import Optional, List
from datetime import datetime

from internhub.models.internship import InternshipStatus
from internhub.schemas.common import CamelModel


class UserSummary(CamelModel):
    id: str
    email: str
    name: Optional[str] = None


class InternshipCreate(CamelModel):
    user_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=500)
    role: str = Field(..., min_length=1, max_length=255)
    start_date: datetime
    end_date: datetime
    description: Optional[str] = None
    status: InternshipStatus = InternshipStatus.ACTIVE


class InternshipUpdate(CamelModel):
    """Partial update; only fields present in the request are applied"""
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    role: Optional[str] = Field(None, min_length=1, max_length=255)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    description: Optional[str] = None
    status: Optional[InternshipStatus] = None

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        # description may be cleared; the rest are NOT NULL columns
        for field in ("title", "role", "start_date", "end_date", "status"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class InternshipResponse(CamelModel):
    id: str
    title: str
    role: str
    start_date: datetime
    end_date: datetime
    description: Optional[str] = None
    status: InternshipStatus
    certificate_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    user: UserSummary


class InternshipWithProgress(InternshipResponse):
    """List entry; progress fields are filled only for ACTIVE internships"""
    days_left: Optional[int] = None
    is_overdue: Optional[bool] = None
    progress: Optional[int] = None


class InternshipDetailResponse(InternshipResponse):
    can_download_certificate: bool
    days_left: Optional[int] = None
    progress: int
    duration: str
    is_overdue: bool


class DashboardStats(CamelModel):
    total: int = 0
    active: int = 0
    completed: int = 0
    cancelled: int = 0


class DashboardResponse(CamelModel):
    stats: DashboardStats
    active_internships: List[InternshipWithProgress]
    completed_internships: List[InternshipWithProgress]
    recent_activity: List[InternshipWithProgress]


class CertificateEligibility(CamelModel):
    can_download: bool
    reason: Optional[str] = None
