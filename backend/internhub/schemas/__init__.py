from internhub.schemas.common import CamelModel, MessageResponse
from internhub.schemas.internship import (
    UserSummary,
    InternshipCreate,
    InternshipUpdate,
    InternshipResponse,
    InternshipWithProgress,
    InternshipDetailResponse,
    DashboardStats,
    DashboardResponse,
    CertificateEligibility,
)
from internhub.schemas.remark import (
    InternshipSummary,
    RemarkCreate,
    RemarkAdminResponse,
    RemarkResponse,
)
from internhub.schemas.certificate import CertificateData, CertificateDataResponse

__all__ = [
    "CamelModel",
    "MessageResponse",
    "UserSummary",
    "InternshipCreate",
    "InternshipUpdate",
    "InternshipResponse",
    "InternshipWithProgress",
    "InternshipDetailResponse",
    "DashboardStats",
    "DashboardResponse",
    "CertificateEligibility",
    "InternshipSummary",
    "RemarkCreate",
    "RemarkAdminResponse",
    "RemarkResponse",
    "CertificateData",
    "CertificateDataResponse",
]
