from internhub.services.certificate_service import CertificateService
from internhub.services.certificate_rasterizer import CertificateRasterizer
from internhub.services.email_service import EmailService
from internhub.services.internship_service import InternshipService
from internhub.services.remark_service import RemarkService

__all__ = [
    "CertificateService",
    "CertificateRasterizer",
    "EmailService",
    "InternshipService",
    "RemarkService",
]
