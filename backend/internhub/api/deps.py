"""
Service dependencies.

Collaborators are built once in the application lifespan and kept on
``app.state``; endpoints receive them through these dependencies.
"""

from fastapi import Request

from internhub.services.certificate_service import CertificateService
from internhub.services.certificate_rasterizer import CertificateRasterizer
from internhub.services.internship_service import InternshipService
from internhub.services.remark_service import RemarkService


def get_internship_service(request: Request) -> InternshipService:
    return request.app.state.internship_service


def get_remark_service(request: Request) -> RemarkService:
    return request.app.state.remark_service


def get_certificate_service(request: Request) -> CertificateService:
    return request.app.state.certificate_service


def get_rasterizer(request: Request) -> CertificateRasterizer:
    return request.app.state.rasterizer
