"""
Internship API Endpoints

Static and multi-segment paths are registered before the ``/{internship_id}``
routes; FastAPI matches in registration order, so moving them below would let
the wildcard shadow them.

Endpoints:
- POST   /internships                              - Create (admin)
- GET    /internships                              - List all (admin)
- GET    /internships/dashboard                    - Caller's dashboard
- GET    /internships/my-internships               - Caller's internships
- GET    /internships/my-remarks                   - Caller's remarks
- GET    /internships/user/{user_id}               - Internships of a user
- GET    /internships/admin/remarks                - All remarks (admin)
- PATCH  /internships/admin/remarks/{remark_id}    - Respond to a remark (admin)
- GET    /internships/my-internships/{id}/details  - Detail view
- POST   /internships/remarks                      - Create remark
- GET    /internships/{id}/certificate-*           - Certificate data, HTML, PNG, PDF
- GET    /internships/{id}/certificate-eligibility - Download gate
- GET    /internships/{id}/remarks                 - Caller's remarks on an internship
- GET/PATCH/DELETE /internships/{id}               - Generic CRUD
"""

import re
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from internhub.api.deps import (
    get_internship_service,
    get_remark_service,
    get_certificate_service,
    get_rasterizer,
)
from internhub.core.database import get_db
from internhub.core.exceptions import RenderingError
from internhub.core.logging_config import logger, set_internship_id
from internhub.models.user import User
from internhub.modules.auth.dependencies import get_current_user, get_current_admin
from internhub.schemas import (
    InternshipCreate,
    InternshipUpdate,
    InternshipResponse,
    InternshipWithProgress,
    InternshipDetailResponse,
    DashboardResponse,
    CertificateEligibility,
    CertificateDataResponse,
    RemarkCreate,
    RemarkAdminResponse,
    RemarkResponse,
    MessageResponse,
)
from internhub.services.certificate_rasterizer import CertificateRasterizer
from internhub.services.certificate_service import CertificateService
from internhub.services.internship_service import InternshipService
from internhub.services.remark_service import RemarkService

router = APIRouter(prefix="/internships", tags=["Internships"])

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def safe_filename_part(value: str) -> str:
    """Keep ASCII letters and digits; everything else becomes '_'"""
    return re.sub(r"[^a-zA-Z0-9]", "_", value or "")


# ==================== COLLECTION ====================

@router.post("", response_model=InternshipResponse, status_code=status.HTTP_201_CREATED)
async def create_internship(
    data: InternshipCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
    service: InternshipService = Depends(get_internship_service)
):
    """Assign an internship to a user; the user is emailed best-effort"""
    return await service.create(db, data)


@router.get("", response_model=List[InternshipResponse])
async def list_internships(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
    service: InternshipService = Depends(get_internship_service)
):
    return await service.list_all(db)


# ==================== STATIC ROUTES ====================

@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: InternshipService = Depends(get_internship_service)
):
    return await service.dashboard(db, current_user.id)


@router.get("/my-internships", response_model=List[InternshipWithProgress])
async def get_my_internships(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: InternshipService = Depends(get_internship_service)
):
    return await service.list_by_user(db, current_user.id)


@router.get("/my-remarks", response_model=List[RemarkResponse])
async def get_my_remarks(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: RemarkService = Depends(get_remark_service)
):
    return await service.list_all_for_user(db, current_user.id)


@router.get("/user/{user_id}", response_model=List[InternshipWithProgress])
async def get_user_internships(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: InternshipService = Depends(get_internship_service)
):
    return await service.list_by_user(db, user_id)


@router.get("/admin/remarks", response_model=List[RemarkResponse])
async def list_all_remarks(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
    service: RemarkService = Depends(get_remark_service)
):
    return await service.list_all(db)


@router.patch("/admin/remarks/{remark_id}", response_model=RemarkResponse)
async def respond_to_remark(
    remark_id: str,
    data: RemarkAdminResponse,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
    service: RemarkService = Depends(get_remark_service)
):
    """Answer a remark and mark it REVIEWED or RESOLVED"""
    return await service.respond(db, remark_id, data)


@router.get("/my-internships/{internship_id}/details", response_model=InternshipDetailResponse)
async def get_my_internship_details(
    internship_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: InternshipService = Depends(get_internship_service)
):
    return await service.get_details(db, current_user.id, internship_id)


@router.post("/remarks", response_model=RemarkResponse, status_code=status.HTTP_201_CREATED)
async def create_remark(
    data: RemarkCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: RemarkService = Depends(get_remark_service)
):
    """File a remark against one of the caller's internships"""
    return await service.create(db, current_user.id, data)


# ==================== CERTIFICATES ====================

async def _render_download(
    internship_id: str,
    current_user: User,
    db: AsyncSession,
    service: InternshipService,
    certificates: CertificateService,
    rasterizer: CertificateRasterizer,
    output_format: str,
) -> Response:
    set_internship_id(internship_id)
    await service.get_downloadable(db, internship_id, current_user)

    data = await certificates.get_certificate_data(db, internship_id)
    html = certificates.render_html(data)

    try:
        if output_format == "pdf":
            content = await rasterizer.to_pdf(html)
            media_type = "application/pdf"
        else:
            content = await rasterizer.to_png(html)
            media_type = "image/png"
    except RenderingError as e:
        logger.log_error_with_context(e, f"certificate_{output_format}", internship_id=internship_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate certificate"
        )

    filename = f"certificate_{safe_filename_part(data.user_name)}.{output_format}"
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@router.get("/{internship_id}/certificate-png")
async def download_certificate_png(
    internship_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: InternshipService = Depends(get_internship_service),
    certificates: CertificateService = Depends(get_certificate_service),
    rasterizer: CertificateRasterizer = Depends(get_rasterizer)
):
    """Owner or admin; COMPLETED internships only"""
    return await _render_download(
        internship_id, current_user, db, service, certificates, rasterizer, "png"
    )


@router.get("/{internship_id}/certificate-pdf")
async def download_certificate_pdf(
    internship_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: InternshipService = Depends(get_internship_service),
    certificates: CertificateService = Depends(get_certificate_service),
    rasterizer: CertificateRasterizer = Depends(get_rasterizer)
):
    """Owner or admin; COMPLETED internships only"""
    return await _render_download(
        internship_id, current_user, db, service, certificates, rasterizer, "pdf"
    )


@router.get("/{internship_id}/certificate-data", response_model=CertificateDataResponse)
async def get_certificate_data(
    internship_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    certificates: CertificateService = Depends(get_certificate_service)
):
    data = await certificates.get_certificate_data(db, internship_id)
    return CertificateDataResponse(data=data)


@router.get("/{internship_id}/certificate-template", response_class=HTMLResponse)
async def get_certificate_template(
    internship_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    certificates: CertificateService = Depends(get_certificate_service)
):
    """Certificate HTML for inline display"""
    data = await certificates.get_certificate_data(db, internship_id)
    return HTMLResponse(certificates.render_html(data), headers=NO_CACHE_HEADERS)


@router.get("/{internship_id}/certificate-download", response_class=HTMLResponse)
async def download_certificate_html(
    internship_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    certificates: CertificateService = Depends(get_certificate_service)
):
    """Certificate HTML as a file download"""
    data = await certificates.get_certificate_data(db, internship_id)
    filename = f"certificate_{safe_filename_part(data.user_name)}_{internship_id[-8:]}.html"
    headers = {
        "Content-Disposition": f'attachment; filename="{filename}"',
        "Cache-Control": NO_CACHE_HEADERS["Cache-Control"],
    }
    return HTMLResponse(certificates.render_html(data), headers=headers)


@router.get("/{internship_id}/certificate-preview", response_class=HTMLResponse)
async def preview_certificate(
    internship_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    certificates: CertificateService = Depends(get_certificate_service)
):
    """Certificate HTML that the frontend may embed in an iframe"""
    data = await certificates.get_certificate_data(db, internship_id)
    return HTMLResponse(
        certificates.render_html(data),
        headers={"X-Frame-Options": "SAMEORIGIN"}
    )


@router.get("/{internship_id}/certificate-eligibility", response_model=CertificateEligibility,
            response_model_exclude_none=True)
async def check_certificate_eligibility(
    internship_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: InternshipService = Depends(get_internship_service)
):
    return await service.eligibility(db, current_user.id, internship_id)


@router.get("/{internship_id}/remarks", response_model=List[RemarkResponse])
async def get_internship_remarks(
    internship_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: RemarkService = Depends(get_remark_service)
):
    return await service.list_for_internship(db, current_user.id, internship_id)


# ==================== GENERIC ROUTES LAST ====================

@router.get("/{internship_id}", response_model=InternshipResponse)
async def get_internship(
    internship_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: InternshipService = Depends(get_internship_service)
):
    return await service.get_by_id(db, internship_id)


@router.patch("/{internship_id}", response_model=InternshipResponse)
async def update_internship(
    internship_id: str,
    data: InternshipUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
    service: InternshipService = Depends(get_internship_service)
):
    """Partial update; moving to COMPLETED emails the certificate once"""
    set_internship_id(internship_id)
    return await service.update(db, internship_id, data)


@router.delete("/{internship_id}", response_model=MessageResponse)
async def delete_internship(
    internship_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
    service: InternshipService = Depends(get_internship_service)
):
    """Delete an internship and its remarks"""
    return await service.delete(db, internship_id)
