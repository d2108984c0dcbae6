"""
Internship Service - Lifecycle of internship records

Handles:
- Admin create / partial update / delete with date-range validation
- The completion side effect (certificate + email), fired only on the first
  transition into COMPLETED
- Per-user listings, details and dashboard enriched with progress fields
- Certificate eligibility and download authorization
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from jinja2 import TemplateError
from datetime import datetime
from typing import Optional, List

from internhub.core.exceptions import (
    InternHubError,
    UserNotFoundError,
    InternshipNotFoundError,
    InvalidDateRangeError,
    AccessDeniedError,
    CertificateNotAvailableError,
)
from internhub.core.logging_config import logger
from internhub.models.internship import Internship, InternshipStatus
from internhub.models.remark import Remark
from internhub.models.user import User
from internhub.schemas.internship import (
    InternshipCreate,
    InternshipUpdate,
    InternshipResponse,
    InternshipWithProgress,
    InternshipDetailResponse,
    DashboardStats,
    DashboardResponse,
    CertificateEligibility,
)
from internhub.services.certificate_service import CertificateService
from internhub.services.email_service import EmailService
from internhub.services.notifications import notify
from internhub.utils.progress import (
    calculate_duration,
    calculate_progress,
    calculate_days_left,
    is_overdue,
    format_display_date,
    to_utc_naive,
)

NOT_FOUND_OR_DENIED = "Internship not found or access denied"
CERTIFICATE_ONLY_COMPLETED = "Certificate is only available for completed internships"
RECENT_ACTIVITY_LIMIT = 5


def validate_date_range(start: datetime, end: datetime) -> None:
    if start >= end:
        raise InvalidDateRangeError()


class InternshipService:
    """Service for managing internships"""

    def __init__(self, email_service: EmailService, certificate_service: CertificateService):
        self.email_service = email_service
        self.certificate_service = certificate_service

    # ==================== LOOKUPS ====================

    async def _get(self, db: AsyncSession, internship_id: str) -> Internship:
        result = await db.execute(
            select(Internship).where(Internship.id == internship_id)
        )
        internship = result.scalar_one_or_none()
        if not internship:
            raise InternshipNotFoundError(internship_id)
        return internship

    async def _get_owned(self, db: AsyncSession, user_id: str, internship_id: str) -> Optional[Internship]:
        result = await db.execute(
            select(Internship).where(
                Internship.id == internship_id,
                Internship.user_id == user_id
            )
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, db: AsyncSession, internship_id: str) -> InternshipResponse:
        internship = await self._get(db, internship_id)
        return InternshipResponse.model_validate(internship)

    # ==================== ADMIN CRUD ====================

    async def create(self, db: AsyncSession, data: InternshipCreate) -> InternshipResponse:
        """
        Create an internship for an existing user (Admin only)

        Args:
            db: Database session
            data: Internship creation data

        Returns:
            The created internship with its owner

        Raises:
            UserNotFoundError: data.user_id is unknown
            InvalidDateRangeError: start_date is not before end_date
        """
        result = await db.execute(select(User).where(User.id == data.user_id))
        user = result.scalar_one_or_none()
        if not user:
            raise UserNotFoundError(data.user_id)

        start = to_utc_naive(data.start_date)
        end = to_utc_naive(data.end_date)
        validate_date_range(start, end)

        internship = Internship(
            user_id=user.id,
            title=data.title,
            role=data.role,
            start_date=start,
            end_date=end,
            description=data.description,
            status=data.status or InternshipStatus.ACTIVE,
        )
        internship.user = user
        db.add(internship)
        await db.commit()
        await db.refresh(internship)

        logger.info(f"[InternshipService] Created internship {internship.id} for user {user.id}")

        await notify(
            "internship_assignment",
            self.email_service.send_internship_assignment_email(
                user.email,
                user.name or "User",
                {
                    "title": internship.title,
                    "role": internship.role,
                    "start_date": format_display_date(internship.start_date),
                    "end_date": format_display_date(internship.end_date),
                    "duration": calculate_duration(internship.start_date, internship.end_date),
                    "description": internship.description or "No description provided",
                },
            ),
        )

        return InternshipResponse.model_validate(internship)

    async def update(
        self,
        db: AsyncSession,
        internship_id: str,
        data: InternshipUpdate
    ) -> InternshipResponse:
        """
        Apply a partial update (Admin only)

        Only fields present in the request change. The date range is checked
        against the dates the record will have after the update, and nothing
        is written if it fails.
        """
        internship = await self._get(db, internship_id)

        changes = data.model_dump(exclude_unset=True)
        for field in ("start_date", "end_date"):
            if field in changes:
                changes[field] = to_utc_naive(changes[field])

        if "start_date" in changes or "end_date" in changes:
            validate_date_range(
                changes.get("start_date", internship.start_date),
                changes.get("end_date", internship.end_date),
            )

        previous_status = internship.status
        for field, value in changes.items():
            setattr(internship, field, value)
        internship.updated_at = datetime.utcnow()

        await db.commit()
        await db.refresh(internship)

        logger.info(
            f"[InternshipService] Updated internship {internship.id}: {sorted(changes)}"
        )

        if internship.status == InternshipStatus.COMPLETED and previous_status != InternshipStatus.COMPLETED:
            await self._on_completed(db, internship)

        return InternshipResponse.model_validate(internship)

    async def _on_completed(self, db: AsyncSession, internship: Internship) -> None:
        """Render the certificate and email it to the intern"""
        try:
            certificate_data = await self.certificate_service.get_certificate_data(db, internship.id)
            certificate_html = self.certificate_service.render_html(certificate_data)
        except (InternHubError, TemplateError) as e:
            logger.log_error_with_context(e, "internship_completion", internship_id=internship.id)
            return

        user = internship.user
        await notify(
            "internship_completion",
            self.email_service.send_internship_completion_email(
                user.email,
                user.name or "User",
                {
                    "title": internship.title,
                    "role": internship.role,
                    "duration": calculate_duration(internship.start_date, internship.end_date),
                    "completion_date": format_display_date(datetime.utcnow()),
                },
                certificate_html,
            ),
        )

    async def delete(self, db: AsyncSession, internship_id: str) -> dict:
        """Delete an internship and its remarks (Admin only)"""
        internship = await self._get(db, internship_id)

        await db.execute(delete(Remark).where(Remark.internship_id == internship.id))
        await db.delete(internship)
        await db.commit()

        logger.info(f"[InternshipService] Deleted internship {internship_id}")
        return {"message": "Internship deleted successfully"}

    async def list_all(self, db: AsyncSession) -> List[InternshipResponse]:
        """All internships, newest first (Admin only)"""
        result = await db.execute(
            select(Internship).order_by(Internship.created_at.desc())
        )
        return [InternshipResponse.model_validate(i) for i in result.scalars().all()]

    # ==================== USER VIEWS ====================

    async def list_by_user(
        self,
        db: AsyncSession,
        user_id: str,
        now: Optional[datetime] = None
    ) -> List[InternshipWithProgress]:
        """A user's internships, newest first; ACTIVE ones carry progress fields"""
        now = now or datetime.utcnow()
        result = await db.execute(
            select(Internship)
            .where(Internship.user_id == user_id)
            .order_by(Internship.created_at.desc())
        )

        items = []
        for internship in result.scalars().all():
            item = InternshipWithProgress.model_validate(internship)
            if internship.status == InternshipStatus.ACTIVE:
                days_left = calculate_days_left(internship.end_date, now)
                item.days_left = max(days_left, 0)
                item.is_overdue = days_left < 0
                item.progress = calculate_progress(internship.start_date, internship.end_date, now)
            items.append(item)
        return items

    async def get_details(
        self,
        db: AsyncSession,
        user_id: str,
        internship_id: str,
        now: Optional[datetime] = None
    ) -> InternshipDetailResponse:
        """Detail view of one of the caller's own internships"""
        internship = await self._get_owned(db, user_id, internship_id)
        if not internship:
            raise InternshipNotFoundError(internship_id, NOT_FOUND_OR_DENIED)

        now = now or datetime.utcnow()
        active = internship.status == InternshipStatus.ACTIVE

        if active:
            progress = calculate_progress(internship.start_date, internship.end_date, now)
        elif internship.status == InternshipStatus.COMPLETED:
            progress = 100
        else:
            progress = 0

        base = InternshipResponse.model_validate(internship)
        return InternshipDetailResponse(
            **base.model_dump(),
            can_download_certificate=internship.status == InternshipStatus.COMPLETED,
            days_left=max(0, calculate_days_left(internship.end_date, now)) if active else None,
            progress=progress,
            duration=calculate_duration(internship.start_date, internship.end_date),
            is_overdue=active and is_overdue(internship.end_date, now),
        )

    async def dashboard(self, db: AsyncSession, user_id: str) -> DashboardResponse:
        """Status counts plus the most recent internships"""
        internships = await self.list_by_user(db, user_id)

        active = [i for i in internships if i.status == InternshipStatus.ACTIVE]
        completed = [i for i in internships if i.status == InternshipStatus.COMPLETED]
        cancelled = [i for i in internships if i.status == InternshipStatus.CANCELLED]

        return DashboardResponse(
            stats=DashboardStats(
                total=len(internships),
                active=len(active),
                completed=len(completed),
                cancelled=len(cancelled),
            ),
            active_internships=active,
            completed_internships=completed,
            recent_activity=internships[:RECENT_ACTIVITY_LIMIT],
        )

    # ==================== CERTIFICATES ====================

    async def eligibility(
        self,
        db: AsyncSession,
        user_id: str,
        internship_id: str
    ) -> CertificateEligibility:
        """Whether the caller may download a certificate; never raises"""
        internship = await self._get_owned(db, user_id, internship_id)

        if not internship:
            return CertificateEligibility(can_download=False, reason=NOT_FOUND_OR_DENIED)

        if internship.status != InternshipStatus.COMPLETED:
            return CertificateEligibility(can_download=False, reason=CERTIFICATE_ONLY_COMPLETED)

        return CertificateEligibility(can_download=True)

    async def get_downloadable(self, db: AsyncSession, internship_id: str, user: User) -> Internship:
        """
        Authorize a rendered certificate download.

        Raises:
            InternshipNotFoundError: no such internship
            AccessDeniedError: caller is neither the owner nor an admin
            CertificateNotAvailableError: internship is not COMPLETED
        """
        internship = await self._get(db, internship_id)

        if internship.user_id != user.id and not user.is_admin:
            raise AccessDeniedError(
                "Access denied. You can only download certificates for your own internships."
            )

        if internship.status != InternshipStatus.COMPLETED:
            raise CertificateNotAvailableError(internship.status.value)

        return internship
