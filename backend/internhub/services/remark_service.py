"""
Remark Service - Requests and notes users file against their internships

Remarks start PENDING and only move through an admin response.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from datetime import datetime
from typing import List

from internhub.core.exceptions import InternshipNotFoundError, RemarkNotFoundError
from internhub.core.logging_config import logger
from internhub.models.internship import Internship
from internhub.models.remark import Remark, RemarkStatus
from internhub.schemas.remark import RemarkCreate, RemarkAdminResponse, RemarkResponse
from internhub.services.email_service import EmailService
from internhub.services.notifications import notify

NOT_FOUND_OR_DENIED = "Internship not found or access denied"


class RemarkService:
    """Service for the remark request/response workflow"""

    def __init__(self, email_service: EmailService):
        self.email_service = email_service

    async def _get_owned_internship(self, db: AsyncSession, user_id: str, internship_id: str) -> Internship:
        result = await db.execute(
            select(Internship).where(
                Internship.id == internship_id,
                Internship.user_id == user_id
            )
        )
        internship = result.scalar_one_or_none()
        if not internship:
            # Missing and not-owned look the same to the caller
            raise InternshipNotFoundError(internship_id, NOT_FOUND_OR_DENIED)
        return internship

    async def _list(self, db: AsyncSession, *criteria) -> List[RemarkResponse]:
        result = await db.execute(
            select(Remark).where(*criteria).order_by(Remark.created_at.desc())
        )
        return [RemarkResponse.model_validate(r) for r in result.scalars().all()]

    async def create(self, db: AsyncSession, user_id: str, data: RemarkCreate) -> RemarkResponse:
        """
        File a remark against one of the caller's internships.

        Args:
            db: Database session
            user_id: Author; must own the internship
            data: Remark payload

        Returns:
            The PENDING remark with user and internship summaries

        Raises:
            InternshipNotFoundError: internship missing or owned by someone else
        """
        internship = await self._get_owned_internship(db, user_id, data.internship_id)

        remark = Remark(
            internship_id=internship.id,
            user_id=user_id,
            message=data.message,
            request_type=data.request_type.value,
            status=RemarkStatus.PENDING.value,
        )
        remark.internship = internship
        remark.user = internship.user
        db.add(remark)
        await db.commit()
        await db.refresh(remark)

        logger.info(f"[RemarkService] Remark {remark.id} ({remark.request_type}) on internship {internship.id}")

        user = internship.user
        await notify(
            "remark_created",
            self.email_service.send_remark_notification_to_admin(
                user.email,
                user.name or "User",
                {
                    "internship_title": internship.title,
                    "request_type": remark.request_type,
                    "message": remark.message,
                    "remark_id": remark.id,
                },
            ),
        )

        return RemarkResponse.model_validate(remark)

    async def list_for_internship(
        self,
        db: AsyncSession,
        user_id: str,
        internship_id: str
    ) -> List[RemarkResponse]:
        """The caller's remarks on one of their internships, newest first"""
        await self._get_owned_internship(db, user_id, internship_id)
        return await self._list(db, Remark.internship_id == internship_id, Remark.user_id == user_id)

    async def list_all_for_user(self, db: AsyncSession, user_id: str) -> List[RemarkResponse]:
        return await self._list(db, Remark.user_id == user_id)

    async def list_all(self, db: AsyncSession) -> List[RemarkResponse]:
        """Every remark, newest first (Admin only)"""
        return await self._list(db)

    async def respond(self, db: AsyncSession, remark_id: str, data: RemarkAdminResponse) -> RemarkResponse:
        """
        Record the admin's answer and move the remark to REVIEWED or RESOLVED.

        No precondition on the current status, so a remark can be answered again.
        """
        result = await db.execute(select(Remark).where(Remark.id == remark_id))
        remark = result.scalar_one_or_none()
        if not remark:
            raise RemarkNotFoundError(remark_id)

        remark.admin_response = data.admin_response
        remark.status = data.status
        remark.updated_at = datetime.utcnow()
        await db.commit()
        await db.refresh(remark)

        logger.info(f"[RemarkService] Remark {remark.id} marked {remark.status}")

        await notify(
            "remark_response",
            self.email_service.send_remark_response_to_user(
                remark.user.email,
                remark.user.name or "User",
                {
                    "internship_title": remark.internship.title,
                    "original_message": remark.message,
                    "admin_response": remark.admin_response,
                    "status": remark.status,
                },
            ),
        )

        return RemarkResponse.model_validate(remark)
