"""
Certificate Service - Assemble certificate data and render it to HTML

Certificates are issued on demand: nothing is stored, and the issue date is
always the day of rendering. One Jinja2 template is shared by every theme;
a theme is only a palette and font set.
"""

from typing import Dict, Optional
from datetime import datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from internhub.core.config import settings
from internhub.core.exceptions import InternshipNotFoundError, ValidationError
from internhub.core.logging_config import logger
from internhub.models.internship import Internship
from internhub.schemas.certificate import CertificateData
from internhub.utils.progress import calculate_duration, format_display_date


TEMPLATE_NAME = "certificate.html"

_CLASSIC_FONTS = (
    "https://fonts.googleapis.com/css2?family=Playfair+Display:wght@400;700"
    "&family=Dancing+Script:wght@700&family=Crimson+Text:wght@400;600&display=swap"
)
_MODERN_FONTS = (
    "https://fonts.googleapis.com/css2?family=Montserrat:wght@400;600;700"
    "&family=Great+Vibes&family=Lato:wght@400;700&display=swap"
)

THEMES: Dict[str, Dict[str, str]] = {
    "classic": {
        "font_url": _CLASSIC_FONTS,
        "page_background": "linear-gradient(135deg, #f5f2ed 0%, #e8e2d5 100%)",
        "accent": "#c9b037",
        "accent_light": "#f4e87c",
        "accent_dark": "#8b7355",
        "accent_wash": "rgba(201, 176, 55, 0.08)",
        "title_color": "#1e1e1e",
        "text_color": "#444",
        "muted_color": "#666",
        "heading_font": "'Playfair Display', serif",
        "name_font": "'Dancing Script', cursive",
        "body_font": "'Crimson Text', serif",
    },
    "modern": {
        "font_url": _MODERN_FONTS,
        "page_background": "linear-gradient(135deg, #eef2f7 0%, #d9e2ec 100%)",
        "accent": "#1f6f8b",
        "accent_light": "#99c1de",
        "accent_dark": "#16324f",
        "accent_wash": "rgba(31, 111, 139, 0.08)",
        "title_color": "#16324f",
        "text_color": "#334e68",
        "muted_color": "#627d98",
        "heading_font": "'Montserrat', sans-serif",
        "name_font": "'Great Vibes', cursive",
        "body_font": "'Lato', sans-serif",
    },
}


def build_certificate_id(internship_id: str) -> str:
    return f"CERT-{internship_id[-8:].upper()}"


class CertificateService:
    """Build certificate data for an internship and render the HTML document"""

    def __init__(self, templates_dir: Optional[Path] = None, default_theme: Optional[str] = None):
        self.default_theme = default_theme or settings.CERTIFICATE_THEME
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir or settings.TEMPLATES_DIR)),
            autoescape=select_autoescape(["html", "xml"], default=True),
        )
        self.branding = {
            "org_name": settings.CERTIFICATE_ORG_NAME,
            "logo_url": settings.CERTIFICATE_LOGO_URL,
            "badge_url": settings.CERTIFICATE_BADGE_URL,
            "signature_url": settings.CERTIFICATE_SIGNATURE_URL,
            "signer_name": settings.CERTIFICATE_SIGNER_NAME,
            "signer_title": settings.CERTIFICATE_SIGNER_TITLE,
        }

    async def get_certificate_data(
        self,
        db: AsyncSession,
        internship_id: str,
        now: Optional[datetime] = None
    ) -> CertificateData:
        """
        Assemble the certificate record for an internship.

        No ownership check happens here; download routes enforce it.

        Args:
            db: Database session
            internship_id: Internship to certify
            now: Issue date override (defaults to the current time)

        Returns:
            CertificateData with display-formatted dates

        Raises:
            InternshipNotFoundError: No internship has this id
        """
        result = await db.execute(
            select(Internship).where(Internship.id == internship_id)
        )
        internship = result.scalar_one_or_none()

        if not internship:
            raise InternshipNotFoundError(internship_id)

        user = internship.user
        return CertificateData(
            user_name=user.display_name,
            internship_title=internship.title,
            role=internship.role,
            start_date=format_display_date(internship.start_date),
            end_date=format_display_date(internship.end_date),
            duration=calculate_duration(internship.start_date, internship.end_date),
            issue_date=format_display_date(now or datetime.utcnow()),
            certificate_id=build_certificate_id(str(internship.id)),
        )

    def render_html(self, data: CertificateData, theme: Optional[str] = None) -> str:
        """Render a complete, self-contained certificate document"""
        theme_name = theme or self.default_theme
        palette = THEMES.get(theme_name)
        if palette is None:
            raise ValidationError(f"Unknown certificate theme: {theme_name}", field="theme")

        template = self.env.get_template(TEMPLATE_NAME)
        html = template.render(data=data, theme=palette, branding=self.branding)

        logger.debug(f"[CertificateService] Rendered {data.certificate_id} with theme '{theme_name}'")
        return html
