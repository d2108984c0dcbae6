"""
Email Service for InternHub
===========================
Outbound notifications for the internship lifecycle:
- Internship assignment
- Internship completion (certificate attached)
- New remark (to the admin inbox)
- Admin response to a remark

Supports both SMTP and SendGrid. Every interpolated value is HTML-escaped.
"""

import aiosmtplib
import asyncio
import base64
from dataclasses import dataclass
from email.mime.application import MIMEApplication
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from html import escape
from typing import Optional, List, Dict, Union
from datetime import datetime

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import (
    Mail, Email, To, Content, Attachment, FileContent, FileName, FileType, Disposition
)

from internhub.core.config import settings
from internhub.core.logging_config import logger


REQUEST_TYPE_LABELS = {
    "CHANGE_REQUEST": "Change Request",
    "GENERAL_REMARK": "General Remark",
    "EXTENSION_REQUEST": "Extension Request",
}


@dataclass
class EmailAttachment:
    filename: str
    content: Union[str, bytes]
    mime_type: str = "text/html"

    def as_bytes(self) -> bytes:
        if isinstance(self.content, bytes):
            return self.content
        return self.content.encode("utf-8")


def certificate_attachment_name(user_name: str) -> str:
    """``Jane Doe`` -> ``Jane_Doe_Certificate.html``"""
    return f"{'_'.join(user_name.split())}_Certificate.html"


class EmailService:
    """Async email service using SMTP or SendGrid"""

    def __init__(self, config=None):
        config = config or settings
        self.smtp_host = config.SMTP_HOST
        self.smtp_port = config.SMTP_PORT
        self.smtp_user = config.SMTP_USER
        self.smtp_password = config.SMTP_PASSWORD
        self.smtp_use_tls = config.SMTP_USE_TLS
        self.from_email = config.EMAIL_FROM
        self.from_name = config.EMAIL_FROM_NAME
        self.frontend_url = config.FRONTEND_URL
        self.admin_email = config.ADMIN_EMAIL
        self.timeout = config.EMAIL_SEND_TIMEOUT_SECONDS
        self.sendgrid_api_key = config.SENDGRID_API_KEY
        self.use_sendgrid = config.USE_SENDGRID and bool(self.sendgrid_api_key)

        if self.use_sendgrid:
            logger.info("[Email] Using SendGrid for email delivery")
        else:
            logger.info("[Email] Using SMTP for email delivery")

    @property
    def is_configured(self) -> bool:
        """Check if email service is properly configured"""
        if self.use_sendgrid:
            return bool(self.sendgrid_api_key)
        return bool(self.smtp_user and self.smtp_password)

    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
        attachments: Optional[List[EmailAttachment]] = None
    ) -> bool:
        """
        Send an email asynchronously.

        Returns True if successful, False otherwise.
        """
        if not self.is_configured:
            logger.warning("[Email] Email service not configured, skipping email send")
            return False

        if self.use_sendgrid:
            return await self._send_via_sendgrid(to_email, subject, html_content, text_content, attachments)
        else:
            return await self._send_via_smtp(to_email, subject, html_content, text_content, attachments)

    async def _send_via_sendgrid(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
        attachments: Optional[List[EmailAttachment]] = None
    ) -> bool:
        """Send email via SendGrid API"""
        try:
            message = Mail(
                from_email=Email(self.from_email, self.from_name),
                to_emails=To(to_email),
                subject=subject,
                html_content=Content("text/html", html_content)
            )

            if text_content:
                message.add_content(Content("text/plain", text_content))

            for item in attachments or []:
                message.add_attachment(Attachment(
                    FileContent(base64.b64encode(item.as_bytes()).decode("ascii")),
                    FileName(item.filename),
                    FileType(item.mime_type),
                    Disposition("attachment"),
                ))

            sg = SendGridAPIClient(self.sendgrid_api_key)
            # Run synchronous SendGrid call in thread pool
            loop = asyncio.get_running_loop()
            response = await loop.run_in_executor(None, sg.send, message)

            if response.status_code in [200, 201, 202]:
                logger.info(f"[Email/SendGrid] Successfully sent email to {to_email}: {subject}")
                return True
            else:
                logger.error(f"[Email/SendGrid] Failed with status {response.status_code}: {response.body}")
                return False

        except Exception as e:
            logger.error(f"[Email/SendGrid] Failed to send email to {to_email}: {e}")
            return False

    def _build_mime_message(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
        attachments: Optional[List[EmailAttachment]] = None
    ) -> MIMEMultipart:
        body = MIMEMultipart("alternative")
        # Plain text first so clients prefer the HTML part
        if text_content:
            body.attach(MIMEText(text_content, "plain"))
        body.attach(MIMEText(html_content, "html"))

        if attachments:
            message = MIMEMultipart("mixed")
            message.attach(body)
            for item in attachments:
                maintype, _, subtype = item.mime_type.partition("/")
                if maintype == "text":
                    part = MIMEText(item.as_bytes().decode("utf-8"), subtype or "plain")
                else:
                    part = MIMEApplication(item.as_bytes(), _subtype=subtype or "octet-stream")
                part.add_header("Content-Disposition", "attachment", filename=item.filename)
                message.attach(part)
        else:
            message = body

        message["From"] = f"{self.from_name} <{self.from_email}>"
        message["To"] = to_email
        message["Subject"] = subject
        return message

    async def _send_via_smtp(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
        attachments: Optional[List[EmailAttachment]] = None
    ) -> bool:
        """Send email via SMTP"""
        try:
            message = self._build_mime_message(to_email, subject, html_content, text_content, attachments)

            # Port 465 is implicit TLS; anything else upgrades with STARTTLS
            implicit_tls = self.smtp_use_tls and self.smtp_port == 465
            await aiosmtplib.send(
                message,
                hostname=self.smtp_host,
                port=self.smtp_port,
                username=self.smtp_user,
                password=self.smtp_password,
                use_tls=implicit_tls,
                start_tls=self.smtp_use_tls and not implicit_tls,
                timeout=self.timeout
            )

            logger.info(f"[Email/SMTP] Successfully sent email to {to_email}: {subject}")
            return True

        except Exception as e:
            logger.error(f"[Email/SMTP] Failed to send email to {to_email}: {e}")
            return False

    # ==================== TEMPLATES ====================

    def _base_template(self, content: str) -> str:
        """Wrap already-escaped content in the branded email layout"""
        return f"""
        <!DOCTYPE html>
        <html>
        <head>
            <meta charset="utf-8">
            <meta name="viewport" content="width=device-width, initial-scale=1.0">
            <style>
                body {{ font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; line-height: 1.6; color: #333; background: #f9fafb; margin: 0; }}
                .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
                .header {{ background: #2563eb; color: white; padding: 30px; text-align: center; border-radius: 8px 8px 0 0; }}
                .content {{ background: #ffffff; padding: 40px; }}
                .details {{ background: #f1f5f9; border-radius: 8px; padding: 24px; margin: 24px 0; }}
                .details div {{ margin-bottom: 10px; }}
                .note {{ background: #ecfdf5; border-left: 4px solid #10b981; padding: 15px; margin: 20px 0; color: #047857; font-size: 14px; }}
                .button {{ display: inline-block; background: #2563eb; color: white; padding: 12px 30px; text-decoration: none; border-radius: 6px; font-weight: 600; }}
                .footer {{ text-align: center; padding: 20px; font-size: 12px; color: #64748b; background: #f8fafc; border-radius: 0 0 8px 8px; }}
            </style>
        </head>
        <body>
            <div class="container">
                <div class="header">
                    <h1>{escape(self.from_name)}</h1>
                </div>
                <div class="content">
                    {content}
                </div>
                <div class="footer">
                    <p>&copy; {datetime.utcnow().year} {escape(self.from_name)}. All rights reserved.</p>
                </div>
            </div>
        </body>
        </html>
        """

    @staticmethod
    def _detail_rows(rows: Dict[str, Optional[str]]) -> str:
        return "\n".join(
            f'<div><strong>{escape(label)}:</strong> {escape(str(value if value is not None else ""))}</div>'
            for label, value in rows.items()
        )

    # ==================== LIFECYCLE NOTIFICATIONS ====================

    async def send_internship_assignment_email(
        self,
        to_email: str,
        user_name: str,
        details: Dict[str, str]
    ) -> bool:
        """
        Tell a user they were assigned to an internship.

        details keys: title, role, start_date, end_date, duration, description
        """
        subject = f"Internship Assignment - {details.get('title', '')}"
        rows = self._detail_rows({
            "Position": details.get("role"),
            "Program": details.get("title"),
            "Start Date": details.get("start_date"),
            "End Date": details.get("end_date"),
            "Duration": details.get("duration"),
            "Description": details.get("description") or "No description provided",
        })
        content = f"""
            <h2>Congratulations! You've Been Selected</h2>
            <p>Hello {escape(user_name)}, you have been selected for an internship program.</p>
            <div class="details">
                {rows}
            </div>
            <div class="note"><strong>What's Next:</strong> log into your account to view your internship dashboard.</div>
            <p style="text-align: center;">
                <a href="{escape(self.frontend_url)}/login" class="button">Access Dashboard</a>
            </p>
        """
        text_content = (
            f"Hello {user_name},\n\n"
            f"You have been assigned to {details.get('title', '')} as {details.get('role', '')} "
            f"from {details.get('start_date', '')} to {details.get('end_date', '')}.\n\n"
            f"Login at: {self.frontend_url}/login\n"
        )
        return await self.send_email(to_email, subject, self._base_template(content), text_content)

    async def send_internship_completion_email(
        self,
        to_email: str,
        user_name: str,
        details: Dict[str, str],
        certificate_html: str
    ) -> bool:
        """
        Congratulate a user on completion and attach the certificate document.

        details keys: title, role, duration, completion_date
        """
        subject = f"Internship Completion Certificate - {details.get('title', '')}"
        rows = self._detail_rows({
            "Program": details.get("title"),
            "Role": details.get("role"),
            "Duration": details.get("duration"),
            "Completion Date": details.get("completion_date"),
        })
        content = f"""
            <h2>Congratulations on Your Completion!</h2>
            <p>Hello {escape(user_name)}, congratulations on successfully completing your internship program.</p>
            <div class="details">
                {rows}
            </div>
            <div class="note"><strong>Certificate Available:</strong> your certificate is attached and can also be downloaded from your dashboard.</div>
            <p style="text-align: center;">
                <a href="{escape(self.frontend_url)}/dashboard" class="button">Download Certificate</a>
            </p>
        """
        attachment = EmailAttachment(
            filename=certificate_attachment_name(user_name),
            content=certificate_html,
            mime_type="text/html",
        )
        return await self.send_email(
            to_email, subject, self._base_template(content), attachments=[attachment]
        )

    async def send_remark_notification_to_admin(
        self,
        user_email: str,
        user_name: str,
        details: Dict[str, str]
    ) -> bool:
        """
        Notify the admin inbox about a new remark.

        details keys: internship_title, request_type, message, remark_id
        """
        if not self.admin_email:
            logger.warning("[Email] ADMIN_EMAIL not set, skipping remark notification")
            return False

        raw_type = details.get("request_type", "")
        request_type = REQUEST_TYPE_LABELS.get(raw_type, raw_type)
        subject = f"New {request_type} - {details.get('internship_title', '')}"
        rows = self._detail_rows({
            "From": f"{user_name} <{user_email}>",
            "Internship": details.get("internship_title"),
            "Request Type": request_type,
            "Remark ID": details.get("remark_id"),
        })
        message = escape(details.get("message", ""))
        content = f"""
            <h2>New Remark Submitted</h2>
            <div class="details">
                {rows}
            </div>
            <p><strong>Message:</strong></p>
            <p>{message}</p>
            <p style="text-align: center;">
                <a href="{escape(self.frontend_url)}/admin/remarks" class="button">Review Remarks</a>
            </p>
        """
        return await self.send_email(self.admin_email, subject, self._base_template(content))

    async def send_remark_response_to_user(
        self,
        to_email: str,
        user_name: str,
        details: Dict[str, str]
    ) -> bool:
        """
        Send the admin's answer back to the remark author.

        details keys: internship_title, original_message, admin_response, status
        """
        subject = f"Response to your remark - {details.get('internship_title', '')}"
        status_label = escape(details.get("status", "").title())
        rows = self._detail_rows({
            "Internship": details.get("internship_title"),
            "Your Message": details.get("original_message"),
            "Response": details.get("admin_response"),
            "Status": details.get("status"),
        })
        content = f"""
            <h2>Your Remark Has Been {status_label}</h2>
            <p>Hello {escape(user_name)}, an administrator has responded to your remark.</p>
            <div class="details">
                {rows}
            </div>
            <p style="text-align: center;">
                <a href="{escape(self.frontend_url)}/dashboard" class="button">View Internship</a>
            </p>
        """
        return await self.send_email(to_email, subject, self._base_template(content))
