"""
Email delivery of interview feedback over SMTP.

Sending is fire-and-forget from the interview pipeline's point of view:
every public method reports success as a bool and never raises.
"""
from email.message import EmailMessage
from html import escape
from typing import Dict, List, Optional
import smtplib

from ..interview.models import AnalysisResult, ReadinessStatus
from ..utils.config import (
    EMAIL_FROM_NAME,
    EMAIL_PASSWORD,
    EMAIL_USER,
    SMTP_HOST,
    SMTP_PORT,
    SMTP_TIMEOUT_SECONDS,
    SMTP_USE_TLS
)
from ..utils.logger import setup_logger

logger = setup_logger("email_service")

STATUS_COLORS = {
    ReadinessStatus.READY: "#16a34a",
    ReadinessStatus.NEEDS_PRACTICE: "#d97706",
    ReadinessStatus.NOT_READY: "#dc2626",
}


def _items(values: List[str]) -> str:
    if not values:
        return "<li>None noted</li>"
    return "".join(f"<li>{escape(str(value))}</li>" for value in values)


def _links(entries: List[Dict[str, str]], label_key: str) -> str:
    rows = []
    for entry in entries:
        title = escape(entry.get("title", "Resource"))
        url = escape(entry.get("url", ""), quote=True)
        label = escape(entry.get(label_key, ""))
        suffix = f" ({label})" if label else ""
        rows.append(f'<li><a href="{url}">{title}</a>{suffix}</li>' if url else f"<li>{title}{suffix}</li>")
    return "".join(rows)


def render_feedback_email(candidate_name: Optional[str], job_role: str, analysis: AnalysisResult) -> str:
    """
    HTML body of the interview feedback email.

    Args:
        candidate_name: Greeting name. Falls back to "there".
        job_role: Role practiced
        analysis: Frozen session analysis

    Returns:
        HTML string
    """
    status = analysis.status
    color = STATUS_COLORS[status]
    name = escape(candidate_name or "there")
    role = escape(job_role)

    resources = ""
    if analysis.resources:
        resources += f"<h3>Learning Resources</h3><ul>{_links(analysis.resources, 'type')}</ul>"
    if analysis.courses:
        resources += f"<h3>Recommended Courses</h3><ul>{_links(analysis.courses, 'platform')}</ul>"

    return f"""<html>
<body style="font-family: Arial, sans-serif; color: #1f2937; max-width: 640px; margin: 0 auto;">
  <h2>Your {role} Interview Practice Feedback</h2>
  <p>Hi {name},</p>
  <p>Thank you for completing your interview practice session. Here is your feedback.</p>
  <div style="padding: 16px; border-radius: 8px; background: #f3f4f6; text-align: center;">
    <div style="font-size: 36px; font-weight: bold;">{analysis.overall_score}/100</div>
    <div style="color: {color}; font-weight: bold;">{escape(status.value)}</div>
  </div>
  <p>{escape(analysis.summary)}</p>
  <h3>Strengths</h3>
  <ul>{_items(analysis.strengths)}</ul>
  <h3>Areas to Improve</h3>
  <ul>{_items(analysis.improvements)}</ul>
  <h3>Recommendations</h3>
  <ul>{_items(analysis.recommendations)}</ul>
  {resources}
  <p>Keep practicing - every session gets you closer to your goal.</p>
  <p>{escape(EMAIL_FROM_NAME)}</p>
</body>
</html>"""


class EmailService:
    """
    SMTP mail sender.

    Disabled (every send returns False) when no credentials are configured.
    """

    def __init__(
        self,
        host: str = SMTP_HOST,
        port: int = SMTP_PORT,
        user: Optional[str] = EMAIL_USER,
        password: Optional[str] = EMAIL_PASSWORD,
        use_tls: bool = SMTP_USE_TLS,
        from_name: str = EMAIL_FROM_NAME,
        timeout: float = SMTP_TIMEOUT_SECONDS
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.from_name = from_name
        self.timeout = timeout

        if not self.enabled:
            logger.warning("⚠️ EMAIL_USER / EMAIL_PASSWORD not set, feedback emails are disabled")

    @property
    def enabled(self) -> bool:
        return bool(self.host and self.user and self.password)

    def send_email(self, to_email: str, subject: str, html_body: str) -> bool:
        """
        Send one HTML email.

        Returns:
            True if the SMTP server accepted the message
        """
        if not self.enabled:
            return False
        if not to_email:
            logger.warning("⚠️ No recipient address, email not sent")
            return False

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.user}>"
        msg["To"] = to_email
        msg.set_content("This message contains HTML content. Please view it in an HTML-capable mail client.")
        msg.add_alternative(html_body, subtype="html")

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                server.login(self.user, self.password)
                server.send_message(msg)
            logger.info(f"✅ Email sent: '{subject}'")
            return True
        except smtplib.SMTPAuthenticationError:
            logger.exception(f"SMTP authentication failed for {self.user}")
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"❌ Error sending email '{subject}': {e}")
        return False

    def send_interview_feedback(
        self,
        to_email: str,
        candidate_name: Optional[str],
        job_role: str,
        analysis: AnalysisResult
    ) -> bool:
        """Send the session feedback email."""
        subject = f"Your {job_role} Interview Practice Results - {analysis.status.value}"
        try:
            html_body = render_feedback_email(candidate_name, job_role, analysis)
        except Exception as e:
            logger.error(f"❌ Error rendering feedback email: {e}")
            return False
        return self.send_email(to_email, subject, html_body)


# Singleton instance
_email_service = None


def get_email_service() -> EmailService:
    """Get or create email service instance (singleton)."""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
