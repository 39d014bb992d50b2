"""Notification email service."""

import logging
from typing import List, Union

from ..config import settings
from ..core.metrics import track_email_sent
from ..schemas.notification import EmailRequest, NotificationResult
from .template_service import TEMPLATE_NAMES, TemplateName, render_named_template

logger = logging.getLogger(__name__)


def normalize_recipients(to: Union[str, List[str]]) -> List[str]:
    """Recipient list from a single address or a list of addresses."""
    return [to] if isinstance(to, str) else list(to)


class NotificationService:
    """Resolves templates into outgoing email and hands it to the sender.

    Transmission is a logging stub; no provider is wired in.
    """

    def __init__(self, sender: str = None):
        self.sender = sender or settings.email_sender

    def send_email(self, request: EmailRequest) -> NotificationResult:
        """Render the requested email and send it to every recipient."""
        recipients = normalize_recipients(request.to)
        subject, html_body, text_body = request.subject, request.html, request.text
        template_label = "none"

        if request.template in TEMPLATE_NAMES:
            rendered = render_named_template(TemplateName(request.template), request.template_data)
            subject, html_body, text_body = rendered.subject, rendered.html_body, rendered.text_body
            template_label = request.template
        elif request.template:
            logger.warning(f"Unknown email template '{request.template}', using request bodies")

        self.deliver(recipients, subject, html_body, text_body)
        track_email_sent(template_label, len(recipients))

        return NotificationResult(
            success=True,
            message="Email sent successfully",
            recipients_count=len(recipients),
        )

    def deliver(self, recipients: List[str], subject: str, html_body: str, text_body: str) -> None:
        logger.info(
            f"Email sent: from={self.sender} to={recipients} subject={subject!r} "
            f"html={len(html_body or '')} chars text={len(text_body or '')} chars"
        )
