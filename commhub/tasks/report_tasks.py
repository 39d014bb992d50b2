"""Celery tasks for report digests."""

from celery import shared_task
import logging

from ..config import settings
from ..core.database import SessionLocal
from ..models.profile import Profile, UserRole
from ..schemas.notification import EmailRequest
from ..schemas.report import ReportDocument, ReportRequest, ReportType
from ..services.data_source import SQLAlchemyDataSource
from ..services.notification_service import NotificationService
from ..services.report_service import ReportService
from ..services.template_service import TemplateName

logger = logging.getLogger(__name__)

DIGEST_ROLES = (UserRole.ADMIN.value, UserRole.AGENT.value)


def build_digest_email(profile: Profile, document: ReportDocument) -> EmailRequest:
    """Weekly report template request for one profile."""
    summary = document.summary
    return EmailRequest(
        to=profile.email,
        template=TemplateName.WEEKLY_REPORT.value,
        template_data={
            "userName": profile.name,
            "ticketsResolved": summary.resolved_tickets,
            "newContacts": summary.new_contacts,
            "meetingsHeld": summary.appointments_held,
            "revenue": summary.total_revenue,
            "dashboardUrl": settings.dashboard_url,
        },
    )


@shared_task(name="commhub.tasks.report_tasks.send_weekly_digests")
def send_weekly_digests():
    """Email every agent and admin a weekly report scoped to their own records."""
    db = SessionLocal()
    sent = 0
    try:
        profiles = db.query(Profile).filter(Profile.role.in_(DIGEST_ROLES)).all()
        logger.info(f"Sending weekly digests to {len(profiles)} profiles")

        report_service = ReportService(data_source=SQLAlchemyDataSource(SessionLocal))
        notification_service = NotificationService()

        for profile in profiles:
            try:
                document = report_service.generate_report_sync(
                    ReportRequest(type=ReportType.WEEKLY, user_id=profile.id)
                )
                notification_service.send_email(build_digest_email(profile, document))
                sent += 1
            except Exception as e:
                logger.error(f"Error sending digest to profile {profile.id}: {e}", exc_info=True)
                # Continue with next profile
                continue

        logger.info(f"Weekly digests sent: {sent}/{len(profiles)}")
        return sent
    finally:
        db.close()
