"""Notification email endpoint."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, PlainTextResponse
import logging

from ...config import settings
from ...schemas.notification import EmailRequest
from ...services.notification_service import NotificationService
from ..deps import get_notification_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["notifications"])


@router.options("/send-email")
async def send_email_preflight():
    """Pre-flight request; always accepted."""
    return PlainTextResponse("ok", headers=settings.cors_headers)


@router.post("/send-email")
async def send_email(
    request: EmailRequest,
    notification_service: NotificationService = Depends(get_notification_service)
) -> JSONResponse:
    """
    Send a notification email, optionally rendered from a named template.

    Returns:
        `{"success": true, "message": ..., "recipientsCount": n}`, or
        `{"success": false, "error": ...}` with status 500
    """
    try:
        result = notification_service.send_email(request)
    except Exception as e:
        logger.error(f"Error sending email: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": str(e)},
            headers=settings.cors_headers,
        )

    return JSONResponse(
        content=result.model_dump(by_alias=True),
        headers=settings.cors_headers,
    )
