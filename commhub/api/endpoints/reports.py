"""Report generation endpoint."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse, Response
import logging

from ...config import settings
from ...core.metrics import track_report_generation
from ...schemas.report import ReportRequest
from ...services.report_serializer import serialize_report
from ...services.report_service import ReportService
from ..deps import get_report_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["reports"])


@router.options("/generate-report")
async def generate_report_preflight():
    """Pre-flight request; always accepted."""
    return PlainTextResponse("ok", headers=settings.cors_headers)


@router.post("/generate-report")
async def generate_report(
    request: ReportRequest,
    report_service: ReportService = Depends(get_report_service)
) -> Response:
    """
    Generate a multi-entity report.

    Args:
        request: Report type, optional window and actor, output format
        report_service: ReportService instance

    Returns:
        JSON report document, JSON with a note for pdf, or CSV attachment

    Raises:
        DataSourceError: If any entity query fails (rendered as `{"error": ...}`)
    """
    document = await report_service.generate_report(request)
    serialized = serialize_report(document, request.format)
    track_report_generation(request.type.value, request.format.value)

    if serialized.filename:
        return Response(
            content=serialized.content,
            media_type=serialized.media_type,
            headers={
                **settings.cors_headers,
                "Content-Disposition": f'attachment; filename="{serialized.filename}"',
            },
        )

    return JSONResponse(content=serialized.content, headers=settings.cors_headers)
