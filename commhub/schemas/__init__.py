from .report import (
    ReportType,
    OutputFormat,
    ReportRequest,
    EntityFilter,
    ReportDocument,
)
from .notification import EmailRequest, NotificationResult

__all__ = [
    "ReportType",
    "OutputFormat",
    "ReportRequest",
    "EntityFilter",
    "ReportDocument",
    "EmailRequest",
    "NotificationResult",
]
