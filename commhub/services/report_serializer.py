"""Report output encodings."""

import csv
import io
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union
import logging

from ..config import settings
from ..core.exceptions import UnsupportedOutputError
from ..schemas.report import OutputFormat, ReportDocument

logger = logging.getLogger(__name__)

TICKET_DETAIL_HEADER = ["ID", "Subject", "Status", "Priority", "Created At", "Customer", "Assigned To"]


@dataclass(frozen=True)
class SerializedReport:
    """Encoded report plus the framing hints a transport needs."""

    content: Union[str, Dict[str, Any]]
    media_type: str
    filename: Optional[str] = None


def serialize_report(
    document: ReportDocument,
    output_format: OutputFormat,
    epoch_millis: Optional[int] = None,
) -> SerializedReport:
    """Render ``document`` in the requested format without modifying it.

    Args:
        document: Assembled report
        output_format: json, csv or pdf
        epoch_millis: Timestamp used in the CSV filename hint; defaults to
            the document generation time

    Returns:
        SerializedReport with a dict (json/pdf) or text (csv) payload
    """
    if output_format == OutputFormat.CSV:
        if epoch_millis is None:
            epoch_millis = int(document.meta.generated_at.timestamp() * 1000)
        return SerializedReport(
            content=render_tabular(document),
            media_type="text/csv",
            filename=f"report-{document.meta.type.value}-{epoch_millis}.csv",
        )

    if output_format == OutputFormat.PDF:
        try:
            return render_document(document)
        except UnsupportedOutputError as e:
            logger.warning(f"{e.message}; returning structured report with note")
            return SerializedReport(
                content={**document.to_json_dict(), "note": settings.pdf_unavailable_note},
                media_type="application/json",
            )

    return SerializedReport(content=document.to_json_dict(), media_type="application/json")


def render_document(document: ReportDocument) -> SerializedReport:
    """Render a printable document.

    Raises:
        UnsupportedOutputError: Always; document rendering is not available
    """
    raise UnsupportedOutputError(OutputFormat.PDF.value)


def format_amount(amount: Union[int, float]) -> str:
    """Currency amount with whole numbers printed without decimals."""
    if float(amount).is_integer():
        return f"{settings.currency_symbol}{int(amount)}"
    return f"{settings.currency_symbol}{amount}"


def _single_line(value: Any) -> str:
    # Embedded line breaks would split one ticket across several lines.
    return " ".join(str(value).splitlines()) if value is not None else ""


def render_tabular(document: ReportDocument) -> str:
    """Flat comma/newline text: header, key metrics, one line per ticket."""
    data = document.to_json_dict()
    meta = data["meta"]
    summary = data["summary"]

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    writer.writerow(["Report Summary"])
    writer.writerow(["Type", meta["type"]])
    writer.writerow(["Generated At", meta["generatedAt"]])
    writer.writerow(["Start Date", meta["startDate"] or ""])
    writer.writerow(["End Date", meta["endDate"] or ""])
    writer.writerow([])

    writer.writerow(["Key Metrics"])
    writer.writerow(["Total Tickets", summary["totalTickets"]])
    writer.writerow(["Resolved Tickets", summary["resolvedTickets"]])
    writer.writerow(["New Contacts", summary["newContacts"]])
    writer.writerow(["Total Revenue", format_amount(document.summary.total_revenue)])
    writer.writerow(["Appointments Held", summary["appointmentsHeld"]])
    writer.writerow([])

    writer.writerow(["Ticket Details"])
    writer.writerow(TICKET_DETAIL_HEADER)
    for ticket in data["tickets"]["details"]:
        writer.writerow([_single_line(value) for value in (
            ticket["id"],
            ticket["subject"],
            ticket["status"],
            ticket["priority"] or "",
            ticket["created_at"],
            (ticket["customer"] or {}).get("name") or "",
            (ticket["assignedTo"] or {}).get("name") or "",
        )])

    return buffer.getvalue().rstrip("\n")
