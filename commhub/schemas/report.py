"""Report request, row and document schemas.

Rows coming back from the data source are loosely typed mappings; they are
validated into the ``*Row`` models below at the aggregator boundary so the
rest of the pipeline works with named, typed fields. JSON output uses the
camelCase keys of the public report contract.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReportType(str, Enum):
    """Report window selector."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class OutputFormat(str, Enum):
    """Requested output encoding."""
    JSON = "json"
    CSV = "csv"
    PDF = "pdf"


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Naive timestamps from the store are UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ReportRequest(BaseModel):
    """Report generation request."""

    model_config = ConfigDict(populate_by_name=True)

    type: ReportType
    start_date: Optional[datetime] = Field(default=None, alias="startDate")
    end_date: Optional[datetime] = Field(default=None, alias="endDate")
    user_id: Optional[str] = Field(default=None, alias="userId")
    format: OutputFormat = OutputFormat.JSON

    normalize_timestamps = field_validator("start_date", "end_date")(_as_utc)


class EntityFilter(BaseModel):
    """Filter applied to a single entity query."""

    model_config = ConfigDict(frozen=True)

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    actor_id: Optional[str] = None


# ============================================================================
# Typed rows
# ============================================================================

class RowModel(BaseModel):
    """Base for rows read from the data source."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ProfileRef(RowModel):
    name: Optional[str] = None
    email: Optional[str] = None


class ContactRef(RowModel):
    name: Optional[str] = None
    company: Optional[str] = None


class TicketRow(RowModel):
    id: str
    subject: str
    message: Optional[str] = None
    status: str
    priority: Optional[str] = None
    customer_id: Optional[str] = None
    assigned_to: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime] = None
    customer: Optional[ProfileRef] = None
    assignee: Optional[ProfileRef] = Field(default=None, alias="assignedTo")

    normalize_timestamps = field_validator("created_at", "updated_at")(_as_utc)


class ContactRow(RowModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    avatar: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    last_contact: Optional[datetime] = None
    status: str
    source: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    normalize_timestamps = field_validator("last_contact", "created_at", "updated_at")(_as_utc)


class DealRow(RowModel):
    id: str
    title: str
    value: Optional[float] = None
    stage: str
    probability: Optional[int] = None
    contact_id: Optional[str] = None
    expected_close_date: Optional[date] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    contact: Optional[ContactRef] = None

    normalize_timestamps = field_validator("created_at", "updated_at")(_as_utc)


class AppointmentRow(RowModel):
    id: str
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    location: Optional[str] = None
    meeting_link: Optional[str] = None
    type: Optional[str] = None
    status: str
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    normalize_timestamps = field_validator("start_time", "end_time", "created_at", "updated_at")(_as_utc)


# ============================================================================
# Summaries and document
# ============================================================================

class SummaryModel(BaseModel):
    """Base for report sections; serialized with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class TicketSummary(SummaryModel):
    total: int
    resolved: int
    by_status: Dict[str, int] = Field(alias="byStatus")
    details: List[TicketRow]


class ContactSummary(SummaryModel):
    new: int
    by_status: Dict[str, int] = Field(alias="byStatus")
    details: List[ContactRow]


class DealSummary(SummaryModel):
    total: int
    revenue: Union[int, float]
    won: int
    lost: int
    conversion_rate: int = Field(alias="conversionRate")
    details: List[DealRow]


class AppointmentSummary(SummaryModel):
    total: int
    completed: int
    cancelled: int
    completion_rate: int = Field(alias="completionRate")
    details: List[AppointmentRow]


class ReportMeta(SummaryModel):
    type: ReportType
    start_date: Optional[datetime] = Field(alias="startDate")
    end_date: Optional[datetime] = Field(alias="endDate")
    generated_at: datetime = Field(alias="generatedAt")
    user_id: Optional[str] = Field(alias="userId")


class ReportSummary(SummaryModel):
    total_tickets: int = Field(alias="totalTickets")
    resolved_tickets: int = Field(alias="resolvedTickets")
    new_contacts: int = Field(alias="newContacts")
    total_revenue: Union[int, float] = Field(alias="totalRevenue")
    appointments_held: int = Field(alias="appointmentsHeld")


class ReportDocument(SummaryModel):
    meta: ReportMeta
    summary: ReportSummary
    tickets: TicketSummary
    contacts: ContactSummary
    deals: DealSummary
    appointments: AppointmentSummary

    def to_json_dict(self) -> Dict[str, Any]:
        """JSON-compatible dict using the public camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
