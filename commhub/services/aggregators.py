"""Per-entity report aggregators.

Each entity has a pure ``summarize_*`` function turning typed rows into its
summary section, and an ``EntityAggregator`` instance that knows how to
query that entity (date column, actor predicate, related expansions).
"""

from collections import Counter
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Dict, Iterable, List, Sequence, Tuple, Type, Union
import logging

from pydantic import BaseModel, ValidationError as PydanticValidationError

from ..core.exceptions import DataSourceError
from ..core.metrics import track_entity_query_latency
from ..schemas.report import (
    AppointmentRow,
    AppointmentSummary,
    ContactRow,
    ContactSummary,
    DealRow,
    DealSummary,
    EntityFilter,
    TicketRow,
    TicketSummary,
)
from .data_source import DataSource, EntityQuery, RelatedProjection

logger = logging.getLogger(__name__)

TICKET_RESOLVED = "resolved"
DEAL_WON = "closed-won"
DEAL_LOST = "closed-lost"
APPOINTMENT_COMPLETED = "completed"
APPOINTMENT_CANCELLED = "cancelled"


def percentage(part: int, total: int) -> int:
    """Integer percentage rounded half-up; 0 when ``total`` is 0."""
    if total <= 0:
        return 0
    ratio = Decimal(part) * 100 / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def count_by(values: Iterable[str]) -> Dict[str, int]:
    """Occurrences of each observed value, in first-seen order."""
    return dict(Counter(values))


def sum_amounts(amounts: Iterable[Any]) -> Union[int, float]:
    """Sum monetary values, treating ``None`` as 0.

    Whole totals come back as ``int`` so they print without a decimal part.
    """
    total = sum((Decimal(str(amount)) for amount in amounts if amount is not None), Decimal(0))
    if total == total.to_integral_value():
        return int(total)
    return float(round(total, 2))


# ============================================================================
# Pure reductions
# ============================================================================

def summarize_tickets(rows: Sequence[TicketRow]) -> TicketSummary:
    return TicketSummary(
        total=len(rows),
        resolved=sum(1 for row in rows if row.status == TICKET_RESOLVED),
        by_status=count_by(row.status for row in rows),
        details=list(rows),
    )


def summarize_contacts(rows: Sequence[ContactRow]) -> ContactSummary:
    # "new" is every contact created in the window, not first-seen contacts.
    return ContactSummary(
        new=len(rows),
        by_status=count_by(row.status for row in rows),
        details=list(rows),
    )


def summarize_deals(rows: Sequence[DealRow]) -> DealSummary:
    total = len(rows)
    won = sum(1 for row in rows if row.stage == DEAL_WON)
    return DealSummary(
        total=total,
        revenue=sum_amounts(row.value for row in rows),
        won=won,
        lost=sum(1 for row in rows if row.stage == DEAL_LOST),
        conversion_rate=percentage(won, total),
        details=list(rows),
    )


def summarize_appointments(rows: Sequence[AppointmentRow]) -> AppointmentSummary:
    total = len(rows)
    completed = sum(1 for row in rows if row.status == APPOINTMENT_COMPLETED)
    return AppointmentSummary(
        total=total,
        completed=completed,
        cancelled=sum(1 for row in rows if row.status == APPOINTMENT_CANCELLED),
        completion_rate=percentage(completed, total),
        details=list(rows),
    )


# ============================================================================
# Aggregators
# ============================================================================

class EntityAggregator:
    """Fetches one entity type and reduces it to a summary."""

    def __init__(
        self,
        entity: str,
        date_field: str,
        actor_fields: Tuple[str, ...],
        row_model: Type[BaseModel],
        summarize: Callable[[List[Any]], BaseModel],
        expand: Tuple[RelatedProjection, ...] = (),
    ):
        self.entity = entity
        self.date_field = date_field
        self.actor_fields = actor_fields
        self.row_model = row_model
        self.summarize = summarize
        self.expand = expand

    def build_query(self, entity_filter: EntityFilter) -> EntityQuery:
        return EntityQuery(
            entity=self.entity,
            date_field=self.date_field,
            start_date=entity_filter.start_date,
            end_date=entity_filter.end_date,
            actor_id=entity_filter.actor_id,
            actor_fields=self.actor_fields,
            expand=self.expand,
        )

    def fetch(self, data_source: DataSource, entity_filter: EntityFilter) -> BaseModel:
        """Query the data source and summarize the result.

        Raises:
            DataSourceError: If the query fails or a row does not validate
        """
        query = self.build_query(entity_filter)
        with track_entity_query_latency(self.entity):
            try:
                raw_rows = data_source.fetch(query)
            except DataSourceError:
                raise
            except Exception as e:
                raise DataSourceError(self.entity, str(e)) from e

        try:
            rows = [self.row_model.model_validate(raw) for raw in raw_rows]
        except PydanticValidationError as e:
            logger.error(f"Invalid {self.entity} row from data source: {e}")
            raise DataSourceError(self.entity, "invalid row", details={"errors": e.errors()}) from e

        summary = self.summarize(rows)
        logger.info(f"Aggregated {len(rows)} {self.entity} rows")
        return summary

    def __repr__(self) -> str:
        return f"<EntityAggregator(entity={self.entity})>"


ticket_aggregator = EntityAggregator(
    entity="tickets",
    date_field="created_at",
    actor_fields=("customer_id", "assigned_to"),
    row_model=TicketRow,
    summarize=summarize_tickets,
    expand=(
        RelatedProjection(key="customer", relationship="customer", fields=("name", "email")),
        RelatedProjection(key="assignedTo", relationship="assignee", fields=("name", "email")),
    ),
)

contact_aggregator = EntityAggregator(
    entity="contacts",
    date_field="created_at",
    actor_fields=("created_by",),
    row_model=ContactRow,
    summarize=summarize_contacts,
)

deal_aggregator = EntityAggregator(
    entity="deals",
    date_field="created_at",
    actor_fields=("created_by",),
    row_model=DealRow,
    summarize=summarize_deals,
    expand=(
        RelatedProjection(key="contact", relationship="contact", fields=("name", "company")),
    ),
)

appointment_aggregator = EntityAggregator(
    entity="appointments",
    date_field="start_time",
    actor_fields=("created_by",),
    row_model=AppointmentRow,
    summarize=summarize_appointments,
)
