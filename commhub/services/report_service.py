"""Report generation service."""

import asyncio
from datetime import datetime
from typing import Callable, Dict, Optional, Sequence
import logging

import pytz

from ..core.exceptions import DataSourceError
from ..core.metrics import track_report_failure, track_report_generation_time
from ..schemas.report import (
    EntityFilter,
    ReportDocument,
    ReportMeta,
    ReportRequest,
    ReportSummary,
)
from .aggregators import (
    EntityAggregator,
    appointment_aggregator,
    contact_aggregator,
    deal_aggregator,
    ticket_aggregator,
)
from .data_source import DataSource
from .date_window import resolve_date_window

logger = logging.getLogger(__name__)

DEFAULT_AGGREGATORS = (
    ticket_aggregator,
    contact_aggregator,
    deal_aggregator,
    appointment_aggregator,
)


class ReportService:
    """Service for assembling multi-entity reports."""

    def __init__(
        self,
        data_source: DataSource,
        aggregators: Sequence[EntityAggregator] = DEFAULT_AGGREGATORS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.data_source = data_source
        self.aggregators = tuple(aggregators)
        self.clock = clock or (lambda: datetime.now(pytz.UTC))

    async def generate_report(self, request: ReportRequest) -> ReportDocument:
        """Resolve the window, aggregate all entities and build the document.

        Raises:
            DataSourceError: If any entity query fails; no partial report is built
        """
        now = self.clock()
        start_date, end_date = resolve_date_window(
            request.type, request.start_date, request.end_date, now=now
        )
        logger.info(
            f"Generating {request.type.value} report: window={start_date}~{end_date} "
            f"user={request.user_id or 'all'}"
        )

        entity_filter = EntityFilter(
            start_date=start_date,
            end_date=end_date,
            actor_id=request.user_id,
        )

        with track_report_generation_time(request.type.value):
            sections = await self.gather_sections(entity_filter)

        tickets = sections["tickets"]
        contacts = sections["contacts"]
        deals = sections["deals"]
        appointments = sections["appointments"]

        document = ReportDocument(
            meta=ReportMeta(
                type=request.type,
                start_date=start_date,
                end_date=end_date,
                generated_at=self.clock(),
                user_id=request.user_id,
            ),
            summary=ReportSummary(
                total_tickets=tickets.total,
                resolved_tickets=tickets.resolved,
                new_contacts=contacts.new,
                total_revenue=deals.revenue,
                appointments_held=appointments.completed,
            ),
            tickets=tickets,
            contacts=contacts,
            deals=deals,
            appointments=appointments,
        )

        logger.info(
            f"Report generated: tickets={tickets.total} contacts={contacts.new} "
            f"deals={deals.total} appointments={appointments.total}"
        )
        return document

    async def gather_sections(self, entity_filter: EntityFilter) -> Dict[str, object]:
        """Run every aggregator concurrently and wait for all of them.

        The first failure cancels the branches still pending and is re-raised.
        """
        tasks = {
            asyncio.create_task(
                asyncio.to_thread(aggregator.fetch, self.data_source, entity_filter),
                name=aggregator.entity,
            ): aggregator.entity
            for aggregator in self.aggregators
        }

        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)

        failed = [task for task in done if task.exception() is not None]
        if failed:
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

            error = failed[0].exception()
            entity = tasks[failed[0]]
            track_report_failure(entity)
            logger.error(f"Report aborted, {entity} aggregation failed: {error}")
            if isinstance(error, DataSourceError):
                raise error
            raise DataSourceError(entity, str(error)) from error

        return {tasks[task]: task.result() for task in done}

    def generate_report_sync(self, request: ReportRequest) -> ReportDocument:
        """Blocking wrapper for callers outside an event loop (Celery tasks)."""
        return asyncio.run(self.generate_report(request))
