"""Report window resolution."""

from datetime import datetime, timedelta
from typing import Optional, Tuple

import pytz
from dateutil.relativedelta import relativedelta

from ..schemas.report import ReportType

Window = Tuple[Optional[datetime], Optional[datetime]]


def resolve_date_window(
    report_type: ReportType,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> Window:
    """Turn a report type into a concrete ``(start, end)`` pair.

    Weekly and monthly windows end at ``now`` and ignore caller bounds.
    Monthly subtracts one calendar month, clamping to the last day of a
    shorter month (March 31 resolves to the end of February). Custom windows
    pass the caller's bounds through unchanged; either may be ``None``.
    """
    if now is None:
        now = datetime.now(pytz.UTC)

    if report_type == ReportType.WEEKLY:
        return now - timedelta(days=7), now
    if report_type == ReportType.MONTHLY:
        return now - relativedelta(months=1), now
    return start_date, end_date
