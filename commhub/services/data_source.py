"""Queryable data source behind the report aggregators."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple
import logging

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..core.exceptions import DataSourceError
from ..models import Appointment, Contact, Deal, Ticket

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelatedProjection:
    """Embed selected fields of a related record under ``key``."""

    key: str
    relationship: str
    fields: Tuple[str, ...]


@dataclass(frozen=True)
class EntityQuery:
    """Entity-agnostic description of one read.

    ``actor_fields`` are OR-ed: a row matches when any of them equals
    ``actor_id``.
    """

    entity: str
    date_field: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    actor_id: Optional[str] = None
    actor_fields: Tuple[str, ...] = ()
    expand: Tuple[RelatedProjection, ...] = field(default_factory=tuple)


class DataSource(ABC):
    """Abstract store reachable by entity name, predicates and expansion."""

    @abstractmethod
    def fetch(self, query: EntityQuery) -> List[Dict[str, Any]]:
        """Return matching rows as plain mappings.

        Raises:
            DataSourceError: If the rows cannot be retrieved
        """


class SQLAlchemyDataSource(DataSource):
    """DataSource over the ORM models; every fetch uses its own session."""

    MODELS = {
        "tickets": Ticket,
        "contacts": Contact,
        "deals": Deal,
        "appointments": Appointment,
    }

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def fetch(self, query: EntityQuery) -> List[Dict[str, Any]]:
        model = self.MODELS.get(query.entity)
        if model is None:
            raise DataSourceError(query.entity, "unknown entity")

        db = self.session_factory()
        try:
            date_column = getattr(model, query.date_field)
            stmt = db.query(model)

            for projection in query.expand:
                stmt = stmt.options(selectinload(getattr(model, projection.relationship)))

            if query.start_date:
                stmt = stmt.filter(date_column >= query.start_date)
            if query.end_date:
                stmt = stmt.filter(date_column <= query.end_date)
            if query.actor_id and query.actor_fields:
                stmt = stmt.filter(or_(*[
                    getattr(model, actor_field) == query.actor_id
                    for actor_field in query.actor_fields
                ]))

            records = stmt.order_by(date_column, model.id).all()
            rows = [self._to_row(record, query.expand) for record in records]
            logger.debug(f"Fetched {len(rows)} {query.entity} rows")
            return rows
        except SQLAlchemyError as e:
            logger.error(f"Query for {query.entity} failed: {e}", exc_info=True)
            raise DataSourceError(query.entity, str(e))
        finally:
            db.close()

    @staticmethod
    def _to_row(record: Any, expand: Tuple[RelatedProjection, ...]) -> Dict[str, Any]:
        row = {column.key: getattr(record, column.key) for column in record.__table__.columns}
        for projection in expand:
            related = getattr(record, projection.relationship)
            row[projection.key] = (
                {name: getattr(related, name) for name in projection.fields}
                if related is not None else None
            )
        return row
