"""Dependency injection for FastAPI endpoints."""

from typing import Callable, Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from ..core.database import SessionLocal
from ..services.data_source import DataSource, SQLAlchemyDataSource
from ..services.notification_service import NotificationService
from ..services.report_service import ReportService


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Yields:
        Database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory() -> Callable[[], Session]:
    """Session factory used by report queries; each query opens its own session."""
    return SessionLocal


def get_data_source(session_factory: Callable[[], Session] = Depends(get_session_factory)) -> DataSource:
    return SQLAlchemyDataSource(session_factory)


def get_report_service(data_source: DataSource = Depends(get_data_source)) -> ReportService:
    """
    Dependency for ReportService with injected data source.

    Args:
        data_source: Store the aggregators query

    Returns:
        ReportService instance
    """
    return ReportService(data_source=data_source)


def get_notification_service() -> NotificationService:
    return NotificationService()
