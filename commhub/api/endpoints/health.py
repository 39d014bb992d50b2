"""Liveness and readiness probes."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import settings
from ...services.data_source import SQLAlchemyDataSource
from ..deps import get_db

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness probe; the process is up."""
    return {"status": "healthy", "environment": settings.environment}


@router.get("/health/ready")
async def readiness_check(db: Session = Depends(get_db)):
    """
    Readiness probe - every entity a report reads must be queryable.

    Returns:
        `{"status": "ready", "database": "ok"}`, or 503 with one error per
        unreachable entity table
    """
    errors = []

    for entity, model in SQLAlchemyDataSource.MODELS.items():
        try:
            db.execute(select(model.id).limit(1))
        except SQLAlchemyError as e:
            db.rollback()
            errors.append(f"{entity}: {e.__class__.__name__}")

    if errors:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "errors": errors},
            headers=settings.cors_headers,
        )

    return {"status": "ready", "database": "ok"}
