"""Database session management."""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from ..config import settings


def _engine_kwargs(url: str) -> dict:
    # SQLite has no connection pool sizing and needs cross-thread access
    # because report queries run in worker threads.
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_pre_ping": True,
    }


# Create engine
engine = create_engine(settings.database_url_sync, **_engine_kwargs(settings.database_url_sync))

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
