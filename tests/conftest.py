"""Pytest configuration and fixtures."""

import os
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

# Set test environment variables BEFORE importing app
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")
os.environ.setdefault("CELERY_BROKER_URL", "redis://localhost:6379/1")
os.environ.setdefault("CELERY_RESULT_BACKEND", "redis://localhost:6379/1")

from commhub.models import Base, Profile, Ticket, Contact, Appointment
from commhub.api.deps import get_db, get_session_factory
from tests.factories import utc


# Test database URL (file-backed so worker threads share it)
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    """Create test database session."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def session_factory(db):
    """Session factory bound to the test database."""
    return TestingSessionLocal


@pytest.fixture(scope="function")
def crm_data(db):
    """January 2025 fixture: 3 tickets (2 resolved), 2 contacts, no deals, 2 appointments."""
    alice = Profile(id="p-alice", email="alice@example.com", name="Alice", role="user")
    bob = Profile(id="p-bob", email="bob@example.com", name="Bob", role="agent")
    carol = Profile(id="p-carol", email="carol@example.com", name="Carol", role="admin")
    db.add_all([alice, bob, carol])
    db.commit()

    db.add_all([
        Ticket(id="t-1", subject="Login broken", status="resolved", priority="high",
               customer_id="p-alice", assigned_to="p-bob", created_at=utc(2025, 1, 5, 9, 0)),
        Ticket(id="t-2", subject="Billing question", status="resolved", priority="low",
               customer_id="p-carol", assigned_to="p-bob", created_at=utc(2025, 1, 10, 9, 0)),
        Ticket(id="t-3", subject="Feature request", status="open", priority="medium",
               customer_id="p-alice", assigned_to=None, created_at=utc(2025, 1, 20, 9, 0)),
        # Outside the January window
        Ticket(id="t-old", subject="Old issue", status="closed", priority="low",
               customer_id="p-alice", assigned_to="p-carol", created_at=utc(2024, 12, 1, 9, 0)),
        Contact(id="c-1", name="Dana", email="dana@acme.test", company="Acme", position="CTO",
                status="lead", created_by="p-bob", created_at=utc(2025, 1, 6, 12, 0)),
        Contact(id="c-2", name="Eli", email="eli@globex.test", company="Globex", position="CEO",
                status="customer", created_by="p-carol", created_at=utc(2025, 1, 7, 12, 0)),
        Appointment(id="a-1", title="Kickoff", status="completed", created_by="p-bob",
                    start_time=utc(2025, 1, 8, 15, 0), end_time=utc(2025, 1, 8, 16, 0)),
        Appointment(id="a-2", title="Demo", status="cancelled", created_by="p-bob",
                    start_time=utc(2025, 1, 9, 15, 0), end_time=utc(2025, 1, 9, 16, 0)),
    ])
    db.commit()
    return db


@pytest.fixture(scope="function")
def client(db):
    """Create test client without rate limiting."""
    from fastapi import FastAPI
    from fastapi.middleware.cors import CORSMiddleware
    from commhub.core.middleware import RequestLoggingMiddleware
    from commhub.core.exceptions import register_exception_handlers

    test_app = FastAPI(
        title="CommHub Reports API",
        description="Ticket, CRM and appointment reporting with notification emails",
        version="1.0.0",
        debug=True
    )

    # Register exception handlers
    register_exception_handlers(test_app)

    # Add middleware (without RateLimitMiddleware)
    test_app.add_middleware(RequestLoggingMiddleware)
    test_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from commhub.api.endpoints.health import router as health_router
    from commhub.api.endpoints.reports import router as reports_router
    from commhub.api.endpoints.notifications import router as notifications_router
    from commhub.core.metrics import metrics_router

    @test_app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "CommHub Reports API",
            "version": "1.0.0",
            "docs": "/docs"
        }

    test_app.include_router(health_router, tags=["health"])
    test_app.include_router(reports_router)
    test_app.include_router(notifications_router)
    test_app.include_router(metrics_router, tags=["monitoring"])

    def override_get_db():
        try:
            yield db
        finally:
            pass

    test_app.dependency_overrides[get_db] = override_get_db
    test_app.dependency_overrides[get_session_factory] = lambda: TestingSessionLocal
    with TestClient(test_app) as test_client:
        yield test_client
    test_app.dependency_overrides.clear()
