"""Prometheus metrics for monitoring CommHub operations."""

from contextlib import contextmanager
from time import time
from typing import Generator

from fastapi import APIRouter, Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST


# =============================================================================
# Counters
# =============================================================================

reports_generated = Counter(
    "commhub_reports_generated_total",
    "Total reports generated",
    ["report_type", "output_format"],
)

report_failures = Counter(
    "commhub_report_failures_total",
    "Reports aborted by an entity failure",
    ["entity"],
)

emails_sent = Counter(
    "commhub_emails_sent_total",
    "Total notification emails handed to the sender",
    ["template"],
)


# =============================================================================
# Histograms
# =============================================================================

report_generation_time = Histogram(
    "commhub_report_generation_seconds",
    "Report generation duration",
    ["report_type"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

entity_query_latency = Histogram(
    "commhub_entity_query_seconds",
    "Per-entity data source query time",
    ["entity"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)


# =============================================================================
# Helper Functions
# =============================================================================

def track_report_generation(report_type: str, output_format: str) -> None:
    """
    Increment the reports generated counter.

    Args:
        report_type: Type of report (e.g., 'weekly', 'monthly')
        output_format: Requested output encoding ('json', 'csv', 'pdf')
    """
    reports_generated.labels(report_type=report_type, output_format=output_format).inc()


def track_report_failure(entity: str) -> None:
    """Increment the failed reports counter for the entity that broke it."""
    report_failures.labels(entity=entity).inc()


def track_email_sent(template: str, count: int = 1) -> None:
    """
    Increment the emails sent counter.

    Args:
        template: Template name, or 'none' for explicit bodies
        count: Number of recipients
    """
    emails_sent.labels(template=template).inc(count)


@contextmanager
def track_report_generation_time(report_type: str) -> Generator[None, None, None]:
    """
    Context manager to track report generation duration.

    Args:
        report_type: Type of report being generated

    Example:
        with track_report_generation_time("weekly"):
            # Generate report
            pass
    """
    start_time = time()
    try:
        yield
    finally:
        duration = time() - start_time
        report_generation_time.labels(report_type=report_type).observe(duration)


@contextmanager
def track_entity_query_latency(entity: str) -> Generator[None, None, None]:
    """
    Context manager to track a single entity query.

    Args:
        entity: Entity name (e.g., 'tickets', 'deals')
    """
    start_time = time()
    try:
        yield
    finally:
        duration = time() - start_time
        entity_query_latency.labels(entity=entity).observe(duration)


# =============================================================================
# FastAPI Endpoint
# =============================================================================

metrics_router = APIRouter()


@metrics_router.get("/metrics")
def get_metrics() -> Response:
    """
    FastAPI endpoint to expose Prometheus metrics.

    Returns:
        Response with Prometheus metrics in text format
    """
    metrics_data = generate_latest()
    return Response(content=metrics_data, media_type=CONTENT_TYPE_LATEST)
