"""FastAPI application entry point."""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.asyncio import Redis

from .config import settings
from .models import Base
from .core.database import engine
from .core.middleware import RateLimitMiddleware, RequestLoggingMiddleware
from .core.exceptions import register_exception_handlers

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="CommHub Reports API",
    description="Ticket, CRM and appointment reporting with notification emails",
    version="1.0.0",
    debug=settings.debug
)

# Register exception handlers
register_exception_handlers(app)

# Redis client for rate limiting; connections are opened lazily
redis_client = Redis.from_url(
    settings.redis_url,
    encoding="utf-8",
    decode_responses=True,
    socket_connect_timeout=5,
    socket_timeout=5,
    retry_on_timeout=True,
    health_check_interval=30
)

# Add middleware (order matters: logging → rate limit → CORS)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(RateLimitMiddleware, redis_client=redis_client)

# Any caller origin may use the functions
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Initialize application on startup."""
    logger.info("Starting CommHub Reports API...")
    logger.info(f"Environment: {settings.environment}")

    try:
        await redis_client.ping()
        logger.info("Redis connection verified - ready for rate limiting")
    except Exception as e:
        logger.error(f"Redis connection test failed: {e}")
        logger.warning("Continuing without Redis rate limiting")

    if settings.is_development:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ready")

    logger.info("CommHub Reports API started successfully")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    logger.info("Shutting down CommHub Reports API...")
    await redis_client.close()
    logger.info("Redis client closed")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "CommHub Reports API",
        "version": "1.0.0",
        "docs": "/docs"
    }


# Register API routers
from .api.endpoints.health import router as health_router  # noqa: E402
from .api.endpoints.reports import router as reports_router  # noqa: E402
from .api.endpoints.notifications import router as notifications_router  # noqa: E402
from .core.metrics import metrics_router  # noqa: E402

app.include_router(health_router, tags=["health"])
app.include_router(reports_router)
app.include_router(notifications_router)
app.include_router(metrics_router, tags=["monitoring"])
