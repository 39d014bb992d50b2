"""Middleware for rate limiting and request logging."""

import logging
import time
import uuid
from typing import Optional, Callable
from contextvars import ContextVar

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ..config import settings

logger = logging.getLogger(__name__)

request_id_context: ContextVar[Optional[str]] = ContextVar("request_id_context", default=None)


def get_current_request_id() -> Optional[str]:
    """Get current request correlation ID from context."""
    return request_id_context.get()


def get_caller_key(request: Request) -> str:
    """Identify the caller for rate limiting: X-User-ID header, else client host."""
    user_id = request.headers.get("X-User-ID")
    if user_id:
        return f"user:{user_id}"
    host = request.client.host if request.client else "unknown"
    return f"ip:{host}"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Fixed-window rate limiting per caller per API group.

    Uses Redis INCR with expiration so limits hold across workers.
    """

    EXEMPT_PATHS = {"/", "/health", "/health/ready", "/metrics"}
    WINDOW_SECONDS = 60

    def __init__(self, app: ASGIApp, redis_client: Redis, requests_per_minute: int = None):
        super().__init__(app)
        self.redis = redis_client
        self.requests_per_minute = requests_per_minute or settings.rate_limit_per_minute

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Check rate limits before processing request."""
        if request.method == "OPTIONS" or request.url.path in self.EXEMPT_PATHS:
            return await call_next(request)

        caller = get_caller_key(request)
        api = self._get_api_from_path(request.url.path)

        allowed, retry_after = await self.check_rate_limit(caller, api)

        if not allowed:
            logger.warning(
                f"Rate limit exceeded for caller={caller}, api={api}, "
                f"retry_after={retry_after}s"
            )
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "error": f"Rate limit exceeded. Retry after {retry_after} seconds",
                    "retry_after": retry_after
                },
                headers={**settings.cors_headers, "Retry-After": str(retry_after)}
            )

        return await call_next(request)

    def _get_api_from_path(self, path: str) -> str:
        """Determine API group from request path."""
        if path.endswith("/generate-report"):
            return "reports"
        elif path.endswith("/send-email"):
            return "notifications"
        return "default"

    async def check_rate_limit(self, caller: str, api: str) -> tuple[bool, int]:
        """Check if request is within rate limit.

        Args:
            caller: Caller key from get_caller_key
            api: API group (reports, notifications, default)

        Returns:
            Tuple of (allowed, retry_after_seconds)
        """
        key = f"ratelimit:{caller}:{api}"

        try:
            current = await self.redis.incr(key)

            # Set expiration on first request
            if current == 1:
                await self.redis.expire(key, self.WINDOW_SECONDS)

            if current > self.requests_per_minute:
                ttl = await self.redis.ttl(key)
                # TTL returns -1 if key has no expiry, -2 if key doesn't exist
                return False, ttl if ttl > 0 else self.WINDOW_SECONDS

            return True, 0
        except Exception as e:
            # On Redis error, allow request but log error
            logger.error(f"Rate limit check failed: {e}")
            return True, 0


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log request and response details with correlation ID."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Log request and response."""
        correlation_id = str(uuid.uuid4())
        request_id_context.set(correlation_id)

        start_time = time.time()
        caller = get_caller_key(request)

        logger.info(
            f"Request started: method={request.method} path={request.url.path} "
            f"caller={caller} correlation_id={correlation_id}"
        )

        try:
            response = await call_next(request)

            duration_ms = (time.time() - start_time) * 1000

            logger.info(
                f"Request completed: method={request.method} path={request.url.path} "
                f"status={response.status_code} duration_ms={duration_ms:.2f} "
                f"caller={caller} correlation_id={correlation_id}"
            )

            response.headers.setdefault("X-Correlation-ID", correlation_id)

            return response

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000

            logger.error(
                f"Request failed: method={request.method} path={request.url.path} "
                f"duration_ms={duration_ms:.2f} caller={caller} "
                f"correlation_id={correlation_id} error={str(e)}",
                exc_info=True
            )

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": str(e) or "Internal server error"},
                headers={**settings.cors_headers, "X-Correlation-ID": correlation_id}
            )
        finally:
            request_id_context.set(None)
