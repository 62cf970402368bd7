"""
FastAPI middleware for request context, logging and HTTP metrics
"""
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.logging_config import LoggingConfig
from app.core.metrics import http_request_duration_seconds, http_requests_total

logger = LoggingConfig.get_logger(__name__)


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Middleware to add request context to logs and record request metrics"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Add request context and log request/response"""
        # Reuse caller supplied request ID when present
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())

        LoggingConfig.set_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_host=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )

        start_time = time.time()
        logger.info(
            "Request started",
            extra={
                "method": request.method,
                "path": request.url.path,
                "query_params": str(request.query_params),
            }
        )

        try:
            response = await call_next(request)

            duration = time.time() - start_time
            duration_ms = int(duration * 1000)

            LoggingConfig.set_context(
                status_code=response.status_code,
                duration_ms=duration_ms,
            )
            logger.info(
                "Request completed",
                extra={
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                }
            )

            if request.url.path != "/metrics":
                http_requests_total.labels(method=request.method, status_code=str(response.status_code)).inc()
                http_request_duration_seconds.labels(method=request.method).observe(duration)

            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as e:
            duration_ms = int((time.time() - start_time) * 1000)
            http_requests_total.labels(method=request.method, status_code="500").inc()

            logger.error(
                "Request failed",
                exc_info=True,
                extra={
                    "error": str(e),
                    "error_type": type(e).__name__,
                    "duration_ms": duration_ms,
                }
            )
            raise

        finally:
            LoggingConfig.clear_context()
