"""Middleware for metrics and logging."""

import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .services.metrics import REQUEST_COUNT, REQUEST_LATENCY


class MetricsLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request metrics and structured logging."""

    def __init__(self, app):
        super().__init__(app)
        self.logger = structlog.get_logger()

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())
        start_time = time.perf_counter()

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            self.logger.debug(
                "request_start",
                method=request.method,
                path=request.url.path,
                client_ip=request.client.host if request.client else None,
            )

            try:
                response = await call_next(request)
            except Exception as e:
                duration = time.perf_counter() - start_time
                REQUEST_COUNT.labels(method=request.method, status="500").inc()
                REQUEST_LATENCY.labels(method=request.method).observe(duration)
                self.logger.error(
                    "request_error",
                    method=request.method,
                    path=request.url.path,
                    duration_ms=round(duration * 1000, 2),
                    error=str(e),
                )
                raise

            # Streaming bodies are still being sent; this measures time to headers.
            duration = time.perf_counter() - start_time
            REQUEST_COUNT.labels(method=request.method, status=str(response.status_code)).inc()
            REQUEST_LATENCY.labels(method=request.method).observe(duration)
            self.logger.info(
                "request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )
            return response
