"""Middleware for request processing and observability."""

import threading
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response


class HitCounter:
    """Thread-safe request counter owned by the application instance."""

    def __init__(self):
        self._lock = threading.Lock()
        self._hits = 0

    @property
    def hits(self) -> int:
        with self._lock:
            return self._hits

    def increment(self) -> None:
        with self._lock:
            self._hits += 1

    def reset(self) -> None:
        with self._lock:
            self._hits = 0


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to add correlation ID to every request.

    - Generates UUID4 per request (or uses X-Correlation-Id header if present)
    - Stores in request.state.correlation_id
    - Binds to structlog context for all subsequent logging
    - Adds X-Correlation-Id response header
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process request with correlation ID tracking."""
        correlation_id = request.headers.get("X-Correlation-Id", str(uuid4()))

        request.state.correlation_id = correlation_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

        response = await call_next(request)

        response.headers["X-Correlation-Id"] = correlation_id

        return response


class HitCounterMiddleware(BaseHTTPMiddleware):
    """Count requests under ``/api`` on ``app.state.hit_counter``.

    Responses are marked ``Cache-Control: no-cache`` so every client
    request reaches the server and is counted.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        counted = request.url.path.startswith("/api")
        if counted:
            request.app.state.hit_counter.increment()

        response = await call_next(request)

        if counted:
            response.headers["Cache-Control"] = "no-cache"
        return response
