"""
Logging Setup and Request Observation Middleware

This module configures application logging and reports every HTTP request
to the application's ServiceObserver, which logs it and times it into the
request-duration histogram served by GET /metrics.

Design Decisions:
- Uses Starlette's BaseHTTPMiddleware for compatibility
- Metrics are labelled with the matched route template, never the raw path
- Logs to standard Python logging; level comes from settings.LOG_LEVEL
"""

import logging
import sys
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.observability import ServiceObserver
from app.core.setting import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = None) -> None:
    """
    Configure the root logger once for the process.

    Args:
        level: Log level name (default: settings.LOG_LEVEL)
    """
    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())

    if not any(getattr(h, "_url_shortener", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._url_shortener = True
        root.addHandler(handler)


def route_template(request: Request) -> str:
    """Path template of the route that served the request, or "unmatched"."""
    route = request.scope.get("route")
    return getattr(route, "path", "unmatched")


def client_ip(request: Request) -> str:
    """First X-Forwarded-For hop when behind a proxy, else the peer address."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RequestObserverMiddleware(BaseHTTPMiddleware):
    """Reports method, route, status and latency of each request to the observer."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time

        observer: ServiceObserver = request.app.state.observer
        observer.request(
            request.method,
            request.url.path,
            route_template(request),
            response.status_code,
            process_time,
            client_ip=client_ip(request),
        )

        response.headers["X-Process-Time"] = str(process_time)
        return response


def add_logging_middleware(app):
    """
    Add request observation middleware to FastAPI app.

    Args:
        app: FastAPI application instance (app.state.observer must be set)
    """
    app.add_middleware(RequestObserverMiddleware)
