"""
Service Observer

The observability collaborator handed to the core services. Services never
reach for a module-level logger or a global metrics registry; they report
events to the observer they were constructed with. The application builds
one observer at startup, tests build their own and inspect it.

Each event is logged through the observer's logger and counted in a
Prometheus counter labelled by event name. HTTP requests are logged and
timed into a histogram. Every observer owns its CollectorRegistry, which
GET /metrics exposes.
"""

import logging
from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram

EVENTS_METRIC = "url_shortener_events"
REQUEST_DURATION_METRIC = "url_shortener_http_request_duration_seconds"


class ServiceObserver:
    """Logs service events and HTTP requests into Prometheus metrics."""

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        registry: Optional[CollectorRegistry] = None,
    ):
        self.logger = logger or logging.getLogger("url_shortener.core")
        self.http_logger = logging.getLogger("url_shortener.http")
        self.registry = registry or CollectorRegistry()

        self.events = Counter(
            EVENTS_METRIC,
            "Service events by name",
            ["event"],
            registry=self.registry,
        )
        self.request_duration = Histogram(
            REQUEST_DURATION_METRIC,
            "HTTP request duration in seconds",
            ["method", "route", "status"],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
            registry=self.registry,
        )

    def event(self, name: str, **fields) -> None:
        """Record a routine event (logged at DEBUG)."""
        self.events.labels(event=name).inc()
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(f"{name} {self._format(fields)}")

    def notice(self, name: str, **fields) -> None:
        """Record a noteworthy event that is not a failure (logged at WARNING)."""
        self.events.labels(event=name).inc()
        self.logger.warning(f"{name} {self._format(fields)}")

    def failure(self, name: str, error: BaseException, **fields) -> None:
        """Record a failure with its traceback (logged at ERROR)."""
        self.events.labels(event=name).inc()
        self.logger.error(
            f"{name} {self._format(fields)}: {error}",
            exc_info=(type(error), error, error.__traceback__)
        )

    def request(
        self,
        method: str,
        path: str,
        route: str,
        status_code: int,
        duration: float,
        client_ip: str = "unknown",
    ) -> None:
        """
        Record one served HTTP request.

        `route` is the route template (e.g. "/{short_code}") so the histogram
        does not get a label per short code; the raw path only goes to the log.
        """
        self.request_duration.labels(
            method=method, route=route, status=str(status_code)
        ).observe(duration)
        # Format: METHOD PATH STATUS_CODE PROCESS_TIME_MS CLIENT_IP
        self.http_logger.info(
            f"{method} {path} {status_code} {duration*1000:.2f}ms IP:{client_ip}"
        )

    def count(self, name: str) -> int:
        value = self.registry.get_sample_value(f"{EVENTS_METRIC}_total", {"event": name})
        return int(value or 0)

    @staticmethod
    def _format(fields: dict) -> str:
        return " ".join(f"{key}={value}" for key, value in fields.items())
