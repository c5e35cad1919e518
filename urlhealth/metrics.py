"""Prometheus exporter for endpoint check metrics.

Exports:
- urlhealth_check_duration_seconds (Histogram, per endpoint)
- urlhealth_check_results_total (Counter, per endpoint and status category)
- urlhealth_check_attempts_total (Counter, per endpoint)
- urlhealth_checks_in_flight (Gauge)
"""

from __future__ import annotations

from pathlib import Path

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    write_to_textfile,
)

from urlhealth.check_result import ALL_STATUS_CATEGORIES, Result

_DEFAULT_BUCKETS = (0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)


class MetricsExporter:
    """Export check metrics to a Prometheus registry."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry if registry is not None else REGISTRY
        self._known_endpoints: set[str] = set()

        self._duration = Histogram(
            "urlhealth_check_duration_seconds",
            "Duration of an endpoint check including retries, in seconds",
            labelnames=("endpoint",),
            buckets=_DEFAULT_BUCKETS,
            registry=self._registry,
        )

        self._results = Counter(
            "urlhealth_check_results",
            "Number of completed endpoint checks by status category",
            labelnames=("endpoint", "status"),
            registry=self._registry,
        )

        self._attempts = Counter(
            "urlhealth_check_attempts",
            "Number of attempts performed for an endpoint",
            labelnames=("endpoint",),
            registry=self._registry,
        )

        self._in_flight = Gauge(
            "urlhealth_checks_in_flight",
            "Number of checks currently admitted past the concurrency gate",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def check_started(self) -> None:
        self._in_flight.inc()

    def check_finished(self) -> None:
        self._in_flight.dec()

    def observe_result(self, result: Result) -> None:
        """Record the duration, status category and attempt count of a result."""
        if result.endpoint not in self._known_endpoints:
            self._known_endpoints.add(result.endpoint)
            # Zero series for every category so absent outcomes read as 0.
            for cat in ALL_STATUS_CATEGORIES:
                self._results.labels(endpoint=result.endpoint, status=cat)
        self._duration.labels(endpoint=result.endpoint).observe(result.duration)
        self._results.labels(endpoint=result.endpoint, status=result.category).inc()
        self._attempts.labels(endpoint=result.endpoint).inc(result.attempts)

    def write_textfile(self, path: str | Path) -> None:
        """Write all metrics in the text exposition format (textfile collector)."""
        write_to_textfile(str(path), self._registry)
