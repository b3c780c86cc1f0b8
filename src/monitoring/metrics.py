"""
Metrics Collection
Prometheus metrics for UI synthesis tracking
"""

import time
from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the synthesis pipeline.

    Each collector owns its registry so several can coexist in one process.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        self.registry = registry or CollectorRegistry()

        # Request metrics
        self.ui_requests_total = Counter(
            "ui_requests_total",
            "Total number of UI generation requests",
            ["status"],
            registry=self.registry,
        )
        self.ui_duration = Histogram(
            "ui_duration_seconds",
            "UI generation duration in seconds",
            buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
            registry=self.registry,
        )

        # Service call metrics
        self.llm_calls_total = Counter(
            "ui_llm_calls_total",
            "Total number of text-completion calls",
            ["step", "status"],
            registry=self.registry,
        )
        self.llm_duration = Histogram(
            "ui_llm_duration_seconds",
            "Text-completion call duration in seconds",
            ["step"],
            buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
            registry=self.registry,
        )

        # Pipeline outcome metrics
        self.fallbacks_total = Counter(
            "ui_fallbacks_total",
            "Fallback templates substituted",
            ["category"],
            registry=self.registry,
        )
        self.safety_violations_total = Counter(
            "ui_safety_violations_total",
            "Safety rule matches on generated markup",
            ["rule"],
            registry=self.registry,
        )
        self.vocabulary_replacements_total = Counter(
            "ui_vocabulary_replacements_total",
            "Unknown components rewritten to the generic container",
            registry=self.registry,
        )

        # Error metrics
        self.errors_total = Counter(
            "ui_errors_total",
            "Total number of errors",
            ["error_type", "component"],
            registry=self.registry,
        )

        # System metrics
        self.uptime = Gauge(
            "ui_uptime_seconds",
            "Service uptime in seconds",
            registry=self.registry,
        )
        self.start_time = time.time()

    def record_ui_request(self, status: str, duration: float) -> None:
        """Record a UI generation request."""
        self.ui_requests_total.labels(status=status).inc()
        self.ui_duration.observe(duration)

    def record_llm_call(self, step: str, status: str, duration: float) -> None:
        """Record a text-completion call."""
        self.llm_calls_total.labels(step=step, status=status).inc()
        self.llm_duration.labels(step=step).observe(duration)

    def record_fallback(self, category: str) -> None:
        self.fallbacks_total.labels(category=category).inc()

    def record_safety_violations(self, rules: list[str]) -> None:
        for rule in rules:
            self.safety_violations_total.labels(rule=rule).inc()

    def record_vocabulary_replacements(self, count: int) -> None:
        if count:
            self.vocabulary_replacements_total.inc(count)

    def record_error(self, error_type: str, component: str) -> None:
        """Record an error."""
        self.errors_total.labels(error_type=error_type, component=component).inc()

    def update_uptime(self) -> None:
        """Update the uptime metric."""
        self.uptime.set(time.time() - self.start_time)

    def sample(self, name: str, labels: Optional[dict[str, str]] = None) -> float:
        """Current value of one sample, 0.0 if never recorded."""
        value = self.registry.get_sample_value(name, labels or {})
        return value or 0.0

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format."""
        self.update_uptime()
        return generate_latest(self.registry)


# Global metrics collector instance
metrics_collector = MetricsCollector()
