"""
Performance Monitoring
Prometheus-based metrics collection for the synthesis pipeline
"""

from core.tracing import trace_operation
from .metrics import MetricsCollector, metrics_collector

__all__ = [
    "MetricsCollector",
    "metrics_collector",
    "trace_operation",
]
