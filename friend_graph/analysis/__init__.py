"""Analysis module - Layout metrics."""

from .metrics import MetricsCollector, LayoutMetrics, StepRecord

__all__ = [
    "MetricsCollector",
    "LayoutMetrics",
    "StepRecord",
]
