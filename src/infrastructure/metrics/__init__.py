"""
メトリクス関連の公開API。
"""

from .prometheus_runtime import PrometheusMetricsRegistry, start_metrics_http_server
from .recorder import MetricsRecorder

__all__ = [
    "PrometheusMetricsRegistry",
    "MetricsRecorder",
    "start_metrics_http_server",
]
