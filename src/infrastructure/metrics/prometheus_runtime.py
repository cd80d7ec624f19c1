"""
prometheus-client に依存した MetricsRegistry 実装。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence, cast

from prometheus_client import (
    CollectorRegistry,
    Counter as PrometheusCounter,
    Histogram as PrometheusHistogram,
    start_http_server,
)

from .prometheus_exporter import Counter, Histogram, MetricsRegistry


class _CounterAdapter(Counter):
    def __init__(self, metric: PrometheusCounter) -> None:
        self._metric = metric

    def inc(self, value: float = 1.0, labels: Mapping[str, str] | None = None) -> None:
        if labels:
            self._metric.labels(**labels).inc(value)
        else:
            self._metric.inc(value)


class _HistogramAdapter(Histogram):
    def __init__(self, metric: PrometheusHistogram) -> None:
        self._metric = metric

    def observe(self, value: float, labels: Mapping[str, str] | None = None) -> None:
        if labels:
            self._metric.labels(**labels).observe(value)
        else:
            self._metric.observe(value)


def _label_key(name: str, labels: Sequence[str] | None) -> tuple[str, tuple[str, ...]]:
    return name, tuple(sorted(labels or ()))


@dataclass
class PrometheusMetricsRegistry(MetricsRegistry):
    """
    同名メトリクスの二重登録を避けつつ prometheus-client のメトリクスを払い出す。
    """

    registry: CollectorRegistry
    histogram_buckets: Mapping[str, Sequence[float]] | None = None

    _counters: dict[tuple[str, tuple[str, ...]], PrometheusCounter] = field(default_factory=dict, init=False)
    _histograms: dict[tuple[str, tuple[str, ...]], PrometheusHistogram] = field(default_factory=dict, init=False)

    def counter(self, name: str, documentation: str, labels: tuple[str, ...] | None = None) -> Counter:
        key = _label_key(name, labels)
        metric = self._counters.get(key)
        if metric is None:
            metric = PrometheusCounter(name, documentation, labelnames=key[1], registry=self.registry)
            self._counters[key] = metric
        return _CounterAdapter(metric)

    def histogram(self, name: str, documentation: str, labels: tuple[str, ...] | None = None) -> Histogram:
        key = _label_key(name, labels)
        metric = self._histograms.get(key)
        if metric is None:
            buckets = (self.histogram_buckets or {}).get(name)
            if buckets:
                metric = PrometheusHistogram(
                    name,
                    documentation,
                    labelnames=key[1],
                    buckets=cast("Sequence[float | str]", tuple(float(boundary) for boundary in buckets)),
                    registry=self.registry,
                )
            else:
                metric = PrometheusHistogram(name, documentation, labelnames=key[1], registry=self.registry)
            self._histograms[key] = metric
        return _HistogramAdapter(metric)


def start_metrics_http_server(
    registry: CollectorRegistry,
    *,
    host: str,
    port: int,
) -> object | None:
    """
    Prometheus `/metrics` エンドポイントを公開する。port が 0 以下の場合は起動しない。
    """

    if port <= 0:
        return None
    return start_http_server(port, addr=host, registry=registry)
