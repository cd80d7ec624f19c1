"""
リソースプロキシのメトリクス記録ユーティリティ。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .prometheus_exporter import Counter, Histogram, MetricsRegistry


@dataclass
class _MetricHandles:
    remote_fetch_total: Counter
    remote_fetch_duration_seconds: Histogram
    resource_imports_total: Counter


class MetricsRecorder:
    """
    グローバルなメトリクス記録を担当するヘルパ。
    MetricsRegistry が未設定の場合はすべての更新を無視する。
    """

    _registry: MetricsRegistry | None = None
    _handles: _MetricHandles | None = None
    _default_labels: Mapping[str, str] = {}

    @classmethod
    def configure(
        cls,
        registry: MetricsRegistry,
        *,
        default_labels: Mapping[str, str] | None = None,
    ) -> None:
        cls._registry = registry
        cls._default_labels = default_labels or {}
        base_label_names = tuple(cls._default_labels.keys())

        def _label_names(*names: str) -> tuple[str, ...]:
            return base_label_names + names

        cls._handles = _MetricHandles(
            remote_fetch_total=registry.counter(
                "resource_proxy_remote_fetch",
                "Number of remote fetch attempts by outcome",
                labels=_label_names("storage", "outcome"),
            ),
            remote_fetch_duration_seconds=registry.histogram(
                "resource_proxy_remote_fetch_duration_seconds",
                "Duration of remote fetch round trips in seconds",
                labels=_label_names("storage"),
            ),
            resource_imports_total=registry.counter(
                "resource_proxy_imports",
                "Number of resource imports into local storages",
                labels=_label_names("storage", "status"),
            ),
        )

    @classmethod
    def _merge_labels(cls, extra: Mapping[str, str]) -> Mapping[str, str]:
        merged = dict(cls._default_labels)
        merged.update(extra)
        return merged

    @classmethod
    def increment_remote_fetch(cls, storage_name: str, outcome: str) -> None:
        if not cls._handles:
            return
        labels = cls._merge_labels({"storage": storage_name, "outcome": outcome})
        cls._handles.remote_fetch_total.inc(1.0, labels=labels)

    @classmethod
    def observe_remote_fetch_duration(cls, storage_name: str, duration_seconds: float) -> None:
        if not cls._handles:
            return
        labels = cls._merge_labels({"storage": storage_name})
        cls._handles.remote_fetch_duration_seconds.observe(duration_seconds, labels=labels)

    @classmethod
    def increment_resource_import(cls, storage_name: str, status: str) -> None:
        if not cls._handles:
            return
        labels = cls._merge_labels({"storage": storage_name, "status": status})
        cls._handles.resource_imports_total.inc(1.0, labels=labels)

    @classmethod
    def reset(cls) -> None:
        cls._registry = None
        cls._handles = None
        cls._default_labels = {}
