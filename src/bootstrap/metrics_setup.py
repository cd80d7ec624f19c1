"""
メトリクス初期化ロジック。
"""

from __future__ import annotations

from typing import Any, Mapping

from prometheus_client import CollectorRegistry

from application.observability import reset_observability, use_metrics_recorder
from infrastructure.metrics import MetricsRecorder, PrometheusMetricsRegistry, start_metrics_http_server

from .container import InvalidConfigurationError, MetricsConfigurator


class MetricsConfiguratorRegistry(MetricsConfigurator):
    """
    provider 名に応じて委譲するディスパッチャ。
    """

    def __init__(self, delegates: Mapping[str, MetricsConfigurator]) -> None:
        if not delegates:
            raise ValueError("メトリクス設定の委譲先が定義されていません。")
        self._delegates = dict(delegates)

    def configure(self, config: Mapping[str, Any]) -> None:
        provider = _require_string(config, "provider")
        delegate = self._delegates.get(provider)
        if delegate is None:
            raise InvalidConfigurationError(
                f"metrics provider '{provider}' に対応する初期化ロジックが見つかりません。"
            )
        delegate.configure(config)


class NoopMetricsConfigurator(MetricsConfigurator):
    """
    provider == noop の場合に適用する実装。記録は全て破棄される。
    """

    EXPECTED_PROVIDER = "noop"

    def configure(self, config: Mapping[str, Any]) -> None:
        provider = _require_string(config, "provider")
        if provider != self.EXPECTED_PROVIDER:
            raise InvalidConfigurationError(
                f"provider '{provider}' は NoopMetricsConfigurator では扱えません。"
            )
        MetricsRecorder.reset()
        reset_observability()


class PrometheusMetricsConfigurator(MetricsConfigurator):
    """
    prometheus-client のレジストリに MetricsRecorder を接続する。
    """

    EXPECTED_PROVIDER = "prometheus"

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry

    def configure(self, config: Mapping[str, Any]) -> None:
        provider = _require_string(config, "provider")
        if provider != self.EXPECTED_PROVIDER:
            raise InvalidConfigurationError(
                f"provider '{provider}' は PrometheusMetricsConfigurator では扱えません。"
            )

        options = config.get("options", {})
        if not isinstance(options, Mapping):
            raise InvalidConfigurationError("metrics.options は Mapping である必要があります。")

        registry = self._registry or CollectorRegistry()
        prometheus_registry = PrometheusMetricsRegistry(
            registry=registry,
            histogram_buckets=_parse_histogram_buckets(options.get("histogram_buckets")),
        )
        MetricsRecorder.configure(prometheus_registry, default_labels=_parse_default_labels(options.get("default_labels")))
        use_metrics_recorder(MetricsRecorder)

        host = str(options.get("host", "0.0.0.0"))
        try:
            port = int(options.get("port", 0))
        except (TypeError, ValueError) as exc:
            raise InvalidConfigurationError("metrics.options.port は整数で指定してください。") from exc
        start_metrics_http_server(registry, host=host, port=port)


def default_metrics_configurator() -> MetricsConfiguratorRegistry:
    return MetricsConfiguratorRegistry(
        {
            NoopMetricsConfigurator.EXPECTED_PROVIDER: NoopMetricsConfigurator(),
            PrometheusMetricsConfigurator.EXPECTED_PROVIDER: PrometheusMetricsConfigurator(),
        }
    )


def _require_string(config: Mapping[str, Any], key: str) -> str:
    if key not in config:
        raise InvalidConfigurationError(f"metrics 設定に '{key}' が存在しません。")
    value = config[key]
    if not isinstance(value, str) or not value:
        raise InvalidConfigurationError(f"metrics 設定の '{key}' は非空の str である必要があります。")
    return value


def _parse_histogram_buckets(raw: object) -> Mapping[str, tuple[float, ...]]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise InvalidConfigurationError("metrics.options.histogram_buckets は Mapping である必要があります。")
    buckets: dict[str, tuple[float, ...]] = {}
    for metric, values in raw.items():
        if not isinstance(values, (list, tuple)):
            raise InvalidConfigurationError(f"histogram_buckets['{metric}'] は配列である必要があります。")
        try:
            buckets[str(metric)] = tuple(float(value) for value in values)
        except (TypeError, ValueError) as exc:
            raise InvalidConfigurationError(
                f"histogram_buckets['{metric}'] の値は数値である必要があります。"
            ) from exc
    return buckets


def _parse_default_labels(raw: object) -> Mapping[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise InvalidConfigurationError("metrics.options.default_labels は Mapping である必要があります。")
    return {str(key): str(value) for key, value in raw.items()}
