"""
アプリケーション層から利用する観測性ユーティリティ。

Infrastructure 層で実際のメトリクス実装を登録するまでは全て no-op として動作する。
呼び出し側は ``observability.metrics_recorder`` をモジュール属性経由で参照すること。
"""

from __future__ import annotations

from typing import Protocol


class MetricsRecorderProtocol(Protocol):
    def increment_remote_fetch(self, storage_name: str, outcome: str) -> None: ...

    def observe_remote_fetch_duration(self, storage_name: str, duration_seconds: float) -> None: ...

    def increment_resource_import(self, storage_name: str, status: str) -> None: ...

    def reset(self) -> None: ...


class _NoopMetricsRecorder(MetricsRecorderProtocol):
    def increment_remote_fetch(self, storage_name: str, outcome: str) -> None:  # noqa: D401
        pass

    def observe_remote_fetch_duration(self, storage_name: str, duration_seconds: float) -> None:
        pass

    def increment_resource_import(self, storage_name: str, status: str) -> None:
        pass

    def reset(self) -> None:
        pass


metrics_recorder: MetricsRecorderProtocol = _NoopMetricsRecorder()


def use_metrics_recorder(recorder: MetricsRecorderProtocol) -> None:
    global metrics_recorder
    metrics_recorder = recorder


def reset_observability() -> None:
    use_metrics_recorder(_NoopMetricsRecorder())
