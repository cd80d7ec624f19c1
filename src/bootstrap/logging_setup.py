"""
ロギング初期化ロジック。
"""

from __future__ import annotations

import logging.config
from typing import Any, Mapping

from .container import InvalidConfigurationError, LoggingConfigurator


class DictConfigLoggingConfigurator(LoggingConfigurator):
    """
    標準ライブラリの ``logging.config.dictConfig`` を用いたロギング初期化。

    各モジュールはインポート時にロガーを取得するため、既存ロガーは既定で無効化しない。
    """

    def configure(self, config: Mapping[str, Any]) -> None:
        if "version" not in config:
            raise InvalidConfigurationError("logging 設定に 'version' が存在しません。")

        plain = _to_plain_dict(config)
        plain.setdefault("disable_existing_loggers", False)
        try:
            logging.config.dictConfig(plain)
        except (ValueError, TypeError, AttributeError) as exc:
            raise InvalidConfigurationError("logging 設定の適用に失敗しました。") from exc


def _to_plain_dict(mapping: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in mapping.items():
        if isinstance(value, Mapping):
            result[key] = _to_plain_dict(value)
        else:
            result[key] = value
    return result
