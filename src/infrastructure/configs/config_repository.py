"""
名前付き設定ファイルを取得・検証するリポジトリ実装。
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping, cast

import yaml
from jsonschema import Draft202012Validator, ValidationError

from .exceptions import ConfigNotFoundError, ConfigRepositoryError, SchemaValidationError
from .schema_registry import SchemaRegistry


def _ensure_mapping(data: object, *, origin: Path) -> Mapping[str, object]:
    if not isinstance(data, Mapping):
        raise ConfigRepositoryError(f"{origin} のトップレベルは Mapping である必要があります。")
    return cast(Mapping[str, object], data)


class ConfigRepository:
    """
    `configs/base/<name>.yaml` と `configs/envs/<env>/<name>.yaml` をマージし、スキーマ検証を行う。
    """

    def __init__(self, project_root: Path, schema_registry: SchemaRegistry) -> None:
        self._configs_root = project_root.resolve() / "configs"
        self._schema_registry = schema_registry

    def load(self, name: str, *, environment: str) -> Mapping[str, object]:
        """
        指定された設定名称の YAML を読み込み、環境差分をマージして返す。

        Args:
            name: 設定ファイル名（拡張子なし）。例: `resource_proxy`
            environment: 使用する環境名（dev/stg/prod など）。

        Raises:
            ConfigNotFoundError: ベース設定が存在しない場合。
            SchemaValidationError: スキーマ検証に失敗した場合。
        """

        base_path = self._configs_root / "base" / f"{name}.yaml"
        env_path = self._configs_root / "envs" / environment / f"{name}.yaml"

        if not base_path.exists():
            raise ConfigNotFoundError(f"ベース設定が存在しません: {base_path}")

        merged = _deep_merge(self._load_yaml(base_path), self._load_yaml(env_path) if env_path.exists() else {})

        schema = self._schema_registry.get_schema(name)
        if schema is not None:
            try:
                Draft202012Validator(schema).validate(merged)
            except ValidationError as exc:
                raise SchemaValidationError(
                    f"設定 '{name}' のスキーマ検証に失敗しました: {exc.message}"
                ) from exc

        return merged

    def dump(self, name: str, *, environment: str) -> str:
        """
        マージ済みの設定を JSON 文字列で返す（CLI 表示向け）。
        """

        data = self.load(name, environment=environment)
        return json.dumps(data, ensure_ascii=False, sort_keys=True, indent=2)

    def _load_yaml(self, path: Path) -> Mapping[str, object]:
        try:
            with path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise ConfigRepositoryError(f"YAML の解析に失敗しました: {path}") from exc

        if data is None:
            return {}
        return _ensure_mapping(data, origin=path)


def _deep_merge(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, object]:
    result = dict(base)
    for key, value in overlay.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(cast(Mapping[str, object], result[key]), cast(Mapping[str, object], value))
        else:
            result[key] = value
    return result
