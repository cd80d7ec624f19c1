"""
設定 YAML 群を読み込み、検証済みの ConfigBundle を生成するローダ。
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .container import (
    ConfigBundle,
    ConfigLoader,
    InvalidConfigurationError,
    MissingConfigurationError,
)


class LoggingConfigModel(BaseModel):
    """logging 設定（dictConfig 形式）の最小検証モデル。"""

    model_config = ConfigDict(extra="allow")

    version: int


class MetricsConfigModel(BaseModel):
    """metrics 設定の最小検証モデル。"""

    model_config = ConfigDict(extra="allow")

    provider: str


class StorageDefinitionModel(BaseModel):
    """ローカルストレージの定義。"""

    model_config = ConfigDict(extra="forbid")

    path: str = Field(min_length=1)
    writable: bool = True


class TargetDefinitionModel(BaseModel):
    """公開ターゲットの定義。"""

    model_config = ConfigDict(extra="forbid")

    base_uri: str = Field(min_length=1)
    subdivide_hash_path_segment: bool = False


class CollectionDefinitionModel(BaseModel):
    """コレクションの定義。"""

    model_config = ConfigDict(extra="forbid")

    storage: str = Field(min_length=1)
    target: TargetDefinitionModel


class ResourceManagementConfigModel(BaseModel):
    """
    ストレージとコレクションの構成。

    コレクションが参照するストレージは全て定義済みである必要がある。
    """

    model_config = ConfigDict(extra="forbid")

    storages: dict[str, StorageDefinitionModel]
    collections: dict[str, CollectionDefinitionModel]

    @model_validator(mode="after")
    def _check_storage_references(self) -> "ResourceManagementConfigModel":
        for collection_name, collection in self.collections.items():
            if collection.storage not in self.storages:
                raise ValueError(
                    f"collection '{collection_name}' が未定義のストレージ '{collection.storage}' を参照しています。"
                )
        return self


class AppConfigModel(BaseModel):
    """
    アプリケーション全体の設定バリデーション。

    必須セクション（logging, metrics, resource_management）の構造を検証し、
    その他のセクションは追加情報として保持する。
    """

    model_config = ConfigDict(extra="allow")

    logging: LoggingConfigModel
    metrics: MetricsConfigModel
    resource_management: ResourceManagementConfigModel


class YamlConfigLoader(ConfigLoader):
    """
    `configs/base` と `configs/envs/<env>` の YAML をロードしマージする実装。
    """

    def __init__(
        self,
        project_root: Path,
        *,
        environment: str | None = None,
        configs_dir_name: str = "configs",
        file_prefix: str = "app",
    ) -> None:
        self._configs_root = project_root.resolve() / configs_dir_name
        self._file_prefix = file_prefix
        self._environment = environment or os.getenv("SERVICE_ENV")

    def load(self) -> ConfigBundle:
        env = self._environment
        if not env:
            raise MissingConfigurationError(
                "環境変数 'SERVICE_ENV' が未設定のため、設定をロードできません。"
            )

        base_dir = self._configs_root / "base"
        env_dir = self._configs_root / "envs" / env

        self._ensure_directory(base_dir, description="基本設定ディレクトリ")
        base_config = self._load_directory(base_dir)

        # 環境差分ディレクトリは任意
        env_config: dict[str, Any] = {}
        if env_dir.is_dir():
            env_config = self._load_directory(env_dir, required=False)
        _validate_overlay_keys(base_config, env_config)
        merged = _deep_merge(base_config, env_config)

        try:
            validated = AppConfigModel(**merged)
        except ValidationError as exc:
            raise InvalidConfigurationError("設定値の検証に失敗しました。") from exc

        return ConfigBundle(root=validated.model_dump())

    def _load_directory(self, directory: Path, *, required: bool = True) -> dict[str, Any]:
        # resource_proxy.yaml などの名前付き設定は ConfigRepository が扱う
        prefix = self._file_prefix
        yaml_files = sorted(set(directory.glob(f"{prefix}*.yml")) | set(directory.glob(f"{prefix}*.yaml")))

        if not yaml_files and required:
            raise MissingConfigurationError(f"{directory} に YAML ファイルが存在しません。")

        accumulator: dict[str, Any] = {}
        for file_path in yaml_files:
            accumulator = _deep_merge(accumulator, self._load_yaml(file_path))
        return accumulator

    def _load_yaml(self, file_path: Path) -> Mapping[str, Any]:
        try:
            with file_path.open("r", encoding="utf-8") as fh:
                content = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise InvalidConfigurationError(f"YAML の解析に失敗しました: {file_path}") from exc

        if content is None:
            raise InvalidConfigurationError(f"YAML ファイルが空です: {file_path}")

        if not isinstance(content, Mapping):
            raise InvalidConfigurationError(
                f"YAML ファイルのトップレベルは Mapping である必要があります: {file_path}"
            )

        return content

    @staticmethod
    def _ensure_directory(directory: Path, *, description: str) -> None:
        if not directory.is_dir():
            raise MissingConfigurationError(f"{description} ({directory}) が存在しません。")


def _deep_merge(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    """
    ネストされた辞書をマージする。overlay の値が優先される。
    """

    result: dict[str, Any] = dict(base)
    for key, value in overlay.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _validate_overlay_keys(base: Mapping[str, Any], overlay: Mapping[str, Any], *, path: str = "") -> None:
    """
    環境差分で未定義キーが追加されていないか検証する。
    """

    for key, value in overlay.items():
        if key not in base:
            raise InvalidConfigurationError(
                f"環境差分で未定義の設定キー '{path}{key}' が検出されました。"
                " 先に configs/base 配下へ定義を追加してください。"
            )

        base_value = base[key]
        if isinstance(value, Mapping) and isinstance(base_value, Mapping):
            _validate_overlay_keys(base_value, value, path=f"{path}{key}.")
        elif isinstance(value, Mapping) and not isinstance(base_value, Mapping):
            raise InvalidConfigurationError(
                f"設定キー '{path}{key}' は base では非マッピング型ですが、環境差分で Mapping が指定されました。"
            )
