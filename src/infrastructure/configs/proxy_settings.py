"""
リソースプロキシ設定（`resource_proxy.yaml`）の値オブジェクト。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from .config_repository import ConfigRepository

PROXY_CONFIG_NAME = "resource_proxy"


@dataclass(frozen=True)
class StorageProxySettings:
    """
    ストレージ単位のリモート取得設定。
    """

    remote_source_base_uri: str
    subdivide_hash_path_segment: bool = False

    @staticmethod
    def from_mapping(storage_name: str, mapping: Mapping[str, Any]) -> "StorageProxySettings":
        raw_base_uri = mapping.get("remoteSourceBaseUri")
        if not isinstance(raw_base_uri, str) or not raw_base_uri:
            raise ValueError(f"storages.{storage_name}.remoteSourceBaseUri は必須の文字列です。")

        subdivide = mapping.get("subdivideHashPathSegment", False)
        if not isinstance(subdivide, bool):
            raise ValueError(f"storages.{storage_name}.subdivideHashPathSegment は真偽値で指定してください。")

        return StorageProxySettings(remote_source_base_uri=raw_base_uri, subdivide_hash_path_segment=subdivide)


@dataclass(frozen=True)
class ResourceProxySettings:
    """
    ストレージ名をキーとする読み取り専用の設定マップ。

    エントリが存在しないストレージはプロキシ対象外として扱う。
    """

    storages: Mapping[str, StorageProxySettings] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "storages", MappingProxyType(dict(self.storages)))

    def get(self, storage_name: str) -> StorageProxySettings | None:
        return self.storages.get(storage_name)

    def __contains__(self, storage_name: object) -> bool:
        return storage_name in self.storages

    def __iter__(self) -> Iterator[str]:
        return iter(self.storages)

    @staticmethod
    def from_mapping(mapping: Mapping[str, Any]) -> "ResourceProxySettings":
        raw_storages = mapping.get("storages") or {}
        if not isinstance(raw_storages, Mapping):
            raise ValueError("storages は Mapping である必要があります。")

        storages: dict[str, StorageProxySettings] = {}
        for storage_name, raw_entry in raw_storages.items():
            if not isinstance(raw_entry, Mapping):
                raise ValueError(f"storages.{storage_name} は Mapping である必要があります。")
            storages[str(storage_name)] = StorageProxySettings.from_mapping(str(storage_name), raw_entry)
        return ResourceProxySettings(storages=storages)


@dataclass(frozen=True)
class RemoteFetchSettings:
    """
    リモートオリジンへの HTTP 接続設定。
    """

    timeout_seconds: float = 10.0
    verify_ssl: bool = True
    follow_redirects: bool = True

    @staticmethod
    def from_mapping(mapping: Mapping[str, Any]) -> "RemoteFetchSettings":
        raw_timeout: Any = mapping.get("timeout_seconds", 10.0)
        try:
            timeout_seconds = float(raw_timeout)
        except (TypeError, ValueError) as exc:
            raise ValueError("http.timeout_seconds は数値で指定してください。") from exc
        if timeout_seconds <= 0:
            raise ValueError("http.timeout_seconds は正の値である必要があります。")

        return RemoteFetchSettings(
            timeout_seconds=timeout_seconds,
            verify_ssl=bool(mapping.get("verify_ssl", True)),
            follow_redirects=bool(mapping.get("follow_redirects", True)),
        )


def load_proxy_configuration(
    repository: ConfigRepository, *, environment: str
) -> tuple[ResourceProxySettings, RemoteFetchSettings]:
    """
    `resource_proxy` 設定をロードし、ストレージ設定と HTTP 設定に分解する。
    """

    data = repository.load(PROXY_CONFIG_NAME, environment=environment)
    http_section = data.get("http") or {}
    if not isinstance(http_section, Mapping):
        raise ValueError("http は Mapping である必要があります。")
    return ResourceProxySettings.from_mapping(data), RemoteFetchSettings.from_mapping(http_section)
