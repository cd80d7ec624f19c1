"""
ランタイム依存関係のビルダー。

設定からストレージ・コレクション・公開ターゲットを構築し、プロキシ対象の
ストレージとターゲットをデコレータでラップする。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Mapping, cast

import httpx

from application.services import (
    CollectionNotFoundError,
    ProxyingPublicUriTarget,
    ProxyingResourceStorage,
    RemoteResourceImporter,
    proxy_storage,
)
from bootstrap import (
    BootstrapContainer,
    BootstrapContext,
    ConfigBundle,
    DictConfigLoggingConfigurator,
    YamlConfigLoader,
    default_metrics_configurator,
)
from domain import PersistentResource
from infrastructure.configs import (
    ConfigRepository,
    JsonSchemaRegistry,
    ResourceProxySettings,
    load_proxy_configuration,
)
from infrastructure.remote import HttpRemoteResourceFetcher
from infrastructure.resources import ResourceCollectionRegistry, StaticBaseUriTarget, StorageCollection
from infrastructure.storage import FileSystemResourceStorage, WritableFileSystemResourceStorage

LOGGER = logging.getLogger("resource_proxy.runtime")


@dataclass(frozen=True)
class ResourceManager:
    """
    構築済みのコレクション・ストレージ群への入口。
    """

    collections: ResourceCollectionRegistry
    storages: Mapping[str, ProxyingResourceStorage]
    proxy_settings: ResourceProxySettings
    fetcher: HttpRemoteResourceFetcher

    def get_collection(self, name: str) -> StorageCollection:
        collection = self.collections.get_collection(name)
        if collection is None:
            raise CollectionNotFoundError(f"コレクション '{name}' が存在しません。")
        return collection

    def get_stream(self, resource: PersistentResource) -> BinaryIO | None:
        return self.get_collection(resource.collection_name).storage.get_stream(resource)

    def get_public_uri(self, resource: PersistentResource) -> str:
        return self.get_collection(resource.collection_name).target.get_public_persistent_resource_uri(resource)

    def close(self) -> None:
        self.fetcher.close()


def default_project_root() -> Path:
    override = os.getenv("RESOURCE_PROXY_ROOT")
    if override:
        return Path(override)
    return Path(__file__).resolve().parents[2]


def default_environment() -> str:
    return os.getenv("SERVICE_ENV", "dev")


def build_config_repository(project_root: Path) -> ConfigRepository:
    registry = JsonSchemaRegistry(project_root / "configs" / "schemas")
    return ConfigRepository(project_root, registry)


def bootstrap_application(project_root: Path | None = None, environment: str | None = None) -> BootstrapContext:
    """
    設定ロード・ロギング・メトリクスを初期化する。
    """

    container = BootstrapContainer(
        project_root=project_root or default_project_root(),
        environment=environment or default_environment(),
        config_loader_factory=lambda root, env: YamlConfigLoader(root, environment=env),
        logging_configurator=DictConfigLoggingConfigurator(),
        metrics_configurator=default_metrics_configurator(),
    )
    return container.initialize()


def build_resource_manager(
    config: ConfigBundle,
    *,
    project_root: Path,
    environment: str,
    http_client: httpx.Client | None = None,
) -> ResourceManager:
    """
    `resource_management` セクションと `resource_proxy` 設定から ResourceManager を構築する。

    Args:
        config: ブートストラップ済みの設定バンドル。
        project_root: 相対ストレージパスの基準ディレクトリ。
        environment: `resource_proxy` 設定の環境名。
        http_client: リモート取得に用いる HTTP クライアント。未指定時は設定から生成する。
    """

    proxy_settings, fetch_settings = load_proxy_configuration(
        build_config_repository(project_root), environment=environment
    )
    fetcher = HttpRemoteResourceFetcher(proxy_settings, fetch_settings, client=http_client)
    importer = RemoteResourceImporter(fetcher)

    management = config.require_section("resource_management")
    storage_definitions = cast(Mapping[str, Mapping[str, object]], management["storages"])
    collection_definitions = cast(Mapping[str, Mapping[str, object]], management["collections"])

    storages: dict[str, ProxyingResourceStorage] = {}
    for storage_name, definition in storage_definitions.items():
        root = Path(str(definition["path"]))
        if not root.is_absolute():
            root = project_root / root
        storage: FileSystemResourceStorage
        if definition.get("writable", True):
            storage = WritableFileSystemResourceStorage(storage_name, root)
        else:
            storage = FileSystemResourceStorage(storage_name, root)
        storages[storage_name] = proxy_storage(storage, proxy_settings=proxy_settings, importer=importer)

    for storage_name in proxy_settings:
        if storage_name not in storages:
            LOGGER.warning('Proxy settings reference the unknown storage "%s".', storage_name)

    registry = ResourceCollectionRegistry()
    for collection_name, definition in collection_definitions.items():
        target_definition = cast(Mapping[str, object], definition["target"])
        target = StaticBaseUriTarget(
            name=f"{collection_name}Target",
            base_uri=str(target_definition["base_uri"]),
            subdivide_hash_path_segment=bool(target_definition.get("subdivide_hash_path_segment", False)),
        )
        registry.register(
            StorageCollection(
                name=collection_name,
                storage=storages[str(definition["storage"])],
                target=ProxyingPublicUriTarget(
                    target,
                    collection_resolver=registry,
                    proxy_settings=proxy_settings,
                    importer=importer,
                ),
            )
        )

    LOGGER.debug(
        "Built %d collection(s) over %d storage(s); proxied storages: %s",
        len(registry),
        len(storages),
        ", ".join(name for name in storages if name in proxy_settings) or "none",
    )
    return ResourceManager(
        collections=registry,
        storages=storages,
        proxy_settings=proxy_settings,
        fetcher=fetcher,
    )


def build_runtime(
    project_root: Path | None = None,
    environment: str | None = None,
    *,
    http_client: httpx.Client | None = None,
) -> tuple[BootstrapContext, ResourceManager]:
    root = project_root or default_project_root()
    context = bootstrap_application(root, environment)
    manager = build_resource_manager(
        context.config,
        project_root=root,
        environment=context.environment,
        http_client=http_client,
    )
    return context, manager
