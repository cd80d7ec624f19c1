"""
ストレージと公開ターゲットをラップし、欠落リソースをリモートから取り込むデコレータ群。

デコレータは構成時（`runtime.dependencies`）に適用され、ラップ対象と同じ
ケイパビリティを提供する。呼び出し側は常にラップ対象の本来の結果を受け取る。
"""

from __future__ import annotations

import logging
from typing import BinaryIO

from domain import PersistentResource, StoredResource
from domain.services import (
    CollectionResolver,
    PublicUriTarget,
    ResourceStorage,
    WritableResourceStorage,
)
from infrastructure.configs import ResourceProxySettings

from .resource_import import RemoteResourceImporter

LOGGER = logging.getLogger("resource_proxy.interception")


class CollectionNotFoundError(RuntimeError):
    """リソースのコレクションを解決できない。"""


class ProxyingResourceStorage(ResourceStorage):
    """
    `get_stream` をラップし、ストリームを取得できない場合にリモートから取り込む。
    """

    def __init__(
        self,
        storage: ResourceStorage,
        *,
        proxy_settings: ResourceProxySettings,
        importer: RemoteResourceImporter,
    ) -> None:
        self._storage = storage
        self._proxy_settings = proxy_settings
        self._importer = importer

    @property
    def name(self) -> str:
        return self._storage.name

    @property
    def wrapped(self) -> ResourceStorage:
        return self._storage

    def get_stream(self, resource: PersistentResource) -> BinaryIO | None:
        stream = self._storage.get_stream(resource)
        if stream is not None:
            return stream

        storage_name = self._storage.name
        if self._proxy_settings.get(storage_name) is None:
            LOGGER.debug('The storage "%s" is not configured for proxying, nothing to do.', storage_name)
            return stream

        if not isinstance(self._storage, WritableResourceStorage):
            LOGGER.info('The storage "%s" is not writable. Skipping fetching & importing.', storage_name)
            return stream

        LOGGER.debug(
            'The resource "%s" (%s) is not available in storage "%s", fetching & importing it.',
            resource.filename,
            resource.content_hash,
            storage_name,
        )
        self._importer.import_remote_resource(resource, self._storage)
        return self._storage.get_stream(resource)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._storage!r})"


class ProxyingWritableResourceStorage(ProxyingResourceStorage, WritableResourceStorage):
    """
    書き込み可能なストレージ向けのデコレータ。インポートはそのまま委譲する。
    """

    def __init__(
        self,
        storage: WritableResourceStorage,
        *,
        proxy_settings: ResourceProxySettings,
        importer: RemoteResourceImporter,
    ) -> None:
        super().__init__(storage, proxy_settings=proxy_settings, importer=importer)
        self._writable_storage = storage

    def import_resource_from_content(self, content: bytes, collection_name: str) -> StoredResource:
        return self._writable_storage.import_resource_from_content(content, collection_name)


def proxy_storage(
    storage: ResourceStorage,
    *,
    proxy_settings: ResourceProxySettings,
    importer: RemoteResourceImporter,
) -> ProxyingResourceStorage:
    """
    ストレージのケイパビリティに応じたデコレータでラップする。
    """

    if isinstance(storage, WritableResourceStorage):
        return ProxyingWritableResourceStorage(storage, proxy_settings=proxy_settings, importer=importer)
    return ProxyingResourceStorage(storage, proxy_settings=proxy_settings, importer=importer)


def unwrap_storage(storage: ResourceStorage) -> ResourceStorage:
    while isinstance(storage, ProxyingResourceStorage):
        storage = storage.wrapped
    return storage


class ProxyingPublicUriTarget(PublicUriTarget):
    """
    公開 URI の算出前に、リソースがストレージに存在しなければリモートから取り込む。

    取り込みに失敗しても URI は算出される（実体のない URI になり得る）。
    """

    def __init__(
        self,
        target: PublicUriTarget,
        *,
        collection_resolver: CollectionResolver,
        proxy_settings: ResourceProxySettings,
        importer: RemoteResourceImporter,
    ) -> None:
        self._target = target
        self._collection_resolver = collection_resolver
        self._proxy_settings = proxy_settings
        self._importer = importer

    @property
    def wrapped(self) -> PublicUriTarget:
        return self._target

    def get_public_persistent_resource_uri(self, resource: PersistentResource) -> str:
        collection_name = resource.collection_name
        collection = self._collection_resolver.get_collection(collection_name)
        if collection is None:
            raise CollectionNotFoundError(f"コレクション '{collection_name}' が存在しません。")

        # プロキシ済みストレージで存在確認すると取り込みが二重に走るため、本来のストレージを見る
        storage = unwrap_storage(collection.storage)
        storage_name = storage.name
        if self._proxy_settings.get(storage_name) is None:
            LOGGER.debug('The storage "%s" is not configured for proxying, nothing to do.', storage_name)
            return self._target.get_public_persistent_resource_uri(resource)

        stream = storage.get_stream(resource)
        if stream is not None:
            stream.close()
            return self._target.get_public_persistent_resource_uri(resource)

        if not isinstance(storage, WritableResourceStorage):
            LOGGER.info('The storage "%s" is not writable. Skipping fetching & importing.', storage_name)
            return self._target.get_public_persistent_resource_uri(resource)

        LOGGER.debug(
            'The resource "%s" (%s) is not available in storage "%s", fetching & importing it.',
            resource.filename,
            resource.content_hash,
            storage_name,
        )
        self._importer.import_remote_resource(resource, storage)
        return self._target.get_public_persistent_resource_uri(resource)
