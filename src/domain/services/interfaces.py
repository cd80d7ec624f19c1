"""
リソース管理の主要インターフェース定義。

ストレージ・コレクション・公開ターゲットはホスト側の実装を想定し、
プロキシ層はここで定義したケイパビリティのみに依存する。
"""

from __future__ import annotations

from typing import BinaryIO, Protocol, runtime_checkable

from ..models import PersistentResource, StoredResource


@runtime_checkable
class ResourceStorage(Protocol):
    """
    リソースのストリームを提供する読み取り専用ストレージ。
    """

    @property
    def name(self) -> str:
        ...

    def get_stream(self, resource: PersistentResource) -> BinaryIO | None:
        """
        リソースのストリームを返す。存在しない場合は None。
        """

        ...


@runtime_checkable
class WritableResourceStorage(ResourceStorage, Protocol):
    """
    コンテンツからのインポートに対応したストレージ。
    """

    def import_resource_from_content(self, content: bytes, collection_name: str) -> StoredResource:
        """
        コンテンツをインポートする。同一コンテンツの同時インポートに対して安全であること。
        """

        ...


class PublicUriTarget(Protocol):
    """
    リソースの公開 URI を算出するターゲット。
    """

    def get_public_persistent_resource_uri(self, resource: PersistentResource) -> str:
        ...


class ResourceCollection(Protocol):
    """
    ストレージと公開ターゲットを束ねるコレクション。
    """

    @property
    def name(self) -> str:
        ...

    @property
    def storage(self) -> ResourceStorage:
        ...


class CollectionResolver(Protocol):
    """
    コレクション名からコレクションを解決するインターフェース。
    """

    def get_collection(self, name: str) -> ResourceCollection | None:
        ...


class RemoteResourceFetcher(Protocol):
    """
    リモートオリジンからリソースのバイト列を取得するインターフェース。
    """

    def fetch(self, resource: PersistentResource, storage_name: str) -> bytes | None:
        """
        取得に失敗した場合は例外を送出せず None を返す。
        """

        ...
