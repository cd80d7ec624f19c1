"""
リモート取得とインポートを組み合わせたリソース取り込み処理。
"""

from __future__ import annotations

import logging

from domain import PersistentResource, StoredResource
from domain.services import RemoteResourceFetcher, ResourceStorage

from .import_writer import ResourceImportWriter

LOGGER = logging.getLogger("resource_proxy.remote_import")


class RemoteResourceImporter:
    """
    リソースをリモートオリジンから取得し、指定ストレージへインポートする。

    取得失敗はソフトフェイルとして記録のみ行う。否定結果のキャッシュや
    同一リソースの同時取得の集約は行わない。
    """

    def __init__(self, fetcher: RemoteResourceFetcher, writer: ResourceImportWriter | None = None) -> None:
        self._fetcher = fetcher
        self._writer = writer or ResourceImportWriter()

    def import_remote_resource(self, resource: PersistentResource, storage: ResourceStorage) -> StoredResource | None:
        content = self._fetcher.fetch(resource, storage.name)
        if content is None:
            LOGGER.info('Could not fetch resource data for "%s".', resource.content_hash)
            return None
        return self._writer.write(content, resource, storage)
