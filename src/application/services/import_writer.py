"""
取得したコンテンツをローカルストレージへ書き込むコンポーネント。
"""

from __future__ import annotations

import logging

from application import observability
from domain import PersistentResource, StoredResource
from domain.services import ResourceStorage, WritableResourceStorage

LOGGER = logging.getLogger("resource_proxy.import_writer")


class ResourceImportWriter:
    """
    ストレージのインポート機能へ委譲する。重複排除はストレージ側の責務とする。
    """

    def write(self, content: bytes, resource: PersistentResource, storage: ResourceStorage) -> StoredResource | None:
        """
        Returns:
            StoredResource | None: インポート結果。ストレージが書き込み不可の場合は None。
        """

        if not isinstance(storage, WritableResourceStorage):
            LOGGER.info('The type of storage "%s" is not supported. Skipping fetching & importing.', storage.name)
            observability.metrics_recorder.increment_resource_import(storage.name, "skipped")
            return None

        stored = storage.import_resource_from_content(content, resource.collection_name)
        LOGGER.info(
            'Imported resource data "%s" (%s) into storage "%s"',
            resource.filename,
            resource.content_hash,
            storage.name,
        )
        observability.metrics_recorder.increment_resource_import(storage.name, "imported")
        return stored
