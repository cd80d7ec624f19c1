"""
コンテンツアドレス方式のファイルシステムストレージ。

レイアウト: ``<root>/<h0>/<h1>/<h2>/<h3>/<sha1>``
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import BinaryIO

from domain import PersistentResource, StoredResource
from domain.services import ResourceStorage, WritableResourceStorage

from .checksum import ChecksumCalculator
from .filesystem import LocalFileSystemStorageClient
from .storage_client import ObjectStorageClient, StorageError

LOGGER = logging.getLogger("resource_proxy.storage")

_TEMPORARY_DIRECTORY = ".tmp"


class FileSystemResourceStorage(ResourceStorage):
    """
    読み取り専用のファイルシステムストレージ。
    """

    def __init__(
        self,
        name: str,
        root: Path,
        *,
        storage_client: ObjectStorageClient | None = None,
    ) -> None:
        if not name:
            raise ValueError("storage name は必須です。")
        self._name = name
        self._root = Path(root)
        self._client = storage_client or LocalFileSystemStorageClient()

    @property
    def name(self) -> str:
        return self._name

    @property
    def root(self) -> Path:
        return self._root

    def get_stream(self, resource: PersistentResource) -> BinaryIO | None:
        path = self.resource_path(resource.content_hash)
        if not self._client.exists(path):
            return None
        try:
            return self._client.open_read(path)
        except StorageError:
            LOGGER.debug('Resource "%s" disappeared from storage "%s" while opening.', resource.content_hash, self._name)
            return None

    def resource_path(self, content_hash: str) -> Path:
        return self._root.joinpath(*content_hash[:4], content_hash)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, root={str(self._root)!r})"


class WritableFileSystemResourceStorage(FileSystemResourceStorage, WritableResourceStorage):
    """
    コンテンツのインポートに対応したファイルシステムストレージ。

    一時ファイルに書き込んでから原子的に配置するため、同一コンテンツの
    同時インポートは同じパス・同じ内容に収束する。
    """

    def __init__(
        self,
        name: str,
        root: Path,
        *,
        storage_client: ObjectStorageClient | None = None,
        checksum_calculator: ChecksumCalculator | None = None,
    ) -> None:
        super().__init__(name, root, storage_client=storage_client)
        self._checksum = checksum_calculator or ChecksumCalculator("sha1")

    def import_resource_from_content(self, content: bytes, collection_name: str) -> StoredResource:
        content_hash = self._checksum.from_bytes(content)
        target = self.resource_path(content_hash)

        if not self._client.exists(target):
            temporary = self._root / _TEMPORARY_DIRECTORY / f"{content_hash}.{uuid.uuid4().hex}"
            try:
                with self._client.open_write(temporary) as handle:
                    handle.write(content)
                self._client.move(temporary, target)
            except (OSError, StorageError):
                self._client.remove(temporary)
                raise
            LOGGER.debug('Stored content "%s" at "%s"', content_hash, target)

        return StoredResource(content_hash=content_hash, collection_name=collection_name, file_size=len(content))
