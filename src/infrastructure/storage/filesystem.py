"""
ローカルファイルシステムを ObjectStorageClient として扱う実装。
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO

from .storage_client import ObjectStorageClient, StorageError


class LocalFileSystemStorageClient(ObjectStorageClient):
    """
    リソースストレージの既定のバックエンド。
    """

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def open_read(self, path: Path) -> BinaryIO:
        resolved = Path(path)
        if not resolved.is_file():
            raise StorageError(f"ファイルが存在しません: {resolved}")
        return resolved.open("rb")

    def open_write(self, path: Path) -> BinaryIO:
        resolved = Path(path)
        resolved.parent.mkdir(parents=True, exist_ok=True)
        return resolved.open("wb")

    def move(self, source: Path, destination: Path) -> None:
        target = Path(destination)
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            os.replace(source, target)
        except OSError as exc:
            raise StorageError(f"ファイルの移動に失敗しました: {source} -> {target}") from exc

    def remove(self, path: Path) -> None:
        Path(path).unlink(missing_ok=True)
