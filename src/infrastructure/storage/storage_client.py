"""
ローカルストレージへの抽象クライアント。
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Protocol


class StorageError(RuntimeError):
    """ストレージ操作に関する例外。"""


class ObjectStorageClient(Protocol):
    """
    リソースストレージが利用するファイル操作を定義。
    """

    def exists(self, path: Path) -> bool:
        ...

    def open_read(self, path: Path) -> BinaryIO:
        ...

    def open_write(self, path: Path) -> BinaryIO:
        ...

    def move(self, source: Path, destination: Path) -> None:
        """
        source を destination へ原子的に置き換える。
        """

        ...

    def remove(self, path: Path) -> None:
        ...
